"""Turn Autopilot billing catalog SKUs into a region's price table."""

from collections import defaultdict
from typing import Dict, Iterable, NamedTuple, Optional
import structlog

from autopilot_estimator.core.models import (
    CatalogSku,
    ComputeClass,
    PriceKey,
    RegionPricing,
    ResourcePrice,
)

logger = structlog.get_logger(__name__)

NANOS_PER_UNIT = 1_000_000_000

CPU = "cpu"
MEMORY = "memory"
STORAGE = "storage"


class PriceField(NamedTuple):
    """Where a SKU's unit price lands in the region price table."""
    key: Optional[PriceKey]
    component: str


_REGULAR = PriceKey(ComputeClass.REGULAR, False)
_BALANCED = PriceKey(ComputeClass.BALANCED, False)
_SCALE_OUT = PriceKey(ComputeClass.SCALE_OUT, False)
_SCALE_OUT_ARM = PriceKey(ComputeClass.SCALE_OUT_ARM, False)
_SPOT_REGULAR = PriceKey(ComputeClass.REGULAR, True)
_SPOT_BALANCED = PriceKey(ComputeClass.BALANCED, True)
_SPOT_SCALE_OUT = PriceKey(ComputeClass.SCALE_OUT, True)
_SPOT_SCALE_OUT_ARM = PriceKey(ComputeClass.SCALE_OUT_ARM, True)

# SKU description templates, matched exactly once the region is filled in
SKU_DESCRIPTION_TABLE: Dict[str, PriceField] = {
    "Autopilot Pod Ephemeral Storage Requests ({region})": PriceField(None, STORAGE),

    "Autopilot Pod mCPU Requests ({region})": PriceField(_REGULAR, CPU),
    "Autopilot Pod Memory Requests ({region})": PriceField(_REGULAR, MEMORY),
    "Autopilot Balanced Pod mCPU Requests ({region})": PriceField(_BALANCED, CPU),
    "Autopilot Balanced Pod Memory Requests ({region})": PriceField(_BALANCED, MEMORY),
    "Autopilot Scale-Out x86 Pod mCPU Requests ({region})": PriceField(_SCALE_OUT, CPU),
    "Autopilot Scale-Out x86 Pod Memory Requests ({region})": PriceField(_SCALE_OUT, MEMORY),
    "Autopilot Scale-Out Arm Pod mCPU Requests ({region})": PriceField(_SCALE_OUT_ARM, CPU),
    "Autopilot Scale-Out Arm Pod Memory Requests ({region})": PriceField(_SCALE_OUT_ARM, MEMORY),

    "Autopilot Spot Pod mCPU Requests ({region})": PriceField(_SPOT_REGULAR, CPU),
    "Autopilot Spot Pod Memory Requests ({region})": PriceField(_SPOT_REGULAR, MEMORY),
    "Autopilot Balanced Spot Pod mCPU Requests ({region})": PriceField(_SPOT_BALANCED, CPU),
    "Autopilot Balanced Spot Pod Memory Requests ({region})": PriceField(_SPOT_BALANCED, MEMORY),
    "Autopilot Scale-Out x86 Spot Pod mCPU Requests ({region})": PriceField(_SPOT_SCALE_OUT, CPU),
    "Autopilot Scale-Out x86 Spot Pod Memory Requests ({region})": PriceField(_SPOT_SCALE_OUT, MEMORY),
    "Autopilot Scale-Out Arm Spot Pod mCPU Requests ({region})": PriceField(_SPOT_SCALE_OUT_ARM, CPU),
    "Autopilot Scale-Out Arm Spot Pod Memory Requests ({region})": PriceField(_SPOT_SCALE_OUT_ARM, MEMORY),
}


def unit_price(units: int, nanos: int, display_quantity: float = 1.0) -> float:
    """Decimal price per unit resource hour from a catalog tiered rate."""
    return (units * NANOS_PER_UNIT + nanos * display_quantity) / NANOS_PER_UNIT


def routes_for_region(region: str) -> Dict[str, PriceField]:
    """Description table with the region substituted in."""
    return {
        template.format(region=region): field
        for template, field in SKU_DESCRIPTION_TABLE.items()
    }


def build_region_pricing(skus: Iterable[CatalogSku], region: str) -> RegionPricing:
    """Collect the Autopilot unit prices offered in ``region``.

    SKUs outside the region or with an unknown description are ignored.
    Prices never seen stay absent and read as zero.
    """
    routes = routes_for_region(region)
    storage_price = 0.0
    components: Dict[PriceKey, Dict[str, float]] = defaultdict(dict)
    matched = 0

    for sku in skus:
        if region not in sku.service_regions:
            continue

        field = routes.get(sku.description)
        if field is None:
            continue

        value = unit_price(sku.units, sku.nanos, sku.display_quantity)
        matched += 1

        if field.component == STORAGE:
            storage_price = value
        else:
            components[field.key][field.component] = value

    pricing = RegionPricing(
        region=region,
        storage_price=storage_price,
        prices={key: ResourcePrice(**parts) for key, parts in components.items()},
    )

    missing = [
        f"{key.compute_class.value}{' spot' if key.spot else ''}"
        for key in {field.key for field in SKU_DESCRIPTION_TABLE.values() if field.key}
        if not pricing.get(key.compute_class, key.spot).is_complete
    ]
    logger.info(
        "Built Autopilot region pricing",
        region=region,
        matched_skus=matched,
        unpriced=sorted(missing),
    )
    return pricing
