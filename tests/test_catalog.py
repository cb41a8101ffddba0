"""Tests for catalog SKU routing into region prices."""
import pytest
from structlog.testing import capture_logs

from autopilot_estimator.core.models import CatalogSku, ComputeClass
from autopilot_estimator.pricing.catalog import (
    SKU_DESCRIPTION_TABLE,
    build_region_pricing,
    routes_for_region,
    unit_price,
)

from conftest import FLOAT_TOLERANCE

REGION = "us-central1"


def sku(description, nanos, regions=(REGION,), units=0, display_quantity=1.0):
    return CatalogSku(
        description=description.format(region=REGION),
        service_regions=list(regions),
        units=units,
        nanos=nanos,
        display_quantity=display_quantity,
    )


def test_unit_price_combines_units_and_nanos():
    assert unit_price(0, 57300000) == pytest.approx(0.0573, abs=FLOAT_TOLERANCE)
    assert unit_price(1, 500000000) == pytest.approx(1.5, abs=FLOAT_TOLERANCE)
    assert unit_price(0, 70600, display_quantity=1.0) == pytest.approx(0.0000706, abs=FLOAT_TOLERANCE)


def test_display_quantity_scales_nanos_only():
    assert unit_price(2, 1000000, display_quantity=10) == pytest.approx(2.01, abs=FLOAT_TOLERANCE)


def test_table_covers_storage_and_every_class_in_both_modes():
    fields = set(SKU_DESCRIPTION_TABLE.values())
    assert len(SKU_DESCRIPTION_TABLE) == 17
    for compute_class in ComputeClass:
        for spot in (False, True):
            components = {f.component for f in fields if f.key == (compute_class, spot)}
            assert components == {"cpu", "memory"}
    assert any(f.key is None and f.component == "storage" for f in fields)


def test_routes_substitute_the_region():
    routes = routes_for_region("europe-west4")
    assert "Autopilot Pod mCPU Requests (europe-west4)" in routes
    assert all("{region}" not in description for description in routes)


def test_build_region_pricing_routes_descriptions():
    skus = [
        sku("Autopilot Pod Ephemeral Storage Requests ({region})", 70600),
        sku("Autopilot Pod mCPU Requests ({region})", 57300000),
        sku("Autopilot Pod Memory Requests ({region})", 6342100),
        sku("Autopilot Balanced Spot Pod mCPU Requests ({region})", 24900000),
        sku("Autopilot Balanced Spot Pod Memory Requests ({region})", 2758000),
        sku("Autopilot Scale-Out Arm Pod mCPU Requests ({region})", 53500000),
        sku("Autopilot Scale-Out Arm Spot Pod Memory Requests ({region})", 1777400),
    ]

    pricing = build_region_pricing(skus, REGION)

    assert pricing.region == REGION
    assert pricing.storage_price == pytest.approx(0.0000706, abs=FLOAT_TOLERANCE)
    regular = pricing.get(ComputeClass.REGULAR, False)
    assert (regular.cpu, regular.memory) == pytest.approx((0.0573, 0.0063421), abs=FLOAT_TOLERANCE)
    balanced_spot = pricing.get(ComputeClass.BALANCED, True)
    assert (balanced_spot.cpu, balanced_spot.memory) == pytest.approx((0.0249, 0.002758), abs=FLOAT_TOLERANCE)

    arm = pricing.get(ComputeClass.SCALE_OUT_ARM, False)
    assert arm.cpu == pytest.approx(0.0535, abs=FLOAT_TOLERANCE)
    assert arm.memory == 0
    assert pricing.get(ComputeClass.SCALE_OUT_ARM, True).cpu == 0


def test_skus_of_other_regions_and_services_are_ignored():
    skus = [
        sku("Autopilot Pod mCPU Requests ({region})", 57300000, regions=("europe-west4",)),
        sku("Autopilot Pod Memory Requests ({region})", 6342100),
        CatalogSku(description="Autopilot Pod mCPU Requests (europe-west4)",
                   service_regions=[REGION], nanos=99000000),
        sku("Autopilot Pod GPU Requests ({region})", 1000000),
    ]

    pricing = build_region_pricing(skus, REGION)

    regular = pricing.get(ComputeClass.REGULAR, False)
    assert regular.cpu == 0
    assert regular.memory == pytest.approx(0.0063421, abs=FLOAT_TOLERANCE)


def test_missing_prices_read_as_zero():
    pricing = build_region_pricing([], REGION)
    assert pricing.is_empty
    for compute_class in ComputeClass:
        assert pricing.get(compute_class, True).cpu == 0
        assert pricing.get(compute_class, False).memory == 0


def test_unpriced_pairs_are_logged():
    skus = [
        sku("Autopilot Pod mCPU Requests ({region})", 57300000),
        sku("Autopilot Pod Memory Requests ({region})", 6342100),
    ]
    with capture_logs() as logs:
        build_region_pricing(skus, REGION)

    (entry,) = [e for e in logs if e["event"] == "Built Autopilot region pricing"]
    assert entry["matched_skus"] == 2
    assert "Regular" not in entry["unpriced"]
    assert "Scale-Out Arm spot" in entry["unpriced"]
