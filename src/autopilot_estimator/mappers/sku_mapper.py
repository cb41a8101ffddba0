"""Billing catalog SKU mapping utilities."""

from typing import Any, Iterable, List, Optional
import structlog

from autopilot_estimator.core.models import CatalogSku

logger = structlog.get_logger(__name__)


class SkuMapper:
    """Maps Cloud Billing catalog SKUs to CatalogSku records."""

    def map_sku(self, sku: Any) -> Optional[CatalogSku]:
        """Map one catalog SKU using its first pricing info and first tiered rate."""
        pricing_info = list(getattr(sku, "pricing_info", None) or [])
        if not pricing_info:
            logger.debug("Skipping SKU without pricing info", sku=getattr(sku, "sku_id", ""))
            return None

        expression = pricing_info[0].pricing_expression
        tiered_rates = list(expression.tiered_rates or [])
        if not tiered_rates:
            logger.debug("Skipping SKU without tiered rates", sku=getattr(sku, "sku_id", ""))
            return None

        unit_price = tiered_rates[0].unit_price
        return CatalogSku(
            sku_id=getattr(sku, "sku_id", "") or "",
            description=sku.description,
            service_regions=list(sku.service_regions or []),
            units=int(unit_price.units or 0),
            nanos=int(unit_price.nanos or 0),
            display_quantity=float(expression.display_quantity or 1.0),
        )

    def map_skus(self, skus: Iterable[Any]) -> List[CatalogSku]:
        mapped = []
        for sku in skus:
            catalog_sku = self.map_sku(sku)
            if catalog_sku is not None:
                mapped.append(catalog_sku)
        return mapped
