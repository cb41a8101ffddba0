# src/autopilot_estimator/clients/billing/catalog_client.py
"""Cloud Billing catalog client for Autopilot unit prices."""

from typing import Dict, Any, List
import structlog
from google.api_core.exceptions import GoogleAPIError
from google.cloud import billing_v1

from autopilot_estimator.core.base_client import BaseClient
from autopilot_estimator.core.constants import SERVICE_AUTOPILOT
from autopilot_estimator.core.exceptions import ClientConnectionException, PricingException
from autopilot_estimator.core.models import CatalogSku, RegionPricing
from autopilot_estimator.core.utils import retry_with_backoff
from autopilot_estimator.mappers.sku_mapper import SkuMapper
from autopilot_estimator.pricing.catalog import build_region_pricing

logger = structlog.get_logger(__name__)


class CatalogClient(BaseClient):
    """Reads the public SKU catalog of the Autopilot billing service."""

    def __init__(self, config: Dict[str, Any]):
        super().__init__(config, "CatalogClient")
        self.service_id = config.get("service_id", SERVICE_AUTOPILOT)
        self.currency_code = config.get("currency_code", "USD")
        self.mapper = SkuMapper()
        self._client = None

    async def connect(self) -> None:
        """Create the Cloud Catalog client with application default credentials."""
        try:
            self._client = billing_v1.CloudCatalogClient()
            self._connected = True
            self.logger.info("Cloud Billing catalog client connected successfully")
        except Exception as e:
            raise ClientConnectionException("CloudBilling", f"Connection failed: {e}")

    async def disconnect(self) -> None:
        """Close the underlying transport."""
        if self._client:
            self._client.transport.close()
            self._connected = False
            self.logger.info("Cloud Billing catalog client disconnected")

    async def health_check(self) -> bool:
        """Check the catalog answers a minimal query."""
        try:
            if not self._connected or not self._client:
                return False
            request = billing_v1.ListServicesRequest(page_size=1)
            next(iter(self._client.list_services(request=request)), None)
            return True
        except Exception as e:
            self.logger.warning("Cloud Billing health check failed", error=str(e))
            return False

    @retry_with_backoff(max_retries=3)
    async def list_skus(self) -> List[CatalogSku]:
        """All priced SKUs of the Autopilot service."""
        if not self._connected:
            raise PricingException("all regions", "Catalog client not connected")

        request = billing_v1.ListSkusRequest(
            parent=f"services/{self.service_id}",
            currency_code=self.currency_code,
        )

        try:
            skus = self.mapper.map_skus(self._client.list_skus(request=request))
        except GoogleAPIError as e:
            self.logger.error("Failed to fetch cloud billing prices", error=str(e))
            raise PricingException("all regions", f"Unable to fetch cloud billing prices: {e}")

        self.logger.info(f"Fetched {len(skus)} Autopilot SKUs", service=self.service_id)
        return skus

    async def get_region_pricing(self, region: str) -> RegionPricing:
        """Autopilot price table of one region."""
        pricing = build_region_pricing(await self.list_skus(), region)
        if pricing.is_empty:
            raise PricingException(region, "no Autopilot SKUs are offered in this region")
        return pricing
