# src/autopilot_estimator/discovery/estimation_orchestrator.py
"""Orchestrator running one Autopilot migration estimate end to end."""

from typing import Dict, Any, Optional
import structlog
from datetime import datetime, timezone

from autopilot_estimator.clients.billing.catalog_client import CatalogClient
from autopilot_estimator.clients.kubernetes.k8s_client import KubernetesClient
from autopilot_estimator.core.constants import (
    ARM_TYPE_PREFIX,
    CLUSTER_FEE,
    ONE_YEAR_DISCOUNT,
    THREE_YEAR_DISCOUNT,
)
from autopilot_estimator.core.exceptions import DiscoveryException, EstimatorException
from autopilot_estimator.core.models import EstimationResult
from autopilot_estimator.mappers.usage_mapper import UsageMapper
from autopilot_estimator.pricing.engine import aggregate, estimate_workloads

logger = structlog.get_logger(__name__)


class EstimationOrchestrator:
    """
    Coordinates the metrics source, the price catalog and the pricing core.

    Collaborators are fetched first; the pricing core then runs as a single
    pass over the discovered workloads followed by one aggregation step.
    """

    def __init__(self,
                 config: Dict[str, Any],
                 k8s_client: Optional[KubernetesClient] = None,
                 catalog_client: Optional[CatalogClient] = None):
        self.config = config
        self.k8s_config = config.get("kubernetes", {})
        self.billing_config = config.get("billing", {})
        self.estimation_config = config.get("estimation", {})

        self.k8s_client = k8s_client
        self.catalog_client = catalog_client
        self.usage_mapper = UsageMapper()

        self.logger = logger.bind(orchestrator="autopilot_estimation")

    async def initialize(self) -> None:
        """Create and connect the collaborator clients."""
        self.logger.info("Initializing estimation orchestrator")

        try:
            if self.k8s_client is None:
                self.k8s_client = KubernetesClient(
                    self.k8s_config,
                    kubeconfig_path=self.k8s_config.get("kubeconfig_path"),
                    context=self.k8s_config.get("context"),
                )
            if self.catalog_client is None:
                self.catalog_client = CatalogClient(self.billing_config)

            await self.k8s_client.connect()
            await self.catalog_client.connect()

        except EstimatorException:
            raise
        except Exception as e:
            self.logger.error("Failed to initialize estimation orchestrator", error=str(e))
            raise DiscoveryException("Orchestrator", f"Initialization failed: {e}")

    async def run_estimation(self) -> EstimationResult:
        """Price every running pod as if the cluster were on Autopilot."""
        if not self.k8s_client or not self.catalog_client:
            raise DiscoveryException("Orchestrator", "Orchestrator not initialized")

        start_time = datetime.now(timezone.utc)
        region_override = self.billing_config.get("region")

        try:
            context = self.k8s_client.current_context()
            cluster_name, region = context.cluster_name, context.region
        except DiscoveryException:
            if not region_override:
                raise
            cluster_name, region = "unknown", region_override

        region = region_override or region
        self.logger.info("Starting Autopilot estimation", cluster=cluster_name, region=region)

        pricing = await self.catalog_client.get_region_pricing(region)
        nodes = await self.k8s_client.discover_nodes()
        pod_nodes = await self.k8s_client.discover_pod_nodes()
        pod_metrics = await self.k8s_client.discover_pod_metrics()

        records = self.usage_mapper.map_pod_metrics_list(pod_metrics, pod_nodes)
        workloads = estimate_workloads(
            records,
            nodes,
            pricing,
            self.estimation_config.get("arm_type_prefix", ARM_TYPE_PREFIX),
        )
        summary = aggregate(
            nodes,
            workloads,
            cluster_fee=self.estimation_config.get("cluster_fee", CLUSTER_FEE),
            one_year_discount=self.estimation_config.get("one_year_discount", ONE_YEAR_DISCOUNT),
            three_year_discount=self.estimation_config.get("three_year_discount", THREE_YEAR_DISCOUNT),
        )

        duration = (datetime.now(timezone.utc) - start_time).total_seconds()
        self.logger.info(
            "Autopilot estimation completed",
            duration_seconds=duration,
            nodes=len(nodes),
            workloads=len(workloads),
            total_cost=summary.total,
        )

        return EstimationResult(
            cluster_name=cluster_name,
            region=region,
            nodes=nodes,
            workloads=workloads,
            summary=summary,
        )

    async def cleanup(self) -> None:
        """Disconnect all clients."""
        self.logger.info("Cleaning up estimation orchestrator")

        for collaborator in (self.k8s_client, self.catalog_client):
            if collaborator is None or not collaborator.is_connected:
                continue
            try:
                await collaborator.disconnect()
            except Exception as e:
                self.logger.warning("Error during cleanup", client=collaborator.name, error=str(e))

    async def __aenter__(self):
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.cleanup()
