"""Pod metrics mapping utilities."""

import math
from typing import Dict, Any, List, Optional
import structlog
from kubernetes.utils import parse_quantity

from autopilot_estimator.core.exceptions import DataValidationException
from autopilot_estimator.core.models import WorkloadUsage

logger = structlog.get_logger(__name__)

BYTES_PER_MIB = 1_000_000


class UsageMapper:
    """Maps metrics.k8s.io pod metrics to WorkloadUsage records."""

    def map_pod_metrics(self, pod_metrics: Dict[str, Any], node_name: Optional[str]) -> WorkloadUsage:
        """Sum the usage of every container in the pod."""
        metadata = pod_metrics.get('metadata', {})
        name = metadata.get('name')
        if not name:
            raise DataValidationException('metadata.name', metadata, "pod metrics without a name")

        cpu_milli = 0
        memory_mib = 0
        storage_mib = 0
        containers = pod_metrics.get('containers') or []

        for container in containers:
            usage = container.get('usage') or {}
            cpu_milli += self._parse_cpu(usage.get('cpu'))
            memory_mib += self._parse_mib(usage.get('memory'))
            storage_mib += self._parse_mib(usage.get('ephemeral-storage'))

        return WorkloadUsage(
            name=name,
            namespace=metadata.get('namespace', 'default'),
            node_name=node_name,
            cpu_milli=cpu_milli,
            memory_mib=memory_mib,
            storage_mib=storage_mib,
            containers=len(containers),
        )

    def map_pod_metrics_list(
        self,
        items: List[Dict[str, Any]],
        pod_nodes: Dict[tuple, str]
    ) -> List[WorkloadUsage]:
        """Map a metrics list, resolving each pod's node by (namespace, name)."""
        records = []
        for item in items:
            metadata = item.get('metadata', {})
            node_name = pod_nodes.get((metadata.get('namespace'), metadata.get('name')))
            records.append(self.map_pod_metrics(item, node_name))

        logger.debug("Mapped pod metrics", pods=len(records), unscheduled=sum(1 for r in records if r.node_name is None))
        return records

    def _parse_cpu(self, quantity: Optional[str]) -> int:
        """Parse a CPU quantity to millicores, rounding up."""
        if not quantity:
            return 0
        return int(math.ceil(parse_quantity(quantity) * 1000))

    def _parse_mib(self, quantity: Optional[str]) -> int:
        """Parse a byte quantity to MiB as Autopilot counts them here (10^6 bytes)."""
        if not quantity:
            return 0
        return int(parse_quantity(quantity)) // BYTES_PER_MIB
