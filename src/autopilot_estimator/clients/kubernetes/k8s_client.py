# src/autopilot_estimator/clients/kubernetes/k8s_client.py
"""Kubernetes client for node inventory and pod usage metrics."""

from typing import Dict, Any, List, Optional, Tuple
import yaml
import structlog
from kubernetes import client, config
from kubernetes.client.rest import ApiException

from autopilot_estimator.core.base_client import BaseClient
from autopilot_estimator.core.exceptions import ClientConnectionException, DiscoveryException
from autopilot_estimator.core.models import ClusterContext, Node
from autopilot_estimator.core.utils import region_from_location, retry_with_backoff

logger = structlog.get_logger(__name__)

INSTANCE_TYPE_LABELS = ('node.kubernetes.io/instance-type', 'beta.kubernetes.io/instance-type')
REGION_LABELS = ('topology.kubernetes.io/region', 'failure-domain.beta.kubernetes.io/region')
ZONE_LABELS = ('topology.kubernetes.io/zone', 'failure-domain.beta.kubernetes.io/zone')
SPOT_LABELS = ('cloud.google.com/gke-spot', 'cloud.google.com/gke-preemptible')

METRICS_GROUP = "metrics.k8s.io"
METRICS_VERSION = "v1beta1"


class KubernetesClient(BaseClient):
    """Kubernetes client supplying nodes and per-pod usage to the estimator."""

    def __init__(self,
                 config_dict: Dict[str, Any],
                 kubeconfig_path: Optional[str] = None,
                 context: Optional[str] = None,
                 kubeconfig_data: Optional[bytes] = None):
        super().__init__(config_dict, "KubernetesClient")
        self.kubeconfig_path = kubeconfig_path
        self.context = context
        self.kubeconfig_data = kubeconfig_data
        self.excluded_namespaces = list(config_dict.get("excluded_namespaces", []))

        # API clients
        self.v1 = None
        self.custom_objects = None

    async def connect(self) -> None:
        """Connect to Kubernetes cluster."""
        try:
            if self.kubeconfig_data:
                kubeconfig_dict = yaml.safe_load(self.kubeconfig_data.decode('utf-8'))
                config.load_kube_config_from_dict(kubeconfig_dict, context=self.context)
                self.logger.info("Loaded kubeconfig from provided data")
            elif self.kubeconfig_path:
                config.load_kube_config(config_file=self.kubeconfig_path, context=self.context)
                self.logger.info(f"Loaded kubeconfig from {self.kubeconfig_path}")
            else:
                config.load_kube_config(context=self.context)
                self.logger.info("Loaded default kubeconfig")

            self.v1 = client.CoreV1Api()
            self.custom_objects = client.CustomObjectsApi()

            self._connected = True

        except Exception as e:
            raise ClientConnectionException("Kubernetes", f"Connection failed: {e}")

    async def disconnect(self) -> None:
        """Disconnect from Kubernetes cluster."""
        self._connected = False
        self.logger.info("Kubernetes client disconnected")

    async def health_check(self) -> bool:
        """Check Kubernetes client health."""
        try:
            if not self._connected or not self.v1:
                return False
            self.v1.get_api_resources()
            return True
        except Exception as e:
            self.logger.warning("Kubernetes health check failed", error=str(e))
            return False

    def current_context(self) -> ClusterContext:
        """Parse the active GKE context, ``gke_<project>_<location>_<cluster>``."""
        name = self._context_name()
        parts = name.split("_", 3)
        if len(parts) != 4 or parts[0] != "gke":
            raise DiscoveryException("Kubernetes", f"Context {name!r} is not a GKE context")

        _, project, location, cluster_name = parts
        return ClusterContext(
            project=project,
            location=location,
            region=region_from_location(location),
            cluster_name=cluster_name,
        )

    def _context_name(self) -> str:
        if self.context:
            return self.context

        try:
            if self.kubeconfig_data:
                kubeconfig_dict = yaml.safe_load(self.kubeconfig_data.decode('utf-8'))
                return kubeconfig_dict.get('current-context', '')
            _, active_context = config.list_kube_config_contexts(config_file=self.kubeconfig_path)
            return active_context['name']
        except Exception as e:
            raise DiscoveryException("Kubernetes", f"Failed to read current context: {e}")

    @retry_with_backoff(max_retries=3)
    async def discover_nodes(self) -> Dict[str, Node]:
        """Discover cluster nodes keyed by name."""
        if not self._connected:
            raise DiscoveryException("Kubernetes", "Client not connected")

        try:
            nodes = {}
            for node in self.v1.list_node().items:
                labels = node.metadata.labels or {}
                nodes[node.metadata.name] = Node(
                    name=node.metadata.name,
                    instance_type=self._first_label(labels, INSTANCE_TYPE_LABELS) or 'Unknown',
                    region=self._node_region(labels),
                    spot=any(labels.get(label) == 'true' for label in SPOT_LABELS),
                )

            self.logger.info(f"Discovered {len(nodes)} nodes")
            return nodes

        except ApiException as e:
            raise DiscoveryException("Kubernetes", f"Failed to discover nodes: {e}")

    @retry_with_backoff(max_retries=3)
    async def discover_pod_nodes(self) -> Dict[Tuple[str, str], str]:
        """Map each scheduled pod, by (namespace, name), to its node."""
        if not self._connected:
            raise DiscoveryException("Kubernetes", "Client not connected")

        try:
            pod_nodes = {}
            for pod in self.v1.list_pod_for_all_namespaces().items:
                if pod.spec and pod.spec.node_name:
                    pod_nodes[(pod.metadata.namespace, pod.metadata.name)] = pod.spec.node_name

            self.logger.info(f"Resolved nodes of {len(pod_nodes)} pods")
            return pod_nodes

        except ApiException as e:
            raise DiscoveryException("Kubernetes", f"Failed to discover pods: {e}")

    @retry_with_backoff(max_retries=3)
    async def discover_pod_metrics(self) -> List[Dict[str, Any]]:
        """Current pod usage from metrics.k8s.io, excluding system namespaces."""
        if not self._connected:
            raise DiscoveryException("Kubernetes", "Client not connected")

        field_selector = ",".join(f"metadata.namespace!={ns}" for ns in self.excluded_namespaces)

        try:
            response = self.custom_objects.list_cluster_custom_object(
                METRICS_GROUP, METRICS_VERSION, "pods", field_selector=field_selector
            )
            items = [
                item for item in response.get('items', [])
                if item.get('metadata', {}).get('namespace') not in self.excluded_namespaces
            ]

            self.logger.info(f"Collected metrics of {len(items)} pods")
            return items

        except ApiException as e:
            raise DiscoveryException("Kubernetes", f"Failed to collect pod metrics: {e}")

    def _node_region(self, labels: Dict[str, str]) -> str:
        region = self._first_label(labels, REGION_LABELS)
        if region:
            return region
        zone = self._first_label(labels, ZONE_LABELS)
        return region_from_location(zone) if zone else 'Unknown'

    @staticmethod
    def _first_label(labels: Dict[str, str], keys: Tuple[str, ...]) -> Optional[str]:
        for key in keys:
            if labels.get(key):
                return labels[key]
        return None
