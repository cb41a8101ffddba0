from .billing.catalog_client import CatalogClient
from .kubernetes.k8s_client import KubernetesClient

__all__ = ["CatalogClient", "KubernetesClient"]
