from .k8s_client import KubernetesClient

__all__ = ["KubernetesClient"]
