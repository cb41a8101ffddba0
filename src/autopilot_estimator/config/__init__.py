from .settings import Settings, KubernetesSettings, BillingSettings, EstimationSettings

__all__ = ["Settings", "KubernetesSettings", "BillingSettings", "EstimationSettings"]
