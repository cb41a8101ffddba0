from .exceptions import *
from .base_client import BaseClient
from .utils import retry_with_backoff, setup_logging

__all__ = [
    "BaseClient",
    "EstimatorException",
    "DiscoveryException",
    "ClientConnectionException",
    "PricingException",
    "DataValidationException",
    "ConfigurationException",
    "retry_with_backoff",
    "setup_logging",
]
