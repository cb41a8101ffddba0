"""Custom exceptions for the Autopilot estimator."""

from typing import Optional, Dict, Any


class EstimatorException(Exception):
    """Base exception for the Autopilot estimator."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class DiscoveryException(EstimatorException):
    """Raised when cluster discovery or metrics collection fails."""

    def __init__(self, discovery_type: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.discovery_type = discovery_type
        super().__init__(f"Discovery failed for {discovery_type}: {message}", details)


class ClientConnectionException(EstimatorException):
    """Raised when client connections fail."""

    def __init__(self, client_type: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.client_type = client_type
        super().__init__(f"{client_type} connection failed: {message}", details)


class PricingException(EstimatorException):
    """Raised when the price catalog cannot be fetched or holds nothing for a region."""

    def __init__(self, region: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.region = region
        super().__init__(f"Pricing unavailable for {region}: {message}", details)


class DataValidationException(EstimatorException):
    """Raised when collaborator data fails validation."""

    def __init__(self, field: str, value: Any, message: str):
        self.field = field
        self.value = value
        super().__init__(f"Validation failed for {field}: {message}")


class ConfigurationException(EstimatorException):
    """Raised when configuration is invalid."""
    pass
