# config/settings.py
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List
from enum import Enum
from dotenv import load_dotenv

from autopilot_estimator.core.constants import (
    ARM_TYPE_PREFIX,
    CLUSTER_FEE,
    ONE_YEAR_DISCOUNT,
    SERVICE_AUTOPILOT,
    THREE_YEAR_DISCOUNT,
)

# Load .env file explicitly
load_dotenv()


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    JSON = "json"
    TEXT = "text"


class KubernetesSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="K8S_")

    kubeconfig_path: Optional[str] = Field(None, description="Path to kubeconfig file")
    context: Optional[str] = Field(None, description="Kubernetes context to use")
    excluded_namespaces: List[str] = Field(
        default_factory=lambda: ["kube-system", "gke-gmp-system"],
        description="Namespaces whose pods are left out of the estimate"
    )


class BillingSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="BILLING_")

    service_id: str = Field(SERVICE_AUTOPILOT, description="Cloud Billing service id of GKE Autopilot")
    currency_code: str = Field("USD", description="Currency of the catalog prices")
    region: Optional[str] = Field(None, description="Region override, otherwise taken from the kube context")


class EstimationSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="ESTIMATION_")

    cluster_fee: float = Field(CLUSTER_FEE, ge=0, description="Flat cluster management fee per hour")
    one_year_discount: float = Field(ONE_YEAR_DISCOUNT, description="Price multiplier under a 1 year commitment")
    three_year_discount: float = Field(THREE_YEAR_DISCOUNT, description="Price multiplier under a 3 year commitment")
    arm_type_prefix: str = Field(ARM_TYPE_PREFIX, description="Machine type prefix of Arm nodes")

    @field_validator('one_year_discount', 'three_year_discount')
    @classmethod
    def validate_discount(cls, v):
        if not 0 < v <= 1:
            raise ValueError("discount multiplier must be in (0, 1]")
        return v


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    debug: bool = Field(False, description="Debug mode")
    log_level: LogLevel = Field(LogLevel.INFO, description="Log level")
    log_format: LogFormat = Field(LogFormat.TEXT, description="Log format (json or text)")
    log_config_path: Optional[str] = Field(None, description="YAML logging dictConfig file")

    kubernetes: KubernetesSettings = Field(default_factory=lambda: KubernetesSettings())
    billing: BillingSettings = Field(default_factory=lambda: BillingSettings())
    estimation: EstimationSettings = Field(default_factory=lambda: EstimationSettings())

    @field_validator('log_level', mode='before')
    @classmethod
    def validate_log_level(cls, v):
        if isinstance(v, str):
            return LogLevel(v.upper())
        return v

    @field_validator('log_format', mode='before')
    @classmethod
    def validate_log_format(cls, v):
        if isinstance(v, str):
            return LogFormat(v.lower())
        return v

    @classmethod
    def create_from_env(cls) -> "Settings":
        """Create settings instance from environment variables."""
        return cls()
