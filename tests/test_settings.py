"""Tests for environment driven settings."""
import pytest
from pydantic import ValidationError

from autopilot_estimator.config import EstimationSettings, Settings
from autopilot_estimator.config.settings import LogFormat, LogLevel


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("LOG_LEVEL", "LOG_FORMAT", "K8S_CONTEXT", "K8S_EXCLUDED_NAMESPACES",
                 "BILLING_REGION", "ESTIMATION_CLUSTER_FEE", "ESTIMATION_ONE_YEAR_DISCOUNT",
                 "ESTIMATION_ARM_TYPE_PREFIX"):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = Settings(_env_file=None)

    assert settings.log_level == LogLevel.INFO
    assert settings.log_format == LogFormat.TEXT
    assert settings.kubernetes.excluded_namespaces == ["kube-system", "gke-gmp-system"]
    assert settings.billing.service_id == "CCD8-9BF1-090E"
    assert settings.billing.region is None
    assert settings.estimation.cluster_fee == 0.1
    assert settings.estimation.one_year_discount == 0.8
    assert settings.estimation.three_year_discount == 0.55
    assert settings.estimation.arm_type_prefix == "t2a-"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("LOG_FORMAT", "JSON")
    monkeypatch.setenv("K8S_CONTEXT", "gke_p_us-central1-a_c")
    monkeypatch.setenv("K8S_EXCLUDED_NAMESPACES", '["kube-system"]')
    monkeypatch.setenv("BILLING_REGION", "europe-west4")
    monkeypatch.setenv("ESTIMATION_CLUSTER_FEE", "0")
    monkeypatch.setenv("ESTIMATION_ARM_TYPE_PREFIX", "c4a-")

    settings = Settings.create_from_env()

    assert settings.log_level == LogLevel.DEBUG
    assert settings.log_format == LogFormat.JSON
    assert settings.kubernetes.context == "gke_p_us-central1-a_c"
    assert settings.kubernetes.excluded_namespaces == ["kube-system"]
    assert settings.billing.region == "europe-west4"
    assert settings.estimation.cluster_fee == 0
    assert settings.estimation.arm_type_prefix == "c4a-"


@pytest.mark.parametrize("discount", [0, -0.2, 1.5])
def test_discounts_must_be_multipliers(discount):
    with pytest.raises(ValidationError):
        EstimationSettings(one_year_discount=discount)


def test_negative_cluster_fee_is_rejected():
    with pytest.raises(ValidationError):
        EstimationSettings(cluster_fee=-1)
