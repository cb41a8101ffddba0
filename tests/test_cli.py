"""Tests for the autopilot-estimate command."""
import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner
from structlog.testing import capture_logs

from autopilot_estimator.cli import estimate
from autopilot_estimator.core.exceptions import PricingException
from autopilot_estimator.core.models import EstimationResult
from autopilot_estimator.pricing.engine import aggregate

from conftest import make_workload


class StubOrchestrator:
    """Stands in for the orchestrator and records the config it was built with."""

    configs = []
    result = None
    error = None

    def __init__(self, config):
        StubOrchestrator.configs.append(config)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return None

    async def run_estimation(self):
        if StubOrchestrator.error:
            raise StubOrchestrator.error
        return StubOrchestrator.result


@pytest.fixture
def stub(nodes):
    workloads = [make_workload("web", "pool-default-1", 0.3313796)]
    summary = aggregate(nodes, workloads)
    StubOrchestrator.configs = []
    StubOrchestrator.error = None
    StubOrchestrator.result = EstimationResult(
        cluster_name="prod", region="test-region-1", nodes=nodes, workloads=workloads, summary=summary
    )
    with patch("autopilot_estimator.cli.EstimationOrchestrator", StubOrchestrator), \
            patch("autopilot_estimator.cli.setup_logging"), capture_logs() as logs:
        StubOrchestrator.logs = logs
        yield StubOrchestrator


def test_prints_tables(stub):
    result = CliRunner().invoke(estimate, [])

    assert result.exit_code == 0
    assert "Total nodes at test-region-1: 3" in result.output
    assert "Total workloads on prod: 1" in result.output
    assert "Total cost per cluster per hour" in result.output
    assert "0.4313796" in result.output


def test_quiet_prints_nothing(stub):
    result = CliRunner().invoke(estimate, ["--quiet"])
    assert result.exit_code == 0
    assert result.output == ""


def test_json_file_is_written(stub, tmp_path):
    path = tmp_path / "estimate.json"
    result = CliRunner().invoke(estimate, ["--quiet", "--json", "--json-file", str(path)])

    assert result.exit_code == 0
    document = json.loads(path.read_text())
    assert document["pool-default-1"]["workloads"][0]["name"] == "web"


def test_overrides_reach_the_orchestrator(stub):
    CliRunner().invoke(estimate, ["--quiet", "--region", "europe-west4", "--context", "gke_p_europe-west4-a_c"])

    (config,) = stub.configs
    assert config["billing"]["region"] == "europe-west4"
    assert config["kubernetes"]["context"] == "gke_p_europe-west4-a_c"
    assert config["estimation"]["cluster_fee"] == 0.1


def test_estimator_errors_exit_non_zero(stub):
    stub.error = PricingException("mars-north1", "no Autopilot SKUs are offered in this region")

    result = CliRunner().invoke(estimate, [])

    assert result.exit_code == 1
    assert "Error: Pricing unavailable for mars-north1" in result.output


def test_invalid_settings_are_reported(stub, monkeypatch):
    monkeypatch.setenv("ESTIMATION_ONE_YEAR_DISCOUNT", "2")

    result = CliRunner().invoke(estimate, [])

    assert result.exit_code == 1
    assert "Error: Invalid settings" in result.output
    assert stub.configs == []
    assert [entry["event"] for entry in stub.logs] == ["Autopilot estimate failed"]


def test_debug_prints_the_traceback(stub):
    stub.error = PricingException("mars-north1", "no Autopilot SKUs are offered in this region")

    result = CliRunner().invoke(estimate, ["--debug"])

    assert result.exit_code == 1
    assert "Traceback (most recent call last)" in result.output
