"""
Test fixtures and configuration for pytest
"""
import pytest
import structlog

from autopilot_estimator.core.models import (
    ComputeClass,
    Node,
    PriceKey,
    RegionPricing,
    ResourcePrice,
    Usage,
    Workload,
)

FLOAT_TOLERANCE = 1e-9


@pytest.fixture(autouse=True)
def reset_structlog():
    """Keep structlog unconfigured between tests so capture_logs sees every event."""
    structlog.reset_defaults()
    yield
    structlog.reset_defaults()


@pytest.fixture
def region_pricing():
    """Regular and spot prices of a test region, without Arm SKUs."""
    return RegionPricing(
        region="test-region-1",
        storage_price=0.0000706,
        prices={
            PriceKey(ComputeClass.REGULAR, False): ResourcePrice(cpu=0.0573, memory=0.0063421),
            PriceKey(ComputeClass.BALANCED, False): ResourcePrice(cpu=0.0831, memory=0.0091933),
            PriceKey(ComputeClass.SCALE_OUT, False): ResourcePrice(cpu=0.0722, memory=0.0079911),
            PriceKey(ComputeClass.REGULAR, True): ResourcePrice(cpu=0.0172, memory=0.0019026),
            PriceKey(ComputeClass.BALANCED, True): ResourcePrice(cpu=0.0249, memory=0.002758),
            PriceKey(ComputeClass.SCALE_OUT, True): ResourcePrice(cpu=0.0217, memory=0.0023973),
        },
    )


@pytest.fixture
def arm_region_pricing(region_pricing):
    prices = dict(region_pricing.prices)
    prices[PriceKey(ComputeClass.SCALE_OUT_ARM, False)] = ResourcePrice(cpu=0.0535, memory=0.0059246)
    prices[PriceKey(ComputeClass.SCALE_OUT_ARM, True)] = ResourcePrice(cpu=0.0161, memory=0.0017774)
    return RegionPricing(region="test-region-1", storage_price=region_pricing.storage_price, prices=prices)


@pytest.fixture
def nodes():
    return {
        "pool-default-1": Node(name="pool-default-1", instance_type="e2-standard-4", region="test-region-1"),
        "pool-spot-1": Node(name="pool-spot-1", instance_type="e2-standard-4", region="test-region-1", spot=True),
        "pool-arm-1": Node(name="pool-arm-1", instance_type="t2a-standard-8", region="test-region-1"),
    }


def make_workload(name, node_name, cost, spot=False, compute_class=ComputeClass.REGULAR):
    return Workload(
        name=name,
        node_name=node_name,
        usage=Usage(cpu_milli=250, memory_mib=500, storage_mib=10),
        containers=1,
        compute_class=compute_class,
        spot=spot,
        cost=cost,
    )
