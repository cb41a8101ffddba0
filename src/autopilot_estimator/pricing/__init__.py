from .normalizer import normalize
from .classifier import classify
from .engine import price, estimate_workload, estimate_workloads, aggregate
from .catalog import build_region_pricing, unit_price

__all__ = [
    "normalize",
    "classify",
    "price",
    "estimate_workload",
    "estimate_workloads",
    "aggregate",
    "build_region_pricing",
    "unit_price",
]
