"""Compute class selection from a pod's memory to CPU shape."""

import math
import structlog

from autopilot_estimator.core.constants import (
    BALANCED_MAX_RATIO,
    BALANCED_MIN_RATIO,
    REGULAR_MAX_CPU_MILLI,
    REGULAR_MAX_MEMORY_MIB,
    REGULAR_MAX_RATIO,
    REGULAR_MIN_RATIO,
    SCALE_OUT_ARM_MAX_CPU_MILLI,
    SCALE_OUT_ARM_MAX_MEMORY_MIB,
    SCALE_OUT_ARM_RATIO,
    SCALE_OUT_MAX_CPU_MILLI,
    SCALE_OUT_MAX_MEMORY_MIB,
    SCALE_OUT_RATIO,
)
from autopilot_estimator.core.models import ComputeClass

logger = structlog.get_logger(__name__)


def memory_cpu_ratio(cpu_milli: int, memory_mib: int) -> float:
    """MiB of memory per mCPU, rounded up."""
    return math.ceil(memory_mib / cpu_milli)


def classify(workload_name: str, cpu_milli: int, memory_mib: int, requests_arm: bool) -> ComputeClass:
    """Pick the compute class Autopilot would place the pod on.

    Rules are evaluated in order and the first match wins. Usage must already
    be normalized, so ``cpu_milli`` is never zero here. Out-of-envelope Arm
    requests and shapes no class accepts only produce a warning; the latter
    falls back to Regular.
    """
    ratio = memory_cpu_ratio(cpu_milli, memory_mib)

    # Arm machines only exist as Scale-Out
    if requests_arm:
        if (ratio != SCALE_OUT_ARM_RATIO
                or cpu_milli > SCALE_OUT_ARM_MAX_CPU_MILLI
                or memory_mib > SCALE_OUT_ARM_MAX_MEMORY_MIB):
            logger.warning(
                "Requesting arm64 but mCPU, memory or ratio are out of the accepted range",
                workload=workload_name,
                cpu_milli=cpu_milli,
                memory_mib=memory_mib,
                ratio=ratio,
            )
        return ComputeClass.SCALE_OUT_ARM

    if (REGULAR_MIN_RATIO <= ratio <= REGULAR_MAX_RATIO
            and cpu_milli <= REGULAR_MAX_CPU_MILLI
            and memory_mib <= REGULAR_MAX_MEMORY_MIB):
        return ComputeClass.REGULAR

    if (ratio == SCALE_OUT_RATIO
            and cpu_milli <= SCALE_OUT_MAX_CPU_MILLI
            and memory_mib <= SCALE_OUT_MAX_MEMORY_MIB):
        return ComputeClass.SCALE_OUT

    # Beyond general-purpose limits
    if (BALANCED_MIN_RATIO <= ratio <= BALANCED_MAX_RATIO
            and (cpu_milli > REGULAR_MAX_CPU_MILLI or memory_mib > REGULAR_MAX_MEMORY_MIB)):
        return ComputeClass.BALANCED

    logger.warning(
        "Couldn't find a matching compute class, defaulting to Regular. Please check manually",
        workload=workload_name,
        cpu_milli=cpu_milli,
        memory_mib=memory_mib,
        ratio=ratio,
    )
    return ComputeClass.REGULAR
