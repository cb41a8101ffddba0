"""Autopilot minimum billable request floors."""

from autopilot_estimator.core.constants import MIN_CPU_MILLI, MIN_MEMORY_MIB, MIN_STORAGE_MIB
from autopilot_estimator.core.models import Usage


def normalize(cpu_milli: int, memory_mib: int, storage_mib: int) -> Usage:
    """Raise every dimension below its Autopilot minimum to that minimum.

    Pods are billed for at least 250 mCPU, 500 MiB of memory and 10 MiB of
    ephemeral storage, whatever they actually use.
    """
    return Usage(
        cpu_milli=max(cpu_milli, MIN_CPU_MILLI),
        memory_mib=max(memory_mib, MIN_MEMORY_MIB),
        storage_mib=max(storage_mib, MIN_STORAGE_MIB),
    )
