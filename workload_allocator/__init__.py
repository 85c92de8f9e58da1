"""
Workload allocation for benchmark runs against a transactional system.

Turns a weighted mix of shared-counter, transfer-object and delegation
workloads into per-kind quotas, provisions the gas each workload needs from a
single base funding coin, and assembles workloads for every endpoint.
"""

from .configuration import AllocationPlan, WorkloadConfiguration
from .gas import ConcurrentProvisioningError, GasGenerationError, WorkloadAllocatorError
from .quota import Quota, RunTargets, Weights
from .split import split_workload

__all__ = [
    "AllocationPlan",
    "ConcurrentProvisioningError",
    "GasGenerationError",
    "Quota",
    "RunTargets",
    "Weights",
    "WorkloadAllocatorError",
    "WorkloadConfiguration",
    "split_workload",
]
