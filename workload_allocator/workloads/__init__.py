"""Workload kinds the allocator can provision and assemble."""

from .base import Workload, WorkloadInfo, WorkloadKind
from .combination import CombinationWorkload
from .delegation import DelegationWorkload
from .factory import (
    make_combination_workload,
    make_delegation_workload,
    make_shared_counter_workload,
    make_transfer_object_workload,
)
from .shared_counter import SharedCounterWorkload
from .transfer_object import TransferObjectWorkload

__all__ = [
    "CombinationWorkload",
    "DelegationWorkload",
    "SharedCounterWorkload",
    "TransferObjectWorkload",
    "Workload",
    "WorkloadInfo",
    "WorkloadKind",
    "make_combination_workload",
    "make_delegation_workload",
    "make_shared_counter_workload",
    "make_transfer_object_workload",
]
