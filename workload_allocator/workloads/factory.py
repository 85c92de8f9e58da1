"""Factories turning a quota plus provisioned gas into a ``WorkloadInfo``.

Each factory returns ``None`` when the configuration is degenerate: a zero
quota component, or (except for delegation) no payload gas to run with.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..gas import WorkloadPayloadGas
from .base import WorkloadInfo
from .combination import CombinationWorkload
from .delegation import DelegationWorkload
from .shared_counter import SharedCounterWorkload
from .transfer_object import TransferObjectWorkload

if TYPE_CHECKING:
    from ..quota import Weights


def _has_quota(qps: int, num_workers: int, max_ops: int) -> bool:
    return qps > 0 and num_workers > 0 and max_ops > 0


def make_shared_counter_workload(
    qps: int,
    num_workers: int,
    max_ops: int,
    payload_gas: WorkloadPayloadGas,
) -> WorkloadInfo | None:
    if not _has_quota(qps, num_workers, max_ops) or not payload_gas.shared_counter_payload_gas:
        return None
    return WorkloadInfo(
        qps=qps,
        num_workers=num_workers,
        max_in_flight_ops=max_ops,
        workload=SharedCounterWorkload(payload_gas.shared_counter_payload_gas),
    )


def make_transfer_object_workload(
    qps: int,
    num_workers: int,
    max_ops: int,
    num_transfer_accounts: int,
    payload_gas: WorkloadPayloadGas,
) -> WorkloadInfo | None:
    if not _has_quota(qps, num_workers, max_ops) or not payload_gas.transfer_object_payload_gas:
        return None
    return WorkloadInfo(
        qps=qps,
        num_workers=num_workers,
        max_in_flight_ops=max_ops,
        workload=TransferObjectWorkload(
            num_transfer_accounts,
            payload_gas.transfer_tokens,
            payload_gas.transfer_object_payload_gas,
        ),
    )


def make_delegation_workload(
    qps: int,
    num_workers: int,
    max_ops: int,
    payload_gas: WorkloadPayloadGas,
) -> WorkloadInfo | None:
    # Delegation gas is sized by account count, not by endpoints, so an
    # endpoint's chunk may be empty; the workload is still assembled.
    if not _has_quota(qps, num_workers, max_ops):
        return None
    return WorkloadInfo(
        qps=qps,
        num_workers=num_workers,
        max_in_flight_ops=max_ops,
        workload=DelegationWorkload(payload_gas.delegation_payload_gas),
    )


def make_combination_workload(
    target_qps: int,
    num_workers: int,
    in_flight_ratio: int,
    num_transfer_accounts: int,
    weights: Weights,
    payload_gas: WorkloadPayloadGas,
) -> WorkloadInfo | None:
    max_ops = target_qps * in_flight_ratio
    if weights.total == 0 or not _has_quota(target_qps, num_workers, max_ops):
        return None
    return WorkloadInfo(
        qps=target_qps,
        num_workers=num_workers,
        max_in_flight_ops=max_ops,
        workload=CombinationWorkload(weights, num_transfer_accounts, payload_gas),
    )
