"""Gas coin counts each workload kind needs for a run."""

from __future__ import annotations

from typing import Mapping

from .gas import WorkloadGasConfig
from .quota import Quota, RunTargets, Weights, num_shared_counters
from .workloads import (
    DelegationWorkload,
    SharedCounterWorkload,
    TransferObjectWorkload,
    WorkloadKind,
)


def _shared_counter_configs(gas_config: WorkloadGasConfig, max_ops: int, hotness_factor: int) -> None:
    gas_config.shared_counter_workload_init_gas_config = (
        SharedCounterWorkload.generate_coin_config_for_init(
            num_shared_counters(max_ops, hotness_factor)
        )
    )
    gas_config.shared_counter_workload_payload_gas_config = (
        SharedCounterWorkload.generate_coin_config_for_payloads(max_ops)
    )


def _transfer_object_configs(
    gas_config: WorkloadGasConfig, max_ops: int, num_transfer_accounts: int
) -> None:
    tokens, payloads = TransferObjectWorkload.generate_coin_config_for_payloads(
        max_ops, num_transfer_accounts, max_ops
    )
    gas_config.transfer_object_workload_tokens = tokens
    gas_config.transfer_object_workload_payload_gas_config = payloads


def derive_disjoint_gas_config(
    weights: Weights,
    targets: RunTargets,
    quotas: Mapping[WorkloadKind, Quota],
) -> WorkloadGasConfig:
    """Size each kind from its own quota.

    Delegation is sized by the transfer account count, not by its max ops.
    """
    gas_config = WorkloadGasConfig()

    shared_counter = quotas[WorkloadKind.SHARED_COUNTER]
    if weights.shared_counter > 0 and not shared_counter.is_degenerate:
        _shared_counter_configs(
            gas_config, shared_counter.max_ops, targets.shared_counter_hotness_factor
        )

    transfer_object = quotas[WorkloadKind.TRANSFER_OBJECT]
    if weights.transfer_object > 0 and not transfer_object.is_degenerate:
        _transfer_object_configs(gas_config, transfer_object.max_ops, targets.num_transfer_accounts)

    if weights.delegation > 0 and not quotas[WorkloadKind.DELEGATION].is_degenerate:
        gas_config.delegation_gas_configs = DelegationWorkload.generate_gas_config_for_payloads(
            targets.num_transfer_accounts
        )
    return gas_config


def derive_combined_gas_config(
    weights: Weights,
    targets: RunTargets,
    quota: Quota,
) -> WorkloadGasConfig:
    """Size every positively weighted kind from the whole-mix max ops.

    Delegation is sized by max ops here, unlike disjoint mode.
    """
    gas_config = WorkloadGasConfig()
    if quota.is_degenerate:
        return gas_config

    if weights.shared_counter > 0:
        _shared_counter_configs(gas_config, quota.max_ops, targets.shared_counter_hotness_factor)
    if weights.transfer_object > 0:
        _transfer_object_configs(gas_config, quota.max_ops, targets.num_transfer_accounts)
    if weights.delegation > 0:
        gas_config.delegation_gas_configs = DelegationWorkload.generate_gas_config_for_payloads(
            quota.max_ops
        )
    return gas_config


__all__ = ["derive_combined_gas_config", "derive_disjoint_gas_config"]
