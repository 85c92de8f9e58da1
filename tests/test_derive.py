from workload_allocator.derive import derive_combined_gas_config, derive_disjoint_gas_config
from workload_allocator.quota import (
    RunTargets,
    Weights,
    compute_combined_quota,
    compute_disjoint_quotas,
)


def _disjoint(weights: Weights, targets: RunTargets):
    return derive_disjoint_gas_config(weights, targets, compute_disjoint_quotas(weights, targets))


def _combined(weights: Weights, targets: RunTargets):
    return derive_combined_gas_config(weights, targets, compute_combined_quota(weights, targets))


def test_disjoint_sizes_from_per_kind_max_ops() -> None:
    targets = RunTargets(
        target_qps=100,
        num_workers=4,
        in_flight_ratio=2,
        shared_counter_hotness_factor=50,
        num_transfer_accounts=3,
    )

    counts = _disjoint(Weights(1, 1, 0), targets).counts()

    assert counts == {
        "shared_counter_workload_init_gas_config": 50,
        "shared_counter_workload_payload_gas_config": 100,
        "transfer_object_workload_tokens": 100,
        "transfer_object_workload_payload_gas_config": 300,
        "delegation_gas_configs": 0,
    }


def test_combined_sizes_from_whole_mix_max_ops() -> None:
    targets = RunTargets(
        target_qps=100,
        num_workers=4,
        in_flight_ratio=2,
        shared_counter_hotness_factor=50,
        num_transfer_accounts=1,
    )

    counts = _combined(Weights(1, 1, 0), targets).counts()

    assert counts == {
        "shared_counter_workload_init_gas_config": 100,
        "shared_counter_workload_payload_gas_config": 200,
        "transfer_object_workload_tokens": 200,
        "transfer_object_workload_payload_gas_config": 200,
        "delegation_gas_configs": 0,
    }


def test_delegation_sized_by_accounts_in_disjoint_mode() -> None:
    targets = RunTargets(target_qps=100, num_workers=4, in_flight_ratio=2, num_transfer_accounts=4)

    gas_config = _disjoint(Weights(0, 0, 1), targets)

    assert len(gas_config.delegation_gas_configs) == 4
    assert gas_config.shared_counter_workload_payload_gas_config == []
    assert gas_config.transfer_object_workload_tokens == []


def test_delegation_sized_by_max_ops_in_combined_mode() -> None:
    targets = RunTargets(target_qps=100, num_workers=4, in_flight_ratio=2, num_transfer_accounts=4)

    gas_config = _combined(Weights(0, 0, 1), targets)

    assert len(gas_config.delegation_gas_configs) == 200


def test_full_hotness_keeps_payloads_but_no_counters() -> None:
    targets = RunTargets(
        target_qps=10, num_workers=1, in_flight_ratio=3, shared_counter_hotness_factor=100
    )

    gas_config = _disjoint(Weights(1, 0, 0), targets)

    assert gas_config.shared_counter_workload_init_gas_config == []
    assert len(gas_config.shared_counter_workload_payload_gas_config) == 30


def test_zero_weight_kind_gets_no_gas() -> None:
    targets = RunTargets(target_qps=100, num_workers=4, in_flight_ratio=2)

    for gas_config in (_disjoint(Weights(0, 5, 0), targets), _combined(Weights(0, 5, 0), targets)):
        assert gas_config.shared_counter_workload_init_gas_config == []
        assert gas_config.shared_counter_workload_payload_gas_config == []
        assert gas_config.delegation_gas_configs == []
        assert gas_config.transfer_object_workload_tokens


def test_all_zero_weights_gives_empty_config() -> None:
    targets = RunTargets(target_qps=100, num_workers=4, in_flight_ratio=2)

    assert _disjoint(Weights(), targets).is_empty()
    assert _combined(Weights(), targets).is_empty()


def test_coin_configs_are_deterministic() -> None:
    targets = RunTargets(target_qps=20, num_workers=2, in_flight_ratio=2)

    assert _disjoint(Weights(1, 1, 1), targets) == _disjoint(Weights(1, 1, 1), targets)
