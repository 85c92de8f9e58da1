from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from .derive import derive_combined_gas_config, derive_disjoint_gas_config
from .endpoints import Endpoint, PriceObserver
from .gas import (
    Gas,
    GasMinter,
    SequentialGasProvisioner,
    WorkloadGasConfig,
    WorkloadInitGas,
    WorkloadPayloadGas,
)
from .quota import (
    Quota,
    RunTargets,
    Weights,
    compute_combined_quota,
    compute_disjoint_quotas,
)
from .workloads import (
    WorkloadInfo,
    WorkloadKind,
    make_combination_workload,
    make_delegation_workload,
    make_shared_counter_workload,
    make_transfer_object_workload,
)

LOGGER = logging.getLogger("workload_allocator.configuration")

EndpointWorkloads = list[tuple[Endpoint, list[WorkloadInfo]]]


@dataclass(frozen=True)
class AllocationPlan:
    """Quotas and per-endpoint gas configs, computed before anything is minted."""

    mode: WorkloadConfiguration
    weights: Weights
    targets: RunTargets
    quotas: dict[WorkloadKind, Quota]
    gas_config: WorkloadGasConfig
    endpoint_gas_configs: list[WorkloadGasConfig]


class _Composer(ABC):
    """Shared plan/provision/assemble pipeline; subclasses supply the mode-specific parts."""

    @abstractmethod
    def quotas(self, weights: Weights, targets: RunTargets) -> dict[WorkloadKind, Quota]:
        raise NotImplementedError

    @abstractmethod
    def gas_config(
        self,
        weights: Weights,
        targets: RunTargets,
        quotas: dict[WorkloadKind, Quota],
    ) -> WorkloadGasConfig:
        raise NotImplementedError

    @abstractmethod
    async def assemble(
        self,
        plan: AllocationPlan,
        endpoint: Endpoint,
        init_gas: WorkloadInitGas,
        payload_gas: WorkloadPayloadGas,
        price_observer: PriceObserver,
    ) -> list[WorkloadInfo]:
        raise NotImplementedError

    def plan(
        self,
        mode: WorkloadConfiguration,
        weights: Weights,
        targets: RunTargets,
        num_endpoints: int,
    ) -> AllocationPlan:
        quotas = self.quotas(weights, targets)
        for kind, quota in quotas.items():
            if quota.is_degenerate:
                LOGGER.debug("Eliding %s workload (quota %s)", kind.value, quota)
        gas_config = self.gas_config(weights, targets, quotas)
        return AllocationPlan(
            mode=mode,
            weights=weights,
            targets=targets,
            quotas=quotas,
            gas_config=gas_config,
            endpoint_gas_configs=gas_config.split(num_endpoints),
        )

    async def configure(
        self,
        mode: WorkloadConfiguration,
        weights: Weights,
        targets: RunTargets,
        gas: Gas,
        pay_coin: Gas,
        coin_type: str,
        endpoints: Sequence[Endpoint],
        price_observer: PriceObserver,
        minter: GasMinter,
    ) -> EndpointWorkloads:
        if not endpoints:
            LOGGER.warning("No endpoints supplied; nothing to configure")
            return []

        plan = self.plan(mode, weights, targets, len(endpoints))
        provisioner = SequentialGasProvisioner(minter, gas, pay_coin, coin_type, price_observer)
        endpoint_workloads: EndpointWorkloads = []
        with provisioner.claim():
            for endpoint, gas_config in zip(endpoints, plan.endpoint_gas_configs):
                LOGGER.info(
                    "Provisioning gas for %s (%s mode): %s",
                    endpoint.name,
                    mode.value,
                    gas_config.counts(),
                )
                init_gas, payload_gas = await provisioner.provision(endpoint, gas_config)
                workloads = await self.assemble(
                    plan, endpoint, init_gas, payload_gas, price_observer
                )
                LOGGER.info(
                    "Assembled %d workload(s) for %s: %s",
                    len(workloads),
                    endpoint.name,
                    ", ".join(info.kind.value for info in workloads) or "<none>",
                )
                endpoint_workloads.append((endpoint, workloads))
        return endpoint_workloads


class _CombinedComposer(_Composer):
    def quotas(self, weights: Weights, targets: RunTargets) -> dict[WorkloadKind, Quota]:
        return {WorkloadKind.COMBINATION: compute_combined_quota(weights, targets)}

    def gas_config(
        self,
        weights: Weights,
        targets: RunTargets,
        quotas: dict[WorkloadKind, Quota],
    ) -> WorkloadGasConfig:
        return derive_combined_gas_config(weights, targets, quotas[WorkloadKind.COMBINATION])

    async def assemble(
        self,
        plan: AllocationPlan,
        endpoint: Endpoint,
        init_gas: WorkloadInitGas,
        payload_gas: WorkloadPayloadGas,
        price_observer: PriceObserver,
    ) -> list[WorkloadInfo]:
        targets = plan.targets
        info = make_combination_workload(
            targets.target_qps,
            targets.num_workers,
            targets.in_flight_ratio,
            targets.num_transfer_accounts,
            plan.weights,
            payload_gas,
        )
        if info is None:
            return []
        await info.workload.init(init_gas, endpoint, price_observer)
        return [info]


class _DisjointComposer(_Composer):
    def quotas(self, weights: Weights, targets: RunTargets) -> dict[WorkloadKind, Quota]:
        return compute_disjoint_quotas(weights, targets)

    def gas_config(
        self,
        weights: Weights,
        targets: RunTargets,
        quotas: dict[WorkloadKind, Quota],
    ) -> WorkloadGasConfig:
        return derive_disjoint_gas_config(weights, targets, quotas)

    async def assemble(
        self,
        plan: AllocationPlan,
        endpoint: Endpoint,
        init_gas: WorkloadInitGas,
        payload_gas: WorkloadPayloadGas,
        price_observer: PriceObserver,
    ) -> list[WorkloadInfo]:
        shared_counter = plan.quotas[WorkloadKind.SHARED_COUNTER]
        transfer_object = plan.quotas[WorkloadKind.TRANSFER_OBJECT]
        delegation = plan.quotas[WorkloadKind.DELEGATION]
        candidates = [
            (
                make_shared_counter_workload(
                    shared_counter.qps,
                    shared_counter.num_workers,
                    shared_counter.max_ops,
                    WorkloadPayloadGas(
                        shared_counter_payload_gas=payload_gas.shared_counter_payload_gas
                    ),
                ),
                init_gas,
            ),
            (
                make_transfer_object_workload(
                    transfer_object.qps,
                    transfer_object.num_workers,
                    transfer_object.max_ops,
                    plan.targets.num_transfer_accounts,
                    WorkloadPayloadGas(
                        transfer_tokens=payload_gas.transfer_tokens,
                        transfer_object_payload_gas=payload_gas.transfer_object_payload_gas,
                    ),
                ),
                WorkloadInitGas(),
            ),
            (
                make_delegation_workload(
                    delegation.qps,
                    delegation.num_workers,
                    delegation.max_ops,
                    WorkloadPayloadGas(delegation_payload_gas=payload_gas.delegation_payload_gas),
                ),
                WorkloadInitGas(),
            ),
        ]

        workloads: list[WorkloadInfo] = []
        for info, workload_init_gas in candidates:
            if info is None:
                continue
            await info.workload.init(workload_init_gas, endpoint, price_observer)
            workloads.append(info)
        return workloads


class WorkloadConfiguration(Enum):
    # All kinds share one throughput budget and one merged workload per endpoint;
    # backpressure on one kind slows the others.
    COMBINED = "combined"
    # Each kind gets its own budget and workload per endpoint.
    DISJOINT = "disjoint"

    @property
    def _composer(self) -> _Composer:
        return _COMPOSERS[self]

    def plan(self, weights: Weights, targets: RunTargets, num_endpoints: int) -> AllocationPlan:
        return self._composer.plan(self, weights, targets, num_endpoints)

    async def configure(
        self,
        weights: Weights,
        targets: RunTargets,
        gas: Gas,
        pay_coin: Gas,
        coin_type: str,
        endpoints: Sequence[Endpoint],
        price_observer: PriceObserver,
        minter: GasMinter,
    ) -> EndpointWorkloads:
        """Provision and assemble workloads for every endpoint, in endpoint order.

        Endpoints are handled one at a time because all of them draw on the same
        ``gas`` and ``pay_coin``. A ``GasGenerationError`` from the minter aborts
        the whole call and no assignments are returned.
        """
        return await self._composer.configure(
            self,
            weights,
            targets,
            gas,
            pay_coin,
            coin_type,
            endpoints,
            price_observer,
            minter,
        )


_COMPOSERS: dict[WorkloadConfiguration, _Composer] = {
    WorkloadConfiguration.COMBINED: _CombinedComposer(),
    WorkloadConfiguration.DISJOINT: _DisjointComposer(),
}


__all__ = ["AllocationPlan", "EndpointWorkloads", "WorkloadConfiguration"]
