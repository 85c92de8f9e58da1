from __future__ import annotations

from typing import TYPE_CHECKING

from ..gas import WorkloadInitGas, WorkloadPayloadGas
from .base import Workload, WorkloadKind
from .delegation import DelegationWorkload
from .shared_counter import SharedCounterWorkload
from .transfer_object import TransferObjectWorkload

if TYPE_CHECKING:
    from ..endpoints import Endpoint, PriceObserver
    from ..quota import Weights


class CombinationWorkload(Workload):
    """Merged workload that multiplexes every positively weighted kind.

    The weights are kept as given; the driver picks the next kind to run by
    weighted draw, so backpressure on one kind slows the whole mix.
    """

    kind = WorkloadKind.COMBINATION

    def __init__(
        self,
        weights: Weights,
        num_transfer_accounts: int,
        payload_gas: WorkloadPayloadGas,
    ) -> None:
        super().__init__()
        self.weights = weights
        self.workloads: dict[WorkloadKind, Workload] = {}
        if weights.shared_counter > 0:
            self.workloads[WorkloadKind.SHARED_COUNTER] = SharedCounterWorkload(
                payload_gas.shared_counter_payload_gas
            )
        if weights.transfer_object > 0:
            self.workloads[WorkloadKind.TRANSFER_OBJECT] = TransferObjectWorkload(
                num_transfer_accounts,
                payload_gas.transfer_tokens,
                payload_gas.transfer_object_payload_gas,
            )
        if weights.delegation > 0:
            self.workloads[WorkloadKind.DELEGATION] = DelegationWorkload(
                payload_gas.delegation_payload_gas
            )

    def workload_weights(self) -> dict[WorkloadKind, int]:
        return {kind: self.weights.for_kind(kind) for kind in self.workloads}

    async def _setup(
        self,
        init_gas: WorkloadInitGas,
        endpoint: Endpoint,
        price_observer: PriceObserver,
    ) -> None:
        for kind, workload in self.workloads.items():
            sub_init_gas = init_gas if kind is WorkloadKind.SHARED_COUNTER else WorkloadInitGas()
            await workload.init(sub_init_gas, endpoint, price_observer)

    def gas_summary(self) -> dict[str, int]:
        summary: dict[str, int] = {}
        for kind, workload in self.workloads.items():
            for name, count in workload.gas_summary().items():
                summary[f"{kind.value}.{name}"] = count
        return summary
