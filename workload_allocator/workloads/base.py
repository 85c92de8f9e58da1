from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..endpoints import Endpoint, PriceObserver
    from ..gas import WorkloadInitGas


class WorkloadKind(str, Enum):
    SHARED_COUNTER = "shared_counter"
    TRANSFER_OBJECT = "transfer_object"
    DELEGATION = "delegation"
    COMBINATION = "combination"


class Workload(ABC):
    """Generator of one workload kind, bound to the gas it was provisioned.

    ``init`` runs once per instance; repeated calls are no-ops. A setup that
    failed part way may be retried and resumes where it stopped.
    """

    kind: WorkloadKind

    def __init__(self) -> None:
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    async def init(
        self,
        init_gas: WorkloadInitGas,
        endpoint: Endpoint,
        price_observer: PriceObserver,
    ) -> None:
        if self._initialized:
            return
        await self._setup(init_gas, endpoint, price_observer)
        self._initialized = True

    async def _setup(
        self,
        init_gas: WorkloadInitGas,
        endpoint: Endpoint,
        price_observer: PriceObserver,
    ) -> None:
        return None

    @abstractmethod
    def gas_summary(self) -> dict[str, int]:
        raise NotImplementedError


@dataclass
class WorkloadInfo:
    qps: int
    num_workers: int
    max_in_flight_ops: int
    workload: Workload

    @property
    def kind(self) -> WorkloadKind:
        return self.workload.kind
