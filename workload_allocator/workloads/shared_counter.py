from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..gas import MAX_GAS_FOR_TESTING, Gas, GasCoinConfig, derive_address
from .base import Workload, WorkloadKind

if TYPE_CHECKING:
    from ..endpoints import Endpoint, PriceObserver
    from ..gas import WorkloadInitGas

LOGGER = logging.getLogger("workload_allocator.workloads.shared_counter")


class SharedCounterWorkload(Workload):
    """Contention workload: many payloads increment a small set of shared counters.

    Payload gas is sized by max in-flight ops; counters are sized by the
    hotness factor, so hot counters are hit by several payloads.
    """

    kind = WorkloadKind.SHARED_COUNTER

    def __init__(self, payload_gas: list[Gas]) -> None:
        super().__init__()
        self.payload_gas = list(payload_gas)
        self.counters: list[str] = []

    @staticmethod
    def generate_coin_config_for_init(num_counters: int) -> list[GasCoinConfig]:
        return [
            GasCoinConfig(
                amount=MAX_GAS_FOR_TESTING,
                address=derive_address("shared-counter-init", index),
            )
            for index in range(num_counters)
        ]

    @staticmethod
    def generate_coin_config_for_payloads(num_payloads: int) -> list[GasCoinConfig]:
        return [
            GasCoinConfig(
                amount=MAX_GAS_FOR_TESTING,
                address=derive_address("shared-counter-payload", index),
            )
            for index in range(num_payloads)
        ]

    async def _setup(
        self,
        init_gas: WorkloadInitGas,
        endpoint: Endpoint,
        price_observer: PriceObserver,
    ) -> None:
        gas_price = price_observer.reference_gas_price()
        created = set(self.counters)
        for gas in init_gas.shared_counter_init_gas:
            counter_id = f"counter-{gas.object_id}"
            if counter_id in created:
                continue
            await endpoint.submit(
                {
                    "type": "create_shared_counter",
                    "id": counter_id,
                    "gas": gas.object_id,
                    "sender": gas.owner,
                    "gas_price": gas_price,
                }
            )
            self.counters.append(counter_id)
        LOGGER.debug("Created %d shared counter(s) on %s", len(self.counters), endpoint.name)

    def gas_summary(self) -> dict[str, int]:
        return {
            "init_gas": len(self.counters),
            "payload_gas": len(self.payload_gas),
        }
