from __future__ import annotations

from ..gas import MAX_GAS_FOR_TESTING, Gas, GasCoinConfig, derive_address
from .base import Workload, WorkloadKind


class DelegationWorkload(Workload):
    kind = WorkloadKind.DELEGATION

    def __init__(self, payload_gas: list[Gas]) -> None:
        super().__init__()
        self.payload_gas = list(payload_gas)

    @staticmethod
    def generate_gas_config_for_payloads(count: int) -> list[GasCoinConfig]:
        return [
            GasCoinConfig(amount=MAX_GAS_FOR_TESTING, address=derive_address("delegation", index))
            for index in range(count)
        ]

    def gas_summary(self) -> dict[str, int]:
        return {"payload_gas": len(self.payload_gas)}
