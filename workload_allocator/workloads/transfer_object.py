from __future__ import annotations

from ..gas import MAX_GAS_FOR_TESTING, Gas, GasCoinConfig, derive_address
from .base import Workload, WorkloadKind


class TransferObjectWorkload(Workload):
    """Point-to-point transfers of owned tokens between a ring of accounts."""

    kind = WorkloadKind.TRANSFER_OBJECT

    def __init__(
        self,
        num_transfer_accounts: int,
        transfer_tokens: list[Gas],
        payload_gas: list[Gas],
    ) -> None:
        super().__init__()
        self.num_transfer_accounts = num_transfer_accounts
        self.transfer_tokens = list(transfer_tokens)
        self.payload_gas = list(payload_gas)

    @staticmethod
    def generate_coin_config_for_payloads(
        num_tokens: int,
        num_transfer_accounts: int,
        num_payloads: int,
    ) -> tuple[list[GasCoinConfig], list[GasCoinConfig]]:
        """Return ``(token_configs, payload_gas_configs)``.

        Every payload owns one gas coin per transfer account so it can pay for
        each hop; all tokens start with the first payload's owner.
        """
        payload_configs: list[GasCoinConfig] = []
        for index in range(num_payloads):
            address = derive_address("transfer-object", index)
            payload_configs.extend(
                GasCoinConfig(amount=MAX_GAS_FOR_TESTING, address=address)
                for _ in range(num_transfer_accounts)
            )
        owner = derive_address("transfer-object", 0)
        token_configs = [
            GasCoinConfig(amount=MAX_GAS_FOR_TESTING, address=owner) for _ in range(num_tokens)
        ]
        return token_configs, payload_configs

    def gas_summary(self) -> dict[str, int]:
        return {
            "transfer_tokens": len(self.transfer_tokens),
            "payload_gas": len(self.payload_gas),
        }
