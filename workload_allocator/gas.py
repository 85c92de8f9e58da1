from __future__ import annotations

import contextlib
import hashlib
import itertools
import logging
from dataclasses import dataclass, field, fields
from typing import TYPE_CHECKING, Iterator, Protocol

from .split import split_workload

if TYPE_CHECKING:
    from .endpoints import Endpoint, PriceObserver

LOGGER = logging.getLogger("workload_allocator.gas")

MAX_GAS_FOR_TESTING = 1_000_000_000
SPLIT_GAS_UNITS = 1_000


class WorkloadAllocatorError(Exception):
    """Base class for workload allocation failures."""


class GasGenerationError(WorkloadAllocatorError):
    """Raised when gas coins cannot be materialized from the base funding."""


class ConcurrentProvisioningError(WorkloadAllocatorError):
    """Raised when the shared base funding is used by two provisioning calls at once."""


@dataclass(frozen=True)
class GasCoinConfig:
    """Request for one gas coin of ``amount`` owned by ``address``."""

    amount: int
    address: str


@dataclass(frozen=True)
class Gas:
    """A materialized gas coin. Each coin pays for exactly one operation."""

    object_id: str
    owner: str
    value: int


@dataclass
class WorkloadGasConfig:
    shared_counter_workload_init_gas_config: list[GasCoinConfig] = field(default_factory=list)
    shared_counter_workload_payload_gas_config: list[GasCoinConfig] = field(default_factory=list)
    transfer_object_workload_tokens: list[GasCoinConfig] = field(default_factory=list)
    transfer_object_workload_payload_gas_config: list[GasCoinConfig] = field(default_factory=list)
    delegation_gas_configs: list[GasCoinConfig] = field(default_factory=list)

    def split(self, num_endpoints: int) -> list[WorkloadGasConfig]:
        """Chunk every list for ``num_endpoints`` endpoints; entry ``i`` belongs to endpoint ``i``."""
        per_field = {
            f.name: split_workload(getattr(self, f.name), num_endpoints) for f in fields(self)
        }
        return [
            WorkloadGasConfig(**{name: chunks[index] for name, chunks in per_field.items()})
            for index in range(num_endpoints)
        ]

    def counts(self) -> dict[str, int]:
        return {f.name: len(getattr(self, f.name)) for f in fields(self)}

    def is_empty(self) -> bool:
        return not any(self.counts().values())


@dataclass
class WorkloadInitGas:
    shared_counter_init_gas: list[Gas] = field(default_factory=list)


@dataclass
class WorkloadPayloadGas:
    transfer_tokens: list[Gas] = field(default_factory=list)
    transfer_object_payload_gas: list[Gas] = field(default_factory=list)
    shared_counter_payload_gas: list[Gas] = field(default_factory=list)
    delegation_payload_gas: list[Gas] = field(default_factory=list)


def derive_address(*parts: object) -> str:
    """Deterministic owner address for generated coin configs."""
    digest = hashlib.sha256(":".join(str(part) for part in parts).encode("utf-8"))
    return "0x" + digest.hexdigest()[:40]


class GasMinter(Protocol):
    async def generate_all_gas(
        self,
        endpoint: Endpoint,
        gas: Gas,
        pay_coin: Gas,
        coin_type: str,
        gas_config: WorkloadGasConfig,
        reference_gas_price: int,
    ) -> tuple[WorkloadInitGas, WorkloadPayloadGas]: ...


class LocalGasMinter:
    """In-process minter that splits coins off a ledger of base coin balances.

    Gas coins (init and payload) are debited from ``gas``, transfer tokens from
    ``pay_coin``. Every split also charges ``reference_gas_price *
    split_gas_units`` to ``gas``. Nothing is debited if the request cannot be
    covered in full.
    """

    def __init__(self, split_gas_units: int = SPLIT_GAS_UNITS) -> None:
        self._split_gas_units = split_gas_units
        self._balances: dict[str, int] = {}
        self._object_ids = itertools.count(start=1)

    def balance_of(self, coin: Gas) -> int:
        return self._balances.setdefault(coin.object_id, coin.value)

    async def generate_all_gas(
        self,
        endpoint: Endpoint,
        gas: Gas,
        pay_coin: Gas,
        coin_type: str,
        gas_config: WorkloadGasConfig,
        reference_gas_price: int,
    ) -> tuple[WorkloadInitGas, WorkloadPayloadGas]:
        gas_configs = (
            gas_config.shared_counter_workload_init_gas_config
            + gas_config.shared_counter_workload_payload_gas_config
            + gas_config.transfer_object_workload_payload_gas_config
            + gas_config.delegation_gas_configs
        )
        token_configs = gas_config.transfer_object_workload_tokens
        split_fee = reference_gas_price * self._split_gas_units
        num_splits = len(gas_configs) + len(token_configs)

        required: dict[str, int] = {}
        required[gas.object_id] = sum(c.amount for c in gas_configs) + split_fee * num_splits
        required[pay_coin.object_id] = required.get(pay_coin.object_id, 0) + sum(
            c.amount for c in token_configs
        )
        for coin in (gas, pay_coin):
            available = self.balance_of(coin)
            if required[coin.object_id] > available:
                raise GasGenerationError(
                    f"insufficient balance in {coin.object_id} for {endpoint.name}: "
                    f"need {required[coin.object_id]}, have {available}"
                )
        for object_id, amount in required.items():
            self._balances[object_id] -= amount

        LOGGER.debug(
            "Minted %d gas coin(s) and %d %s token(s) for %s at price %d",
            len(gas_configs),
            len(token_configs),
            coin_type,
            endpoint.name,
            reference_gas_price,
        )
        init_gas = WorkloadInitGas(
            shared_counter_init_gas=self._mint(gas_config.shared_counter_workload_init_gas_config)
        )
        payload_gas = WorkloadPayloadGas(
            transfer_tokens=self._mint(token_configs),
            transfer_object_payload_gas=self._mint(
                gas_config.transfer_object_workload_payload_gas_config
            ),
            shared_counter_payload_gas=self._mint(
                gas_config.shared_counter_workload_payload_gas_config
            ),
            delegation_payload_gas=self._mint(gas_config.delegation_gas_configs),
        )
        return init_gas, payload_gas

    def _mint(self, configs: list[GasCoinConfig]) -> list[Gas]:
        return [
            Gas(object_id=f"0x{next(self._object_ids):064x}", owner=c.address, value=c.amount)
            for c in configs
        ]


class SequentialGasProvisioner:
    """Sole user of the base gas and pay coin for one configure run.

    Provisioning calls must not overlap: the minter debits the same base coins
    on every call. ``claim`` reserves the base coins by object id for a whole
    run, so a second run on the same coins fails while the first one holds
    them. A second ``provision`` entered while one is still awaiting raises
    ``ConcurrentProvisioningError`` as well.
    """

    _claimed: set[str] = set()

    def __init__(
        self,
        minter: GasMinter,
        gas: Gas,
        pay_coin: Gas,
        coin_type: str,
        price_observer: PriceObserver,
    ) -> None:
        self._minter = minter
        self._gas = gas
        self._pay_coin = pay_coin
        self._coin_type = coin_type
        self._price_observer = price_observer
        self._busy = False

    @contextlib.contextmanager
    def claim(self) -> Iterator[None]:
        coin_ids = {self._gas.object_id, self._pay_coin.object_id}
        in_use = coin_ids & SequentialGasProvisioner._claimed
        if in_use:
            raise ConcurrentProvisioningError(
                f"base coin(s) {', '.join(sorted(in_use))} already claimed by another run"
            )
        SequentialGasProvisioner._claimed |= coin_ids
        try:
            yield
        finally:
            SequentialGasProvisioner._claimed -= coin_ids

    async def provision(
        self, endpoint: Endpoint, gas_config: WorkloadGasConfig
    ) -> tuple[WorkloadInitGas, WorkloadPayloadGas]:
        if self._busy:
            raise ConcurrentProvisioningError(
                f"base gas {self._gas.object_id} is already being provisioned"
            )
        self._busy = True
        try:
            return await self._minter.generate_all_gas(
                endpoint,
                self._gas,
                self._pay_coin,
                self._coin_type,
                gas_config,
                self._price_observer.reference_gas_price(),
            )
        finally:
            self._busy = False


__all__ = [
    "ConcurrentProvisioningError",
    "Gas",
    "GasCoinConfig",
    "GasGenerationError",
    "GasMinter",
    "LocalGasMinter",
    "MAX_GAS_FOR_TESTING",
    "SequentialGasProvisioner",
    "WorkloadAllocatorError",
    "WorkloadGasConfig",
    "WorkloadInitGas",
    "WorkloadPayloadGas",
    "derive_address",
]
