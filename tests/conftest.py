from __future__ import annotations

import asyncio

import pytest

from workload_allocator.endpoints import StaticPriceObserver
from workload_allocator.gas import Gas, LocalGasMinter


class FakeEndpoint:
    def __init__(self, name: str, events: list) -> None:
        self.name = name
        self.operations: list[dict] = []
        self._events = events

    async def submit(self, operation: dict) -> None:
        await asyncio.sleep(0)
        self.operations.append(operation)
        self._events.append(("submit", self.name))


class RecordingMinter(LocalGasMinter):
    """LocalGasMinter that logs each call and tracks overlapping calls."""

    def __init__(self, events: list) -> None:
        super().__init__()
        self.events = events
        self.calls: list[str] = []
        self.prices: list[int] = []
        self.active = 0
        self.max_active = 0

    async def generate_all_gas(self, endpoint, gas, pay_coin, coin_type, gas_config, reference_gas_price):
        self.calls.append(endpoint.name)
        self.prices.append(reference_gas_price)
        self.events.append(("provision", endpoint.name))
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            await asyncio.sleep(0)
            return await super().generate_all_gas(
                endpoint, gas, pay_coin, coin_type, gas_config, reference_gas_price
            )
        finally:
            self.active -= 1


@pytest.fixture
def events() -> list:
    return []


@pytest.fixture
def make_endpoints(events):
    def factory(count: int) -> list[FakeEndpoint]:
        return [FakeEndpoint(f"validator-{index}", events) for index in range(count)]

    return factory


@pytest.fixture
def minter(events) -> RecordingMinter:
    return RecordingMinter(events)


@pytest.fixture
def base_gas() -> Gas:
    return Gas(object_id="base-gas", owner="bench", value=10**18)


@pytest.fixture
def pay_coin() -> Gas:
    return Gas(object_id="pay-coin", owner="bench", value=10**18)


@pytest.fixture
def price_observer() -> StaticPriceObserver:
    return StaticPriceObserver(7)
