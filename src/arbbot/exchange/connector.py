"""Exchange connector abstractions."""

from __future__ import annotations

import abc
import asyncio
from dataclasses import dataclass
from decimal import Decimal

from ..errors import ExecutionError
from ..types import Side, Symbol, Venue


@dataclass(frozen=True)
class ExecutionResult:
    venue: Venue
    side: Side
    symbol: Symbol
    quantity: Decimal
    price: Decimal


class AbstractConnector(abc.ABC):
    """Places single trade legs on one venue."""

    def __init__(self, venue: Venue) -> None:
        self.venue = venue

    @abc.abstractmethod
    async def execute_leg(
        self, side: Side, symbol: Symbol, qty: Decimal, price: Decimal
    ) -> ExecutionResult:
        """Execute one leg or raise :class:`ExecutionError`."""


class PaperConnector(AbstractConnector):
    """Simulated venue that accepts every leg after ``delay`` seconds."""

    def __init__(self, venue: Venue, delay: float = 1.0, fail: bool = False) -> None:
        super().__init__(venue)
        self.delay = delay
        self.fail = fail

    async def execute_leg(
        self, side: Side, symbol: Symbol, qty: Decimal, price: Decimal
    ) -> ExecutionResult:
        if qty <= 0 or price <= 0:
            raise ExecutionError(f"{self.venue.value}: invalid order {qty}@{price}")
        await asyncio.sleep(self.delay)
        if self.fail:
            raise ExecutionError(f"{self.venue.value}: {side.value} {symbol.value} rejected")
        return ExecutionResult(
            venue=self.venue, side=side, symbol=symbol, quantity=qty, price=price
        )

