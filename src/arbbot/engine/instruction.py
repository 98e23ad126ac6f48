"""Trade instructions produced by the arbitrage evaluator."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import ClassVar, Union

from ..types import Symbol, Venue


@dataclass(frozen=True)
class _Instruction:
    """Sell ``quantity`` at ``bid_price`` on one venue, buy it at ``ask_price`` on the other.

    ``total_cost`` is the combined fee of both legs as a non-positive
    amount, already netted against the spread by the evaluator.
    """

    ask_price: Decimal
    bid_price: Decimal
    quantity: Decimal
    symbol: Symbol
    total_cost: Decimal

    short_venue: ClassVar[Venue]
    long_venue: ClassVar[Venue]

    def __post_init__(self) -> None:
        if self.total_cost > 0:
            raise ValueError("total_cost must be non-positive")
        if self.quantity <= 0:
            raise ValueError("quantity must be positive")

    @property
    def direction(self) -> str:
        return type(self).__name__


@dataclass(frozen=True)
class ShortPrimaryLongSecondary(_Instruction):
    short_venue: ClassVar[Venue] = Venue.PRIMARY
    long_venue: ClassVar[Venue] = Venue.SECONDARY


@dataclass(frozen=True)
class ShortSecondaryLongPrimary(_Instruction):
    short_venue: ClassVar[Venue] = Venue.SECONDARY
    long_venue: ClassVar[Venue] = Venue.PRIMARY


TradeInstruction = Union[ShortPrimaryLongSecondary, ShortSecondaryLongPrimary]
