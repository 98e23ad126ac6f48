"""Venue-independent order book representation."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Iterable, Optional, Sequence, Tuple, Union

RawNumber = Union[str, int, float, Decimal]


def to_decimal(value: RawNumber) -> Decimal:
    # floats go through str() so 0.1 stays 0.1 rather than its binary expansion
    if isinstance(value, float):
        value = str(value)
    try:
        return Decimal(value)
    except InvalidOperation:
        raise ValueError(f"not a number: {value!r}") from None


@dataclass(frozen=True)
class PriceLevel:
    price: Decimal
    quantity: Decimal

    def __post_init__(self) -> None:
        for name in ("price", "quantity"):
            value = getattr(self, name)
            if not isinstance(value, Decimal):
                value = to_decimal(value)
                object.__setattr__(self, name, value)
            if not value.is_finite() or value <= 0:
                raise ValueError(f"{name} must be positive and finite, got {value}")


@dataclass(frozen=True)
class OrderBook:
    """Bids and asks, each ordered best-first."""

    bids: Tuple[PriceLevel, ...] = ()
    asks: Tuple[PriceLevel, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "bids", tuple(self.bids))
        object.__setattr__(self, "asks", tuple(self.asks))

    @property
    def best_bid(self) -> Optional[PriceLevel]:
        return self.bids[0] if self.bids else None

    @property
    def best_ask(self) -> Optional[PriceLevel]:
        return self.asks[0] if self.asks else None

    @classmethod
    def from_pairs(
        cls,
        bids: Iterable[Sequence[RawNumber]],
        asks: Iterable[Sequence[RawNumber]],
    ) -> "OrderBook":
        """Build a book from ``[price, quantity]`` pairs.

        Venues send these either as strings (``["101.5", "0.2"]``) or as
        numbers; both are accepted. Pairs must already be best-first.
        """

        return cls(
            bids=tuple(PriceLevel(p, q) for p, q in bids),
            asks=tuple(PriceLevel(p, q) for p, q in asks),
        )
