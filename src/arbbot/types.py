"""Shared enumerations for venues, currencies and tradable symbols."""

from __future__ import annotations

from enum import Enum


class Side(str, Enum):
    SHORT = "short"
    LONG = "long"


class Venue(str, Enum):
    """The two exchanges being compared."""

    PRIMARY = "binance"
    SECONDARY = "mercadobitcoin"


class Currency(str, Enum):
    BRL = "BRL"
    BTC = "BTC"
    USDT = "USDT"
    ETH = "ETH"


class Symbol(str, Enum):
    """Tradable pairs. Every pair delivers a base currency against BRL."""

    BTC_BRL = "BTC-BRL"
    USDT_BRL = "USDT-BRL"
    ETH_BRL = "ETH-BRL"

    @property
    def base(self) -> Currency:
        return Currency(self.value.split("-")[0])

    @property
    def quote(self) -> Currency:
        return Currency(self.value.split("-")[1])

    def venue_param(self, venue: Venue) -> str:
        """Return the symbol as each venue's REST API spells it."""

        if venue is Venue.PRIMARY:
            return f"{self.base.value}{self.quote.value}"
        return self.base.value

    @classmethod
    def parse(cls, text: str) -> "Symbol":
        norm = text.strip().upper().replace("_", "-").replace("/", "-")
        if "-" not in norm and norm.endswith("BRL"):
            norm = f"{norm[:-3]}-BRL"
        try:
            return cls(norm)
        except ValueError:
            raise ValueError(f"unsupported symbol: {text}") from None


DEFAULT_SYMBOL = Symbol.BTC_BRL
