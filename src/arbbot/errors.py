"""Exception types raised across the arbitrage bot."""

from __future__ import annotations

from typing import TYPE_CHECKING, Tuple

if TYPE_CHECKING:  # pragma: no cover
    from .engine.instruction import TradeInstruction
    from .types import Venue


class ArbError(Exception):
    """Base class for all bot errors."""


class FeeScheduleError(ArbError):
    """Fee tier table is malformed or a notional matched no tier."""


class MissingCurrencyError(ArbError, KeyError):
    """A ledger lacks a currency it is required to carry."""


class FeedError(ArbError):
    """An order book could not be fetched or validated."""


class ExecutionError(ArbError):
    """A single trade leg was rejected by the venue or the transport."""


class SettlementError(ArbError):
    """A trade instruction was abandoned because a leg failed.

    ``confirmed`` lists the venues whose leg did go through; any entry there
    is open exposure that nothing has unwound.
    """

    def __init__(
        self,
        instruction: "TradeInstruction",
        confirmed: Tuple["Venue", ...],
        failures: Tuple[BaseException, ...],
    ) -> None:
        self.instruction = instruction
        self.confirmed = confirmed
        self.failures = failures
        reasons = "; ".join(str(f) for f in failures)
        super().__init__(f"trade not settled: {reasons}")
