"""Arbitrage decision engine."""

from .book import OrderBook, PriceLevel
from .fees import FeeSchedule, FeeTier, FlatFeeSchedule, TieredFeeSchedule, fee_rate
from .instruction import (
    ShortPrimaryLongSecondary,
    ShortSecondaryLongPrimary,
    TradeInstruction,
)
from .evaluator import ArbitrageEvaluator, evaluate
from .ledger import BalanceLedger, apply
from .trade import Settlement, TradeEngine
from ..types import Currency, Side, Symbol, Venue

__all__ = [
    "OrderBook",
    "PriceLevel",
    "FeeSchedule",
    "FeeTier",
    "FlatFeeSchedule",
    "TieredFeeSchedule",
    "fee_rate",
    "ShortPrimaryLongSecondary",
    "ShortSecondaryLongPrimary",
    "TradeInstruction",
    "ArbitrageEvaluator",
    "evaluate",
    "BalanceLedger",
    "apply",
    "Settlement",
    "TradeEngine",
    "Currency",
    "Side",
    "Symbol",
    "Venue",
]
