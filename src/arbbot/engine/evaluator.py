"""Fee-aware cross-venue arbitrage detection."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional, Tuple, Type

from prometheus_client import Counter

from .book import OrderBook, PriceLevel
from .fees import DEFAULT_FEES, FeeSchedule
from .instruction import (
    ShortPrimaryLongSecondary,
    ShortSecondaryLongPrimary,
    TradeInstruction,
)
from ..types import Symbol


logger = logging.getLogger(__name__)

ARB_DECISIONS = Counter(
    "arb_decisions", "Arbitrage evaluations by outcome", ["symbol", "outcome"]
)

Decision = Tuple[Decimal, TradeInstruction]


class ArbitrageEvaluator:
    """Compare two books and pick the profitable direction, if any."""

    def __init__(self, fees: FeeSchedule = DEFAULT_FEES) -> None:
        self.fees = fees

    def evaluate(
        self, primary: OrderBook, secondary: OrderBook, symbol: Symbol
    ) -> Optional[Decision]:
        """Return ``(profit, instruction)`` or ``None`` when nothing pays.

        Only one direction can cross at a time: the secondary bid above the
        primary ask is checked first, then the primary bid above the
        secondary ask. Breakeven (``profit == 0``) is taken.
        """

        p_bid, p_ask = primary.best_bid, primary.best_ask
        s_bid, s_ask = secondary.best_bid, secondary.best_ask
        if p_bid is None or p_ask is None or s_bid is None or s_ask is None:
            logger.debug("%s: book lacks depth, skipping", symbol.value)
            ARB_DECISIONS.labels(symbol.value, "none").inc()
            return None

        if s_bid.price > p_ask.price:
            decision = self._price(
                ShortSecondaryLongPrimary, s_bid, p_ask, symbol
            )
        elif p_bid.price > s_ask.price:
            decision = self._price(
                ShortPrimaryLongSecondary, p_bid, s_ask, symbol
            )
        else:
            logger.debug(
                "%s: no crossing (primary %s/%s, secondary %s/%s)",
                symbol.value,
                p_bid.price,
                p_ask.price,
                s_bid.price,
                s_ask.price,
            )
            ARB_DECISIONS.labels(symbol.value, "none").inc()
            return None

        if decision is None:
            ARB_DECISIONS.labels(symbol.value, "unprofitable").inc()
            return None
        profit, instruction = decision
        logger.info(
            "%s: %s qty=%s bid=%s ask=%s cost=%s profit=%s",
            symbol.value,
            instruction.direction,
            instruction.quantity,
            instruction.bid_price,
            instruction.ask_price,
            instruction.total_cost,
            profit,
        )
        ARB_DECISIONS.labels(symbol.value, "opportunity").inc()
        return decision

    def _price(
        self,
        kind: Type[TradeInstruction],
        bid: PriceLevel,
        ask: PriceLevel,
        symbol: Symbol,
    ) -> Optional[Decision]:
        qty = min(bid.quantity, ask.quantity)
        spread = bid.price - ask.price
        cost = -(
            self.fees.fee_cost(kind.short_venue, bid.price, qty)
            + self.fees.fee_cost(kind.long_venue, ask.price, qty)
        )
        profit = spread + cost
        logger.debug(
            "%s: %s spread=%s cost=%s profit=%s",
            symbol.value,
            kind.__name__,
            spread,
            cost,
            profit,
        )
        if profit < 0:
            return None
        return profit, kind(
            ask_price=ask.price,
            bid_price=bid.price,
            quantity=qty,
            symbol=symbol,
            total_cost=cost,
        )


def evaluate(
    primary: OrderBook,
    secondary: OrderBook,
    symbol: Symbol,
    fees: FeeSchedule = DEFAULT_FEES,
) -> Optional[Decision]:
    return ArbitrageEvaluator(fees).evaluate(primary, secondary, symbol)
