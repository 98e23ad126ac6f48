"""Entry point for a single cross-venue arbitrage check.

Fetches both order books, evaluates the spread net of fees, runs both paper
legs when it pays and reports the resulting balances.
"""

import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parent))

import asyncio
import logging
from typing import List, Optional

from arbbot.engine import (
    ArbitrageEvaluator,
    BalanceLedger,
    FeeSchedule,
    FlatFeeSchedule,
    TradeEngine,
)
from arbbot.errors import FeedError, SettlementError
from arbbot.exchange import PaperConnector
from arbbot.feeds import BinanceFeed, MercadoBitcoinFeed, OrderBookFeed, fetch_books
from arbbot.persistence import DAL
from arbbot.types import Venue
from arbbot.utils import BotConfig, parse_args


logger = logging.getLogger("arbbot")


async def run_once(
    cfg: BotConfig,
    primary: OrderBookFeed,
    secondary: OrderBookFeed,
    engine: TradeEngine,
) -> BalanceLedger:
    """Run one fetch/evaluate/settle cycle and return the final ledger."""

    ledger = BalanceLedger.initial(cfg.balances)
    fees = FeeSchedule(primary=FlatFeeSchedule(cfg.primary_fee_rate))
    book_primary, book_secondary = await fetch_books(primary, secondary, cfg.symbol)
    decision = ArbitrageEvaluator(fees).evaluate(book_primary, book_secondary, cfg.symbol)
    if decision is None:
        logger.info("%s: no opportunity", cfg.symbol.value)
        return ledger
    profit, instruction = decision
    return await engine.execute(instruction, ledger, profit)


async def _main(cfg: BotConfig) -> int:
    journal = DAL(cfg.db_path) if cfg.db_path else None
    engine = TradeEngine(
        {
            venue: PaperConnector(venue, delay=cfg.leg_delay)
            for venue in Venue
        },
        journal=journal,
    )
    try:
        async with BinanceFeed(timeout=cfg.timeout) as primary, MercadoBitcoinFeed(
            timeout=cfg.timeout
        ) as secondary:
            ledger = await run_once(cfg, primary, secondary, engine)
    except FeedError as exc:
        logger.error("order book unavailable: %s", exc)
        return 1
    except SettlementError as exc:
        logger.error("%s; balances unchanged", exc)
        return 1
    finally:
        if journal is not None:
            journal.engine.dispose()
    logger.info("current balance = %s", ledger.as_dict())
    return 0


def main(args: Optional[List[str]] = None) -> int:
    cfg = BotConfig.from_args(parse_args(args))
    logging.basicConfig(level=getattr(logging, cfg.log_level.upper(), logging.INFO))
    return asyncio.run(_main(cfg))


if __name__ == "__main__":
    sys.exit(main())
