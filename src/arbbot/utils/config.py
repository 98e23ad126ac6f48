"""Configuration management utilities."""

from dataclasses import dataclass, field
import argparse
import os
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional

from ..types import Currency, Symbol, DEFAULT_SYMBOL


def parse_balance(text: str) -> Dict[Currency, Decimal]:
    """Parse ``"BRL=50000,BTC=0.5"`` into a currency mapping."""

    out: Dict[Currency, Decimal] = {}
    for item in text.split(","):
        item = item.strip()
        if not item:
            continue
        cur, sep, amount = item.partition("=")
        if not sep:
            raise argparse.ArgumentTypeError(f"expected CUR=AMOUNT, got {item!r}")
        try:
            out[Currency(cur.strip().upper())] = Decimal(amount.strip())
        except (ValueError, InvalidOperation):
            raise argparse.ArgumentTypeError(f"invalid balance {item!r}") from None
    return out


def _decimal(text: str) -> Decimal:
    try:
        return Decimal(text)
    except InvalidOperation:
        raise argparse.ArgumentTypeError(f"not a number: {text!r}") from None


def _symbol(text: str) -> Symbol:
    try:
        return Symbol.parse(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from None


def parse_args(args: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments or provided list."""
    parser = argparse.ArgumentParser(description="cross-venue arbitrage check")
    parser.add_argument(
        "--symbol",
        type=_symbol,
        default=os.getenv("ARB_SYMBOL", DEFAULT_SYMBOL.value),
        help="Pair to compare, e.g. BTC-BRL",
    )
    parser.add_argument(
        "--balance",
        type=parse_balance,
        action="append",
        default=[],
        help="Starting balance override CUR=AMOUNT (repeatable)",
    )
    parser.add_argument(
        "--primary-fee-rate",
        type=_decimal,
        default=os.getenv("ARB_PRIMARY_FEE_RATE", "0.001"),
        help="Flat fee rate charged by the primary venue",
    )
    parser.add_argument(
        "--leg-delay",
        type=float,
        default=float(os.getenv("ARB_LEG_DELAY", "1.0")),
        help="Simulated latency of each paper trade leg in seconds",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=float(os.getenv("ARB_HTTP_TIMEOUT", "5")),
        help="HTTP timeout for order book requests",
    )
    parser.add_argument(
        "--db-path",
        default=os.getenv("ARB_DB_PATH"),
        help="Path to SQLite trade journal (disabled when unset)",
    )
    parser.add_argument(
        "--log-level",
        default=os.getenv("LOG_LEVEL", "INFO"),
        help="Logging level",
    )
    ns = parser.parse_args(args)
    try:
        balances = parse_balance(os.getenv("ARB_BALANCES", ""))
    except argparse.ArgumentTypeError as exc:
        parser.error(f"ARB_BALANCES: {exc}")
    for override in ns.balance:
        balances.update(override)
    ns.balance = balances
    return ns


@dataclass
class BotConfig:
    symbol: Symbol = DEFAULT_SYMBOL
    balances: Dict[Currency, Decimal] = field(default_factory=dict)
    primary_fee_rate: Decimal = Decimal("0.001")
    leg_delay: float = 1.0
    timeout: float = 5.0
    db_path: Optional[str] = None
    log_level: str = "INFO"

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "BotConfig":
        return cls(
            symbol=args.symbol,
            balances=dict(args.balance),
            primary_fee_rate=args.primary_fee_rate,
            leg_delay=args.leg_delay,
            timeout=args.timeout,
            db_path=args.db_path,
            log_level=args.log_level,
        )
