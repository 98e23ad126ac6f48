"""Simulated per-currency balances and trade settlement."""

from __future__ import annotations

from decimal import Decimal
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional

from .book import RawNumber, to_decimal
from .instruction import TradeInstruction
from ..errors import MissingCurrencyError
from ..types import Currency


DEFAULT_BALANCES: Mapping[Currency, Decimal] = MappingProxyType(
    {
        Currency.BRL: Decimal("50000"),
        Currency.BTC: Decimal("0"),
        Currency.ETH: Decimal("0"),
        Currency.USDT: Decimal("0"),
    }
)


class BalanceLedger(Mapping[Currency, Decimal]):
    """Read-only balance snapshot.

    Holds whichever currencies it was built with; settling a symbol whose
    base or quote is absent raises :class:`MissingCurrencyError`. Updates
    produce a new ledger via :meth:`replace` or :func:`apply` and never
    touch this one.
    """

    __slots__ = ("_balances",)

    def __init__(self, balances: Mapping[Currency, RawNumber]) -> None:
        self._balances = MappingProxyType(
            {Currency(c): to_decimal(v) for c, v in balances.items()}
        )

    @classmethod
    def initial(
        cls, overrides: Optional[Mapping[Currency, RawNumber]] = None
    ) -> "BalanceLedger":
        """Default allocation with ``overrides`` applied on top."""

        balances: Dict[Currency, RawNumber] = dict(DEFAULT_BALANCES)
        balances.update(overrides or {})
        return cls(balances)

    def __getitem__(self, currency: Currency) -> Decimal:
        try:
            return self._balances[currency]
        except KeyError:
            raise MissingCurrencyError(f"ledger has no {currency}") from None

    def __iter__(self) -> Iterator[Currency]:
        return iter(self._balances)

    def __len__(self) -> int:
        return len(self._balances)

    def __repr__(self) -> str:
        inner = ", ".join(f"{c.value}: {v}" for c, v in self._balances.items())
        return f"BalanceLedger({{{inner}}})"

    def replace(self, **changes: Decimal) -> "BalanceLedger":
        balances = dict(self._balances)
        for name, value in changes.items():
            currency = Currency(name)
            if currency not in balances:
                raise MissingCurrencyError(f"ledger has no {currency}")
            balances[currency] = value
        return BalanceLedger(balances)

    def as_dict(self) -> Dict[str, str]:
        return {c.value: str(v) for c, v in self._balances.items()}


def apply(ledger: BalanceLedger, instruction: TradeInstruction) -> BalanceLedger:
    """Settle ``instruction`` and return the resulting ledger.

    The quote currency pays for ``quantity`` at the ask plus both legs' fees
    (``total_cost`` is non-positive); the base currency receives
    ``quantity``.
    """

    quote = instruction.symbol.quote
    base = instruction.symbol.base
    paid = instruction.quantity * instruction.ask_price
    return ledger.replace(
        **{
            quote.value: ledger[quote] - paid + instruction.total_cost,
            base.value: ledger[base] + instruction.quantity,
        }
    )
