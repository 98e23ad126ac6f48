"""Per-venue trading fee schedules."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Sequence, Tuple

from .book import RawNumber, to_decimal
from ..errors import FeeScheduleError
from ..types import Venue


PRIMARY_FEE_RATE = Decimal("0.001")


@dataclass(frozen=True)
class FeeTier:
    """One notional band ``(previous upper_bound, upper_bound]``.

    ``upper_bound`` of ``None`` means the band is unbounded above.
    """

    upper_bound: Optional[Decimal]
    rate: Decimal


SECONDARY_FEE_TIERS: Tuple[FeeTier, ...] = (
    FeeTier(Decimal("500000"), Decimal("0.007")),
    FeeTier(Decimal("10000000"), Decimal("0.006")),
    FeeTier(Decimal("20000000"), Decimal("0.005")),
    FeeTier(Decimal("50000000"), Decimal("0.0045")),
    FeeTier(Decimal("100000000"), Decimal("0.004")),
    FeeTier(Decimal("200000000"), Decimal("0.003")),
    FeeTier(None, Decimal("0.0025")),
)


class FlatFeeSchedule:
    """Same rate regardless of traded notional."""

    def __init__(self, rate: RawNumber = PRIMARY_FEE_RATE) -> None:
        rate = to_decimal(rate)
        if not rate.is_finite() or rate < 0:
            raise FeeScheduleError(f"fee rate must be non-negative and finite, got {rate}")
        self.rate = rate

    def rate_for(self, notional: Decimal) -> Decimal:
        return self.rate


class TieredFeeSchedule:
    """Volume-discounted rate looked up by notional value.

    The table is validated on construction: bounds strictly increase, rates
    strictly decrease and only the final tier is unbounded, so every
    notional falls in exactly one band.
    """

    def __init__(self, tiers: Sequence[FeeTier] = SECONDARY_FEE_TIERS) -> None:
        self.tiers = tuple(tiers)
        self._validate()

    def _validate(self) -> None:
        if not self.tiers:
            raise FeeScheduleError("fee table is empty")
        if self.tiers[-1].upper_bound is not None:
            raise FeeScheduleError("last fee tier must be unbounded")
        prev: Optional[FeeTier] = None
        for tier in self.tiers:
            if tier.rate < 0:
                raise FeeScheduleError(f"negative fee rate {tier.rate}")
            if prev is not None:
                if prev.upper_bound is None:
                    raise FeeScheduleError("unbounded fee tier before the last one")
                if tier.upper_bound is not None and tier.upper_bound <= prev.upper_bound:
                    raise FeeScheduleError(
                        f"fee tier bounds overlap at {tier.upper_bound}"
                    )
                if tier.rate >= prev.rate:
                    raise FeeScheduleError(
                        f"fee rate {tier.rate} does not decrease after {prev.rate}"
                    )
            prev = tier

    def rate_for(self, notional: Decimal) -> Decimal:
        for tier in self.tiers:
            if tier.upper_bound is None or notional <= tier.upper_bound:
                return tier.rate
        raise FeeScheduleError(f"no fee tier matches notional {notional}")


class FeeSchedule:
    """Fee rate lookup for both venues."""

    def __init__(
        self,
        primary: Optional[FlatFeeSchedule] = None,
        secondary: Optional[TieredFeeSchedule] = None,
    ) -> None:
        self.schedules = {
            Venue.PRIMARY: primary or FlatFeeSchedule(),
            Venue.SECONDARY: secondary or TieredFeeSchedule(),
        }

    def fee_rate(self, venue: Venue, price: Decimal, quantity: Decimal) -> Decimal:
        """Return the fraction of ``price * quantity`` charged on ``venue``."""

        return self.schedules[venue].rate_for(price * quantity)

    def fee_cost(self, venue: Venue, price: Decimal, quantity: Decimal) -> Decimal:
        return self.fee_rate(venue, price, quantity) * price * quantity


DEFAULT_FEES = FeeSchedule()


def fee_rate(venue: Venue, price: Decimal, quantity: Decimal) -> Decimal:
    return DEFAULT_FEES.fee_rate(venue, price, quantity)
