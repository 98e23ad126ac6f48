from decimal import Decimal

import pytest

from arbbot.engine import BalanceLedger, OrderBook
from arbbot.exchange import PaperConnector
from arbbot.types import Currency, Venue


@pytest.fixture
def book():
    def make(bids=(), asks=()) -> OrderBook:
        return OrderBook.from_pairs(bids, asks)

    return make


@pytest.fixture
def ledger() -> BalanceLedger:
    return BalanceLedger.initial({Currency.BRL: Decimal("50000")})


@pytest.fixture
def connectors():
    return {venue: PaperConnector(venue, delay=0) for venue in Venue}
