import asyncio
from decimal import Decimal

import pytest
from prometheus_client import REGISTRY

from arbbot.engine import ShortPrimaryLongSecondary, ShortSecondaryLongPrimary, TradeEngine
from arbbot.errors import ExecutionError, SettlementError
from arbbot.exchange import AbstractConnector, ExecutionResult, PaperConnector
from arbbot.persistence import DAL
from arbbot.types import Currency, Side, Symbol, Venue

D = Decimal


def instruction(kind=ShortSecondaryLongPrimary):
    return kind(
        ask_price=D("100"),
        bid_price=D("110"),
        quantity=D("1"),
        symbol=Symbol.BTC_BRL,
        total_cost=D("-1"),
    )


class RecordingConnector(AbstractConnector):
    def __init__(self, venue: Venue) -> None:
        super().__init__(venue)
        self.calls = []

    async def execute_leg(self, side, symbol, qty, price):
        self.calls.append((side, symbol, qty, price))
        return ExecutionResult(venue=self.venue, side=side, symbol=symbol, quantity=qty, price=price)


def test_both_legs_settle(ledger, connectors):
    engine = TradeEngine(connectors)
    result = asyncio.run(engine.execute(instruction(), ledger, D("9")))
    assert result[Currency.BRL] == D("49899")
    assert result[Currency.BTC] == D("1")
    assert ledger[Currency.BRL] == D("50000")
    assert len(engine.settled) == 1
    assert engine.settled[0].profit == D("9")


@pytest.mark.parametrize(
    "kind,short,long",
    [
        (ShortSecondaryLongPrimary, Venue.SECONDARY, Venue.PRIMARY),
        (ShortPrimaryLongSecondary, Venue.PRIMARY, Venue.SECONDARY),
    ],
)
def test_legs_routed_to_venues(ledger, kind, short, long):
    conns = {venue: RecordingConnector(venue) for venue in Venue}
    asyncio.run(TradeEngine(conns).execute(instruction(kind), ledger))
    assert conns[short].calls == [(Side.SHORT, Symbol.BTC_BRL, D("1"), D("110"))]
    assert conns[long].calls == [(Side.LONG, Symbol.BTC_BRL, D("1"), D("100"))]


def test_failed_leg_leaves_ledger_unchanged(ledger, connectors):
    connectors[Venue.PRIMARY] = PaperConnector(Venue.PRIMARY, delay=0, fail=True)
    engine = TradeEngine(connectors)
    with pytest.raises(SettlementError) as exc_info:
        asyncio.run(engine.execute(instruction(), ledger))
    err = exc_info.value
    assert err.confirmed == (Venue.SECONDARY,)
    assert len(err.failures) == 1
    assert isinstance(err.failures[0], ExecutionError)
    assert ledger[Currency.BRL] == D("50000")
    assert engine.settled == []


def test_both_legs_failing(ledger):
    conns = {venue: PaperConnector(venue, delay=0, fail=True) for venue in Venue}
    with pytest.raises(SettlementError) as exc_info:
        asyncio.run(TradeEngine(conns).execute(instruction(), ledger))
    assert exc_info.value.confirmed == ()
    assert len(exc_info.value.failures) == 2


class Broken(AbstractConnector):
    async def execute_leg(self, side, symbol, qty, price):
        raise RuntimeError("boom")


def exposure(venue: Venue) -> float:
    return REGISTRY.get_sample_value("arb_open_exposure_total", {"venue": venue.value}) or 0.0


def test_unexpected_error_propagates(ledger, connectors):
    connectors[Venue.SECONDARY] = Broken(Venue.SECONDARY)
    with pytest.raises(RuntimeError):
        asyncio.run(TradeEngine(connectors).execute(instruction(), ledger))


def test_unexpected_error_closes_out_journal(tmp_path, ledger, connectors):
    dal = DAL(str(tmp_path / "journal.sqlite"))
    connectors[Venue.PRIMARY] = Broken(Venue.PRIMARY)
    before = exposure(Venue.SECONDARY)
    engine = TradeEngine(connectors, journal=dal)
    with pytest.raises(RuntimeError):
        asyncio.run(engine.execute(instruction(), ledger))
    [decision] = dal.list_decisions()
    assert decision.status == "failed"
    legs = {(leg.venue, leg.ok) for leg in dal.list_legs(decision.id)}
    assert legs == {("mercadobitcoin", True), ("binance", False)}
    assert exposure(Venue.SECONDARY) == before + 1
    assert engine.settled == []
    assert ledger[Currency.BRL] == D("50000")


def test_missing_connector_rejected():
    with pytest.raises(ValueError):
        TradeEngine({Venue.PRIMARY: PaperConnector(Venue.PRIMARY)})


def test_connector_venue_mismatch_rejected():
    with pytest.raises(ValueError):
        TradeEngine(
            {
                Venue.PRIMARY: PaperConnector(Venue.SECONDARY),
                Venue.SECONDARY: PaperConnector(Venue.SECONDARY),
            }
        )


def test_journal_records_settlement(tmp_path, ledger, connectors):
    dal = DAL(str(tmp_path / "journal.sqlite"))
    asyncio.run(TradeEngine(connectors, journal=dal).execute(instruction(), ledger, D("9")))
    [decision] = dal.list_decisions()
    assert decision.status == "settled"
    assert decision.direction == "ShortSecondaryLongPrimary"
    assert D(decision.profit) == D("9")
    legs = dal.list_legs(decision.id)
    assert {(leg.venue, leg.side, leg.ok) for leg in legs} == {
        ("mercadobitcoin", "short", True),
        ("binance", "long", True),
    }


def test_journal_records_failure(tmp_path, ledger, connectors):
    dal = DAL(str(tmp_path / "journal.sqlite"))
    connectors[Venue.SECONDARY] = PaperConnector(Venue.SECONDARY, delay=0, fail=True)
    with pytest.raises(SettlementError):
        asyncio.run(TradeEngine(connectors, journal=dal).execute(instruction(), ledger))
    [decision] = dal.list_decisions()
    assert decision.status == "failed"
    failed = [leg for leg in dal.list_legs(decision.id) if not leg.ok]
    assert len(failed) == 1
    assert failed[0].venue == "mercadobitcoin"
    assert "rejected" in failed[0].error
