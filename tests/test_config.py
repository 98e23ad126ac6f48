from decimal import Decimal

import pytest

from arbbot.types import Currency, Symbol
from arbbot.utils import BotConfig, parse_args, parse_balance


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "ARB_SYMBOL",
        "ARB_BALANCES",
        "ARB_PRIMARY_FEE_RATE",
        "ARB_LEG_DELAY",
        "ARB_HTTP_TIMEOUT",
        "ARB_DB_PATH",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


def test_parse_args_defaults():
    cfg = BotConfig.from_args(parse_args([]))
    assert cfg.symbol is Symbol.BTC_BRL
    assert cfg.balances == {}
    assert cfg.primary_fee_rate == Decimal("0.001")
    assert cfg.leg_delay == 1.0
    assert cfg.db_path is None
    assert cfg.log_level == "INFO"


def test_balance_overrides_merge():
    ns = parse_args(["--balance", "BRL=1000,BTC=0.5", "--balance", "btc=2"])
    assert ns.balance == {Currency.BRL: Decimal("1000"), Currency.BTC: Decimal("2")}


def test_env_fallbacks(monkeypatch):
    monkeypatch.setenv("ARB_SYMBOL", "eth-brl")
    monkeypatch.setenv("ARB_BALANCES", "BRL=10")
    monkeypatch.setenv("ARB_PRIMARY_FEE_RATE", "0.0005")
    monkeypatch.setenv("ARB_DB_PATH", "/tmp/journal.sqlite")
    cfg = BotConfig.from_args(parse_args(["--balance", "USDT=3"]))
    assert cfg.symbol is Symbol.ETH_BRL
    assert cfg.balances == {Currency.BRL: Decimal("10"), Currency.USDT: Decimal("3")}
    assert cfg.primary_fee_rate == Decimal("0.0005")
    assert cfg.db_path == "/tmp/journal.sqlite"


def test_cli_overrides_symbol():
    assert parse_args(["--symbol", "USDTBRL"]).symbol is Symbol.USDT_BRL


@pytest.mark.parametrize("argv", [["--symbol", "DOGE"], ["--balance", "BRL"], ["--primary-fee-rate", "x"]])
def test_invalid_arguments_exit(argv):
    with pytest.raises(SystemExit):
        parse_args(argv)


def test_invalid_env_balance_exits(monkeypatch):
    monkeypatch.setenv("ARB_BALANCES", "XYZ=1")
    with pytest.raises(SystemExit):
        parse_args([])


def test_parse_balance_skips_blanks():
    assert parse_balance(" BRL=5 , ,") == {Currency.BRL: Decimal("5")}
