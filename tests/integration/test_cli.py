"""End-to-end CLI tests.

Simulates the journal workflow against files in a temp directory:
  1. Record buys and sells (stock lots, gold grams, crypto coins)
  2. Store quotes without network calls
  3. Value the portfolio: positions, stats, analytics
  4. Edit and delete journal entries
  5. Sell policy enforcement from config

Demo journal
------------
  BBCA  2 lots  @ 9,000   = 1,800,000  (200 shares)
  ANTM  10 g    @ 1,000,000 = 10,000,000
  BTC   0.1     @ 1,000,000,000 = 100,000,000, then sell 0.05

Quotes:
  BBCA → 9,500 (+1%)   value 1,900,000
  ANTM → 1,100,000     value 11,000,000
  BTC  → 1,200,000,000 value 60,000,000
"""

import json
from datetime import datetime
from decimal import Decimal

import pytest
from typer.testing import CliRunner

from darkbear.cli.main import app
from darkbear.core.models import FetchReport, MarketQuote
from darkbear.data.files import load_ledger, load_quotes, save_quotes

runner = CliRunner()


def _run(*args):
    return runner.invoke(app, list(args))


@pytest.fixture
def journal():
    for args in [
        ("tx", "buy", "BBCA", "2", "9000", "--date", "2024-01-02", "--name", "Bank Central Asia"),
        ("tx", "buy", "ANTM", "10", "1000000", "--date", "2024-01-03"),
        ("tx", "buy", "btc", "0.1", "1000000000", "--date", "2024-01-04"),
        ("tx", "sell", "BTC", "0.05", "1100000000", "--date", "2024-02-01"),
    ]:
        result = _run(*args)
        assert result.exit_code == 0, result.output
    return load_ledger()


@pytest.fixture
def quotes():
    stored = {
        "BBCA": MarketQuote("BBCA", Decimal("9500"), Decimal("1")),
        "ANTM": MarketQuote("ANTM", Decimal("1100000")),
        "BTC": MarketQuote("BTC", Decimal("1200000000")),
    }
    save_quotes(stored)
    return stored


class TestTransactions:
    def test_buy_writes_journal(self, journal, isolated_config):
        assert len(journal) == 4
        assert journal.newest_first()[0].transaction_type.value == "SELL"
        assert [t.symbol for t in journal.chronological()] == ["BBCA", "ANTM", "BTC", "BTC"]
        data = json.loads((isolated_config.parent / "transactions.json").read_text())
        assert data[-1]["name"] == "Bank Central Asia"

    def test_buy_output(self):
        result = _run("tx", "buy", "BBCA", "1", "9000")
        assert result.exit_code == 0
        assert "Bought 1 × BBCA" in result.output

    def test_invalid_quantity(self):
        result = _run("tx", "buy", "BBCA", "zero", "9000")
        assert result.exit_code == 1
        assert "Invalid number for quantity" in result.output

    def test_invalid_date(self):
        result = _run("tx", "buy", "BBCA", "1", "9000", "--date", "02/01/2024")
        assert result.exit_code == 1
        assert "Invalid date format" in result.output

    def test_list(self, journal):
        result = _run("tx", "list")
        assert result.exit_code == 0
        assert "BBCA" in result.output
        assert "ANTM" in result.output
        assert "2024-02-01" in result.output

    def test_list_filtered(self, journal):
        result = _run("tx", "list", "--symbol", "btc")
        assert "BTC" in result.output
        assert "ANTM" not in result.output

    def test_list_empty(self):
        result = _run("tx", "list")
        assert "No transactions yet" in result.output

    def test_edit(self, journal):
        tx = journal.chronological()[0]
        result = _run("tx", "edit", tx.id, "--qty", "3", "--notes", "topped up")
        assert result.exit_code == 0, result.output
        edited = load_ledger().get(tx.id)
        assert edited.quantity == Decimal("3")
        assert edited.notes == "topped up"
        assert edited.price == Decimal("9000")

    def test_edit_unknown(self):
        result = _run("tx", "edit", "missing", "--qty", "3")
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_delete(self, journal):
        tx = journal.newest_first()[0]
        result = _run("tx", "delete", tx.id, "--force")
        assert result.exit_code == 0
        assert len(load_ledger()) == 3

    def test_delete_cancelled(self, journal):
        tx = journal.newest_first()[0]
        result = runner.invoke(app, ["tx", "delete", tx.id], input="n\n")
        assert "Cancelled" in result.output
        assert len(load_ledger()) == 4


class TestSellPolicy:
    def test_oversell_recorded_under_default_policy(self):
        _run("tx", "buy", "BTC", "1", "100")
        result = _run("tx", "sell", "BTC", "2", "100")
        assert result.exit_code == 0
        assert len(load_ledger()) == 2

    def test_reject_policy_blocks_oversell(self):
        assert _run("config", "set", "sell_policy", "reject").exit_code == 0
        _run("tx", "buy", "BTC", "1", "100")
        result = _run("tx", "sell", "BTC", "2", "100")
        assert result.exit_code == 1
        assert "only 1 held" in result.output
        assert len(load_ledger()) == 1

    def test_reject_policy_blocks_deleting_backing_buy(self):
        _run("config", "set", "sell_policy", "reject")
        _run("tx", "buy", "BTC", "1", "100")
        _run("tx", "sell", "BTC", "1", "100")
        buy = load_ledger().chronological()[0]
        result = _run("tx", "delete", buy.id, "--force")
        assert result.exit_code == 1
        assert len(load_ledger()) == 2


class TestPortfolio:
    def test_positions(self, journal, quotes):
        result = _run("portfolio", "positions")
        assert result.exit_code == 0, result.output
        for symbol in ("BBCA", "ANTM", "BTC"):
            assert symbol in result.output
        assert "1,900,000.00" in result.output
        assert "60,000,000.00" in result.output

    def test_stats(self, journal, quotes):
        result = _run("portfolio", "stats")
        assert result.exit_code == 0, result.output
        # value 1.9M + 11M + 60M, invested 1.8M + 10M + 50M
        assert "IDR 72,900,000.00" in result.output
        assert "IDR 61,800,000.00" in result.output
        assert "+IDR 11,100,000.00" in result.output
        # today: 1% of 1.9M
        assert "+IDR 19,000.00" in result.output

    def test_analytics(self, journal, quotes):
        result = _run("portfolio", "analytics")
        assert result.exit_code == 0, result.output
        assert "CRYPTO" in result.output
        assert "GOLD" in result.output
        assert "Relative Performance" in result.output

    def test_positions_without_quotes(self, journal):
        result = _run("portfolio", "positions")
        assert result.exit_code == 0
        assert "BBCA" in result.output

    def test_no_positions(self):
        result = _run("portfolio", "positions")
        assert "No open positions" in result.output

    def test_corrupt_journal(self, isolated_config):
        (isolated_config.parent / "transactions.json").write_text("{oops")
        result = _run("portfolio", "stats")
        assert result.exit_code == 1
        assert "Cannot read" in result.output


class TestQuotes:
    def test_fetch_stores_quotes(self, journal, monkeypatch):
        def fake_fetch(symbols, config=None, live_rate=True):
            assert list(symbols) == ["BBCA", "ANTM", "BTC"]
            return FetchReport(
                quotes={"BBCA": MarketQuote("BBCA", Decimal("9500"), Decimal("0.5"), datetime(2024, 5, 1, 9, 0))},
                missing=["ANTM", "BTC"],
                usd_rate=Decimal("15800"),
            )

        monkeypatch.setattr("darkbear.cli.commands.quotes.fetch_quotes", fake_fetch)
        result = _run("quotes", "fetch")
        assert result.exit_code == 0, result.output
        assert "FAILED" in result.output
        assert load_quotes()["BBCA"].price == Decimal("9500")

    def test_fetch_nothing(self):
        result = _run("quotes", "fetch")
        assert "No symbols" in result.output

    def test_show(self, quotes):
        result = _run("quotes", "show")
        assert result.exit_code == 0
        assert "1,200,000,000.00" in result.output


class TestConfig:
    def test_show(self):
        result = _run("config", "show")
        assert result.exit_code == 0
        assert "sell_policy" in result.output
        assert "ignore" in result.output

    def test_set_unknown_key(self):
        result = _run("config", "set", "colour", "red")
        assert result.exit_code == 1
        assert "Unknown config key" in result.output
