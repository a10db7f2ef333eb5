"""Tests for config.json loading and saving."""

import json
from decimal import Decimal

import pytest

from darkbear.core.config import (
    AppConfig,
    get_config,
    resolve_path,
    save_config,
    set_config_path,
    update_config,
)
from darkbear.core.exceptions import ConfigError
from darkbear.core.valuation import SellPolicy


def test_defaults_when_missing(isolated_config):
    cfg = get_config()
    assert cfg == AppConfig()
    assert cfg.currency == "IDR"
    assert cfg.usd_rate == Decimal("15800")
    assert cfg.lot_size == 100
    assert cfg.sell_policy == SellPolicy.IGNORE


def test_loads_file(isolated_config):
    isolated_config.write_text(json.dumps({
        "currency": "USD",
        "usd_rate": 1,
        "lot_size": 1,
        "sell_policy": "reject",
    }))
    set_config_path(str(isolated_config))
    cfg = get_config()
    assert cfg.currency == "USD"
    assert cfg.usd_rate == Decimal("1")
    assert cfg.lot_size == 1
    assert cfg.sell_policy == SellPolicy.REJECT
    assert cfg.ledger_path == "transactions.json"


@pytest.mark.parametrize(
    "content",
    [
        "{not json",
        '{"sell_policy": "yolo"}',
        "[1, 2]",
        '{"usd_rate": "x"}',
        '{"lot_size": null}',
        '{"lot_size": 0}',
        '{"usd_rate": -1}',
        '{"usd_rate": "NaN"}',
    ],
)
def test_malformed_file_falls_back_to_defaults(isolated_config, content, caplog):
    isolated_config.write_text(content)
    set_config_path(str(isolated_config))
    with caplog.at_level("WARNING", logger="darkbear.core.config"):
        assert get_config() == AppConfig()
    assert "Ignoring unreadable config" in caplog.text


def test_save_then_reload(isolated_config):
    save_config(AppConfig(currency="EUR", usd_rate=Decimal("0.92"), sell_policy=SellPolicy.CLAMP))
    set_config_path(str(isolated_config))  # drop cache
    cfg = get_config()
    assert cfg.currency == "EUR"
    assert cfg.usd_rate == Decimal("0.92")
    assert cfg.sell_policy == SellPolicy.CLAMP


def test_cached(isolated_config):
    first = get_config()
    isolated_config.write_text(json.dumps({"currency": "USD"}))
    assert get_config() is first


class TestUpdateConfig:
    def test_updates_and_persists(self, isolated_config):
        cfg = update_config("sell_policy", "CLAMP")
        assert cfg.sell_policy == SellPolicy.CLAMP
        assert json.loads(isolated_config.read_text())["sell_policy"] == "clamp"

    def test_converts_types(self):
        assert update_config("usd_rate", "16250.5").usd_rate == Decimal("16250.5")
        assert update_config("lot_size", "500").lot_size == 500
        assert update_config("currency", "usd").currency == "USD"

    @pytest.mark.parametrize(
        "key,value",
        [("colour", "red"), ("lot_size", "ten"), ("lot_size", "0"), ("usd_rate", "-1"), ("sell_policy", "maybe")],
    )
    def test_rejects_bad_values(self, key, value):
        with pytest.raises(ConfigError):
            update_config(key, value)


def test_resolve_path_relative_to_config(isolated_config, tmp_path):
    assert resolve_path("transactions.json") == isolated_config.parent / "transactions.json"
    absolute = tmp_path / "elsewhere" / "q.json"
    assert resolve_path(str(absolute)) == absolute
