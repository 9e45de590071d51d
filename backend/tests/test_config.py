import json
import logging

from spendwise.config import AppConfig, load_config, save_config


def test_missing_config_uses_defaults(tmp_path):
    config = load_config(tmp_path / "missing.json")
    assert config.default_currency == "USD"
    assert config.max_lookback_months == 24
    assert config.guest_limits == {"category": 5, "transaction": 20}


def test_invalid_config_falls_back_to_defaults(tmp_path, caplog):
    path = tmp_path / "config.json"
    path.write_text("{not json")
    with caplog.at_level(logging.WARNING, logger="spendwise.config"):
        config = load_config(path)
    assert config == AppConfig()
    assert "Ignoring invalid config" in caplog.text


def test_save_and_load(tmp_path):
    path = tmp_path / "nested" / "config.json"
    save_config(AppConfig(default_currency="EUR", currency_rates={"EUR": 0.9}), path)

    assert json.loads(path.read_text())["default_currency"] == "EUR"
    config = load_config(path)
    assert config.default_currency == "EUR"
    assert config.currency_rates == {"EUR": 0.9}


def test_database_path(tmp_path):
    assert AppConfig().resolved_database_path().name == "spendwise.db"
    config = AppConfig(database_path=str(tmp_path / "budget.db"))
    assert config.resolved_database_path() == tmp_path / "budget.db"
