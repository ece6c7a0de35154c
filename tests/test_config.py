import logging

from mimi import config


def test_int_setting_reads_the_environment(monkeypatch):
    monkeypatch.setenv("FREE_GAMES_LIMIT", "7")
    assert config._int_env("FREE_GAMES_LIMIT", 20) == 7


def test_missing_setting_uses_the_default(monkeypatch):
    monkeypatch.delenv("FREE_GAMES_LIMIT", raising=False)
    assert config._int_env("FREE_GAMES_LIMIT", 20) == 20
    monkeypatch.setenv("TTS_TIMEOUT", "  ")
    assert config._float_env("TTS_TIMEOUT", 8.0) == 8.0


def test_malformed_int_setting_is_logged(monkeypatch, caplog):
    monkeypatch.setenv("FREE_GAMES_LIMIT", "2O")
    with caplog.at_level(logging.WARNING, logger="mimi.config"):
        assert config._int_env("FREE_GAMES_LIMIT", 20) == 20
    assert "FREE_GAMES_LIMIT" in caplog.text


def test_malformed_float_setting_is_logged(monkeypatch, caplog):
    monkeypatch.setenv("TTS_TIMEOUT", "fast")
    with caplog.at_level(logging.WARNING, logger="mimi.config"):
        assert config._float_env("TTS_TIMEOUT", 8.0) == 8.0
    assert "TTS_TIMEOUT" in caplog.text
