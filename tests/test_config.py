import sys
from pathlib import Path

import pytest

from totp_engine import config


def test_log_dir_env_override(monkeypatch, tmp_path):
    monkeypatch.setenv("NORO_OTP_LOG_DIR", str(tmp_path))
    assert config.log_dir() == tmp_path


def test_log_dir_defaults_outside_package(monkeypatch, tmp_path):
    monkeypatch.delenv("NORO_OTP_LOG_DIR", raising=False)
    monkeypatch.delattr(sys, "frozen", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))

    result = config.log_dir()
    package_root = Path(config.__file__).resolve().parent.parent
    assert result == tmp_path / ".noro-otp" / "logs"
    assert package_root not in result.resolve().parents


def test_tick_interval_default(monkeypatch):
    monkeypatch.delenv("NORO_OTP_TICK_MS", raising=False)
    assert config.tick_interval_ms() == config.DEFAULT_TICK_MS


def test_tick_interval_override(monkeypatch):
    monkeypatch.setenv("NORO_OTP_TICK_MS", "250")
    assert config.tick_interval_ms() == 250


@pytest.mark.parametrize("raw", ["abc", "0", "-5", ""])
def test_tick_interval_invalid_falls_back(monkeypatch, caplog, raw):
    monkeypatch.setenv("NORO_OTP_TICK_MS", raw)
    assert config.tick_interval_ms() == config.DEFAULT_TICK_MS
    assert "NORO_OTP_TICK_MS" in caplog.text
