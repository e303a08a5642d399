"""Tests for environment-driven configuration."""

from __future__ import annotations

import pytest

import lifeflow
from lifeflow.config import BaseConfig

ENGINE_VARS = ("LIFEFLOW_ROLLOVER_HOUR", "LIFEFLOW_WEEK_START_DAY", "LIFEFLOW_SCORE_WINDOW_DAYS")


@pytest.fixture(autouse=True)
def clean_env(tmp_path, monkeypatch):
    monkeypatch.setenv("LIFEFLOW_DATA_DIR", str(tmp_path))
    for name in ENGINE_VARS + ("LIFEFLOW_DATABASE_URL", "LIFEFLOW_DEV_MODE"):
        monkeypatch.delenv(name, raising=False)


def test_defaults(tmp_path):
    config = BaseConfig()

    assert config.DATA_DIR == tmp_path.resolve()
    assert config.DATABASE_URL == f"sqlite:///{tmp_path.resolve() / 'lifeflow.db'}"
    assert config.DEV_MODE is True
    assert (config.ROLLOVER_HOUR, config.WEEK_START_DAY, config.SCORE_WINDOW_DAYS) == (4, 1, 30)


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("LIFEFLOW_ROLLOVER_HOUR", "0")
    monkeypatch.setenv("LIFEFLOW_WEEK_START_DAY", "0")
    monkeypatch.setenv("LIFEFLOW_SCORE_WINDOW_DAYS", " 14 ")
    monkeypatch.setenv("LIFEFLOW_DEV_MODE", "off")
    monkeypatch.setenv("LIFEFLOW_DATABASE_URL", "sqlite:///:memory:")

    config = BaseConfig()

    assert (config.ROLLOVER_HOUR, config.WEEK_START_DAY, config.SCORE_WINDOW_DAYS) == (0, 0, 14)
    assert config.DEV_MODE is False
    assert config.DATABASE_URL == "sqlite:///:memory:"


def test_blank_value_uses_default(monkeypatch):
    monkeypatch.setenv("LIFEFLOW_ROLLOVER_HOUR", "")
    assert BaseConfig().ROLLOVER_HOUR == 4


def test_non_integer_rejected(monkeypatch):
    monkeypatch.setenv("LIFEFLOW_ROLLOVER_HOUR", "four")
    with pytest.raises(ValueError, match="LIFEFLOW_ROLLOVER_HOUR"):
        BaseConfig()


@pytest.mark.parametrize(
    "name, value",
    [
        ("LIFEFLOW_ROLLOVER_HOUR", "24"),
        ("LIFEFLOW_ROLLOVER_HOUR", "-1"),
        ("LIFEFLOW_WEEK_START_DAY", "7"),
        ("LIFEFLOW_SCORE_WINDOW_DAYS", "0"),
    ],
)
def test_out_of_range_rejected(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ValueError, match=name):
        BaseConfig()


def test_sqlite_engine_options():
    options = BaseConfig().sqlalchemy_engine_options()
    assert options["connect_args"] == {"check_same_thread": False}


def test_non_sqlite_engine_options(monkeypatch):
    monkeypatch.setenv("LIFEFLOW_DATABASE_URL", "postgresql://localhost/lifeflow")
    assert BaseConfig().sqlalchemy_engine_options() == {"connect_args": {}}


def test_package_exports_config_and_context():
    """One config class carries every setting; dev behaviour is LIFEFLOW_DEV_MODE."""
    assert lifeflow.__all__ == ["BaseConfig", "create_app_context"]
    assert not hasattr(BaseConfig(), "DEBUG")
