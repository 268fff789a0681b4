from datetime import timedelta

import pytest

from api.config import DevelopmentConfig, ProductionConfig, TestingConfig, get_config, parse_duration, validate_config


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("15m", timedelta(minutes=15)),
        ("720h", timedelta(hours=720)),
        ("90s", timedelta(seconds=90)),
        ("7d", timedelta(days=7)),
        ("900", timedelta(seconds=900)),
    ],
)
def test_parse_duration(raw, expected):
    assert parse_duration(raw) == expected


@pytest.mark.parametrize("raw", ["", "15 minutes", "-5m", "1.5h", "m"])
def test_parse_duration_rejects(raw):
    with pytest.raises(ValueError):
        parse_duration(raw)


def test_get_config_by_name():
    assert get_config("prod") is ProductionConfig
    assert get_config("TEST") is TestingConfig
    assert get_config("dev") is DevelopmentConfig


def _valid():
    return {
        "JWT_SECRET": "secret",
        "ACCESS_TOKEN_TTL": timedelta(minutes=15),
        "REFRESH_TOKEN_TTL": timedelta(days=30),
        "STORE_TIMEOUT_SECONDS": 5,
    }


def test_validate_config_accepts_sane_values():
    validate_config(_valid())


@pytest.mark.parametrize(
    "key, value",
    [
        ("JWT_SECRET", ""),
        ("ACCESS_TOKEN_TTL", timedelta(0)),
        ("REFRESH_TOKEN_TTL", "30d"),
        ("STORE_TIMEOUT_SECONDS", 0),
    ],
)
def test_validate_config_rejects(key, value):
    config = _valid()
    config[key] = value
    with pytest.raises(RuntimeError):
        validate_config(config)
