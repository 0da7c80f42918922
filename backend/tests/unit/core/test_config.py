from __future__ import annotations

from datetime import timedelta

import pytest
from lms_auth.core.config import (
    DevelopmentConfig,
    ProductionConfig,
    TestingConfig,
    env_bool,
    env_int,
    get_config,
)
from lms_auth.services.auth.dto import AuthTokenConfig


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("1", True), ("true", True), ("YES", True), (" on ", True), ("0", False), ("nope", False)],
)
def test_env_bool(monkeypatch, raw, expected):
    monkeypatch.setenv("LMS_FLAG", raw)
    assert env_bool("LMS_FLAG") is expected


def test_env_bool_default(monkeypatch):
    monkeypatch.delenv("LMS_FLAG", raising=False)
    assert env_bool("LMS_FLAG", True) is True


@pytest.mark.parametrize(("raw", "expected"), [("15", 15), ("", 7), ("abc", 7), ("-3", 7), ("0", 7)])
def test_env_int_falls_back_on_bad_values(monkeypatch, raw, expected):
    monkeypatch.setenv("LMS_NUM", raw)
    assert env_int("LMS_NUM", 7) == expected


@pytest.mark.parametrize(
    ("name", "cls"),
    [
        ("testing", TestingConfig),
        ("PRODUCTION", ProductionConfig),
        ("development", DevelopmentConfig),
        ("unknown", DevelopmentConfig),
    ],
)
def test_get_config_from_app_env(monkeypatch, name, cls):
    monkeypatch.setenv("APP_ENV", name)
    assert get_config() is cls


def test_jwt_settings_agree_with_issuer_and_audience():
    assert TestingConfig.JWT_ENCODE_ISSUER == TestingConfig.JWT_DECODE_ISSUER
    assert TestingConfig.JWT_ENCODE_AUDIENCE == TestingConfig.JWT_DECODE_AUDIENCE
    assert TestingConfig.JWT_ACCESS_TOKEN_EXPIRES == timedelta(
        minutes=TestingConfig.JWT_ACCESS_TOKEN_MINUTES
    )


def test_token_config_from_mapping():
    cfg = AuthTokenConfig.from_mapping(
        {
            "JWT_ISSUER": "issuer-x",
            "JWT_AUDIENCE": "aud-y",
            "JWT_ACCESS_TOKEN_MINUTES": 5,
            "JWT_REFRESH_TOKEN_DAYS": 2,
        }
    )
    assert cfg.issuer == "issuer-x"
    assert cfg.audience == "aud-y"
    assert cfg.access_expires == timedelta(minutes=5)
    assert cfg.refresh_expires == timedelta(days=2)


def test_token_config_defaults():
    assert AuthTokenConfig.from_mapping({}) == AuthTokenConfig()


def test_token_config_follows_verification_keys():
    cfg = AuthTokenConfig.from_mapping(
        {
            "JWT_ISSUER": "lms-auth",
            "JWT_AUDIENCE": "lms-clients",
            "JWT_DECODE_ISSUER": "lms-auth-v2",
            "JWT_DECODE_AUDIENCE": "lms-mobile",
        }
    )
    assert cfg.issuer == "lms-auth-v2"
    assert cfg.audience == "lms-mobile"
