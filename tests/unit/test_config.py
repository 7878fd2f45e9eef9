"""Unit tests for configuration management."""

import os
from unittest.mock import patch

import pydantic
import pytest

from core.config import _reset_config, get_config


@pytest.fixture(autouse=True)
def _clear_config_cache():
    _reset_config()
    yield
    _reset_config()


def test_get_config_with_dynamodb_endpoint():
    """Test that get_config reads DYNAMODB_ENDPOINT when set."""
    with patch.dict(os.environ, {"DYNAMODB_ENDPOINT": "http://localhost:8000"}):
        config = get_config()
        assert config.dynamodb_endpoint == "http://localhost:8000"


def test_get_config_defaults():
    """Test that get_config provides sensible defaults."""
    with patch.dict(os.environ, {}, clear=True):
        config = get_config()
        assert config.aws_region == "us-east-1"
        assert config.db_host == "localhost"
        assert config.db_port == 5432
        assert config.database_url is None
        assert config.single_trip_price == 10000
        assert config.round_trip_price == 18000
        assert config.trip_timezone == "Asia/Jakarta"
        assert config.admin_chat_id is None
        assert config.environment == "local"


def test_price_string_coercion():
    with patch.dict(os.environ, {"SINGLE_TRIP_PRICE": "12000", "ROUND_TRIP_PRICE": "20000"}, clear=True):
        config = get_config()
        assert config.single_trip_price == 12000
        assert config.round_trip_price == 20000


def test_admin_chat_id_parsed():
    with patch.dict(os.environ, {"ADMIN_CHAT_ID": "-100123"}, clear=True):
        assert get_config().admin_chat_id == -100123


def test_round_trip_cheaper_than_single_is_fatal():
    with patch.dict(os.environ, {"SINGLE_TRIP_PRICE": "10000", "ROUND_TRIP_PRICE": "9000"}, clear=True):
        with pytest.raises(pydantic.ValidationError, match="round_trip_price"):
            get_config()


def test_equal_prices_allowed():
    with patch.dict(os.environ, {"SINGLE_TRIP_PRICE": "10000", "ROUND_TRIP_PRICE": "10000"}, clear=True):
        assert get_config().round_trip_price == 10000


def test_unknown_timezone_rejected():
    with patch.dict(os.environ, {"TRIP_TIMEZONE": "Mars/Olympus_Mons"}, clear=True):
        with pytest.raises(pydantic.ValidationError):
            get_config()


def test_config_is_cached():
    with patch.dict(os.environ, {}, clear=True):
        assert get_config() is get_config()


def test_config_is_immutable():
    with patch.dict(os.environ, {}, clear=True):
        config = get_config()
        with pytest.raises(pydantic.ValidationError):
            config.aws_region = "eu-west-1"  # type: ignore[misc]


@pytest.mark.parametrize("name", ["SINGLE_TRIP_PRICE", "DB_PORT", "LOCK_TIMEOUT_MS", "ADMIN_CHAT_ID"])
def test_non_integer_values_fail_validation(name):
    with patch.dict(os.environ, {name: "sepuluh"}, clear=True):
        with pytest.raises(pydantic.ValidationError, match=name.lower()):
            get_config()
