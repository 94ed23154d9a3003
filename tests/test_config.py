"""Tests for immutable client settings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from amara_api.config import ClientSettings, load_settings
from amara_api.errors import ConfigurationError


def test_defaults() -> None:
    settings = ClientSettings()

    assert settings.retries == 10
    assert settings.limit == 10
    assert settings.total_limit == 2000
    assert settings.timeout == 60.0
    assert settings.verify_tls is True
    assert settings.verbose is False


def test_replace_returns_new_validated_instance() -> None:
    settings = ClientSettings()

    changed = settings.replace(limit=25, retries=0)

    assert changed.limit == 25
    assert changed.retries == 0
    assert settings.limit == 10
    with pytest.raises(ConfigurationError, match="limit"):
        settings.replace(limit=0)


def test_settings_are_frozen() -> None:
    with pytest.raises(ValidationError):
        ClientSettings().limit = 5  # type: ignore[misc]


def test_load_settings_reads_optional_keys() -> None:
    settings = load_settings(
        {
            "AMARA_HOST": "https://amara.org/api2/partners/",
            "AMARA_RETRIES": 3,
            "AMARA_TOTAL_LIMIT": "500",
            "AMARA_VERIFY_TLS": False,
            "AMARA_VERBOSE": None,
        }
    )

    assert settings.retries == 3
    assert settings.total_limit == 500
    assert settings.verify_tls is False
    assert settings.verbose is False
    assert settings.limit == 10


@pytest.mark.parametrize(
    ("normalized", "field"),
    [
        ({"AMARA_RETRIES": -1}, "retries"),
        ({"AMARA_LIMIT": "ten"}, "limit"),
        ({"AMARA_TIMEOUT": 0}, "timeout"),
    ],
)
def test_load_settings_rejects_unusable_values(normalized: dict[str, object], field: str) -> None:
    """Given an out-of-range or mistyped settings key, when `load_settings()`
    runs, then a `ConfigurationError` names the offending field."""
    with pytest.raises(ConfigurationError, match=field) as excinfo:
        load_settings(normalized)

    assert excinfo.value.context["errors"][0]["loc"] == (field,)
