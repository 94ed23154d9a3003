"""Tests for the result-returning validators."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from amara_api.errors import ConfigurationError
from amara_api.validation import (
    ValidationErrorKind,
    validate_account_change,
    validate_api_key,
    validate_language_code,
    validate_role,
    validate_task_type,
    validate_video_id,
)

GOOD_KEY = "0123456789abcdef0123456789abcdef01234567"
OTHER_KEY = "fedcba9876543210fedcba9876543210fedcba98"


@pytest.mark.parametrize(
    "key",
    [GOOD_KEY, "a" * 40, "0" * 40, "deadbeef" * 5],
)
def test_api_key_accepts_lowercase_hex(key: str) -> None:
    assert validate_api_key(key).ok


@pytest.mark.parametrize(
    ("key", "kind"),
    [
        ("a" * 39, ValidationErrorKind.API_KEY_LENGTH),
        ("a" * 41, ValidationErrorKind.API_KEY_LENGTH),
        ("", ValidationErrorKind.API_KEY_LENGTH),
        (None, ValidationErrorKind.API_KEY_LENGTH),
        ("A" * 40, ValidationErrorKind.API_KEY_CHARSET),
        ("g" * 40, ValidationErrorKind.API_KEY_CHARSET),
        ("a" * 39 + "\n", ValidationErrorKind.API_KEY_CHARSET),
    ],
)
def test_api_key_rejections_report_kind(key: object, kind: ValidationErrorKind) -> None:
    result = validate_api_key(key)

    assert not result.ok
    assert result.kind is kind
    assert result.message


def test_raise_for_error_converts_to_configuration_error() -> None:
    """Given a failed result, when `raise_for_error()` runs, then a
    `ConfigurationError` carrying the kind is raised."""
    with pytest.raises(ConfigurationError) as excinfo:
        validate_api_key("short").raise_for_error()

    assert excinfo.value.kind is ValidationErrorKind.API_KEY_LENGTH
    validate_api_key(GOOD_KEY).raise_for_error()


def test_account_change_without_current_account_only_checks_key() -> None:
    assert validate_account_change(None, "https://a/", "u", GOOD_KEY).ok
    assert not validate_account_change(None, "https://a/", "u", "bad").ok


def test_account_change_rejects_same_key_on_new_host() -> None:
    current = SimpleNamespace(host="https://a/", user="u", apikey=GOOD_KEY)

    result = validate_account_change(current, "https://b/", "u", GOOD_KEY)

    assert result.kind is ValidationErrorKind.ACCOUNT_HOST_CHANGE


def test_account_change_rejects_new_key_for_same_user() -> None:
    current = SimpleNamespace(host="https://a/", user="u", apikey=GOOD_KEY)

    result = validate_account_change(current, "https://a/", "u", OTHER_KEY)

    assert result.kind is ValidationErrorKind.ACCOUNT_USER_CHANGE


def test_account_change_accepts_whole_new_account() -> None:
    current = SimpleNamespace(host="https://a/", user="u", apikey=GOOD_KEY)

    assert validate_account_change(current, "https://b/", "v", OTHER_KEY).ok
    assert validate_account_change(current, "https://a/", "v", OTHER_KEY).ok
    assert validate_account_change(current, "https://a/", "u", GOOD_KEY).ok


@pytest.mark.parametrize("video_id", ["abcdefABCDEF", "0123456789ab", "Zz9Zz9Zz9Zz9"])
def test_video_id_accepts_twelve_alphanumerics(video_id: str) -> None:
    assert validate_video_id(video_id)


@pytest.mark.parametrize(
    "video_id",
    ["abcdefABCDE", "abcdefABCDEFG", "abcdef-BCDEF", "abcdef BCDEF", "", None, 123456789012],
)
def test_video_id_rejects_other_shapes(video_id: object) -> None:
    result = validate_video_id(video_id)

    assert not result
    assert result.kind is ValidationErrorKind.VIDEO_ID


def test_role_task_type_and_language_code() -> None:
    assert validate_role("manager").ok
    assert validate_role("Manager").kind is ValidationErrorKind.ROLE
    assert validate_task_type("Review").ok
    assert validate_task_type("review").kind is ValidationErrorKind.TASK_TYPE
    assert validate_language_code("pt-br").ok
    assert validate_language_code("xx-yy").kind is ValidationErrorKind.LANGUAGE_CODE
