"""Immutable client settings.

Settings are a value, not client state: a traversal takes one snapshot at
its start, and changing settings means building a new instance with
``replace()``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import ConfigurationError

if TYPE_CHECKING:
    from .validation import ValidationErrorKind

DEFAULT_RETRIES = 10
DEFAULT_PAGE_LIMIT = 10
DEFAULT_TOTAL_LIMIT = 2000
# Populous resources (videos with many languages) can take close to a minute.
DEFAULT_TIMEOUT_SECONDS = 60.0

_SETTINGS_KEYS = {
    "AMARA_RETRIES": "retries",
    "AMARA_LIMIT": "limit",
    "AMARA_TOTAL_LIMIT": "total_limit",
    "AMARA_TIMEOUT": "timeout",
    "AMARA_RETRY_BACKOFF": "retry_backoff",
    "AMARA_VERIFY_TLS": "verify_tls",
    "AMARA_VERBOSE": "verbose",
}


def configuration_error(
    exc: ValidationError, kind: ValidationErrorKind | None = None
) -> ConfigurationError:
    """Flatten a pydantic ``ValidationError`` into one ``ConfigurationError``.

    Input values are left out of the context so API keys never reach logs.
    """
    errors = exc.errors(include_url=False, include_input=False, include_context=False)
    problems = "; ".join(
        f"{'.'.join(str(part) for part in error['loc']) or 'value'}: {error['msg']}"
        for error in errors
    )
    return ConfigurationError(
        f"Invalid {exc.title}: {problems}", kind=kind, context={"errors": errors}
    )


class ClientSettings(BaseModel):
    """Per-client tuning knobs for retries and pagination.

    Raises:
        ConfigurationError: If any value is out of range or of the wrong type.
    """

    model_config = ConfigDict(frozen=True)

    retries: int = Field(
        default=DEFAULT_RETRIES,
        ge=0,
        description="Retries after the first failed attempt to obtain a response",
    )
    limit: int = Field(
        default=DEFAULT_PAGE_LIMIT,
        ge=1,
        description="Records requested per page; large pages can time out upstream",
    )
    total_limit: int = Field(
        default=DEFAULT_TOTAL_LIMIT,
        ge=1,
        description="Maximum records a single list traversal may fetch",
    )
    timeout: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0)
    retry_backoff: float = Field(
        default=0.0, ge=0, description="Seconds to wait between transport attempts"
    )
    verify_tls: bool = Field(
        default=True,
        description="Verify server certificates; disable only for self-signed test hosts",
    )
    verbose: bool = Field(default=False, description="Trace every request and response")

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except ValidationError as exc:
            raise configuration_error(exc) from exc

    def replace(self, **changes: Any) -> ClientSettings:
        """Return a validated copy with ``changes`` applied."""
        return ClientSettings(**{**self.model_dump(), **changes})


def load_settings(normalized: dict[str, Any]) -> ClientSettings:
    """Build settings from the optional ``AMARA_*`` keys of a secrets mapping."""
    values = {
        field: normalized[key]
        for key, field in _SETTINGS_KEYS.items()
        if normalized.get(key) is not None
    }
    return ClientSettings(**values)
