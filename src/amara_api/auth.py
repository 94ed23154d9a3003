"""Credentials and authentication headers for the Amara API."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from omegaconf import OmegaConf
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .config import configuration_error
from .errors import ArgumentError, ConfigurationError
from .validation import validate_api_key

CONFIG_PATH_ENV = "AMARA_CONFIG_PATH"
DEFAULT_SECRETS_PATH = "conf/secrets.yml"
REQUIRED_SECRETS = ("AMARA_HOST", "AMARA_USER", "AMARA_APIKEY")

USERNAME_HEADER = "X-api-username"
APIKEY_HEADER = "X-apikey"
JSON_CONTENT_TYPE = "json"


def _repo_root() -> Path:
    return Path(__file__).resolve().parents[2]


def _candidate_paths(raw: Path) -> tuple[Path, ...]:
    if raw.is_absolute():
        return (raw,)
    return (Path.cwd() / raw, _repo_root() / raw)


def _existing_unique_paths(candidates: tuple[Path, ...]) -> tuple[Path, ...]:
    existing: list[Path] = []
    seen: set[Path] = set()
    for candidate in candidates:
        if not candidate.exists():
            continue
        resolved = candidate.resolve()
        if resolved in seen:
            continue
        seen.add(resolved)
        existing.append(resolved)
    return tuple(existing)


def resolve_secrets_location(location: Path | str | None = None) -> Path:
    """Locate the secrets file: env override, then ``location``, then ``conf/secrets.yml``."""
    env_path = os.environ.get(CONFIG_PATH_ENV)
    if env_path:
        source, raw = CONFIG_PATH_ENV, Path(env_path)
    elif location is not None:
        source, raw = "path", Path(location)
    else:
        source, raw = "default", Path(DEFAULT_SECRETS_PATH)

    raw = raw.expanduser()
    candidates = _candidate_paths(raw)
    existing = _existing_unique_paths(candidates)
    if len(existing) == 1:
        return existing[0]
    if not existing:
        checked = "\n".join(str(candidate) for candidate in candidates)
        raise FileNotFoundError(f"Secrets file not found for {source}: {raw}\nChecked:\n{checked}")
    joined = ", ".join(str(path) for path in existing)
    raise RuntimeError(f"Multiple secrets files found for {source}: {raw}. Candidates: {joined}")


def load_secrets(location: Path) -> dict[str, Any]:
    """Load a YAML mapping with OmegaConf and upper-case its keys."""
    raw_config = OmegaConf.load(location)
    config = OmegaConf.to_container(raw_config, resolve=True)
    if not isinstance(config, dict):
        raise ConfigurationError(
            "Secrets file must contain a mapping of credential keys.",
            context={"path": str(location)},
        )
    return {str(key).upper(): value for key, value in config.items()}


class Credentials(BaseModel):
    """Validated Amara API account.

    The three fields form one identity; replace the whole object to change
    accounts.

    Raises:
        ConfigurationError: If a field is missing or the API key is malformed;
            ``kind`` tells the API key failures apart.
    """

    model_config = ConfigDict(frozen=True)

    host: str = Field(
        description="API root, including the trailing path",
        examples=["https://amara.org/api2/partners/"],
    )
    user: str = Field(description="Amara username", examples=["example-user"])
    apikey: str = Field(
        description="40 character lowercase hexadecimal API key",
        examples=["0123456789abcdef0123456789abcdef01234567"],
    )

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except ValidationError as exc:
            kind = None
            if any(error["loc"] == ("apikey",) for error in exc.errors()):
                kind = validate_api_key(data.get("apikey")).kind
            raise configuration_error(exc, kind) from exc

    @field_validator("apikey")
    @classmethod
    def _check_apikey(cls, value: str) -> str:
        result = validate_api_key(value)
        if not result.ok:
            raise ValueError(result.message)
        return value

    def __repr__(self) -> str:
        return f"Credentials(host={self.host!r}, user={self.user!r}, apikey='{self.apikey[:4]}...')"

    @classmethod
    def from_mapping(cls, normalized: dict[str, Any]) -> Credentials:
        missing = [key for key in REQUIRED_SECRETS if not normalized.get(key)]
        if missing:
            raise ConfigurationError(f"Missing Amara secrets: {', '.join(missing)}")
        return cls(
            host=str(normalized["AMARA_HOST"]),
            user=str(normalized["AMARA_USER"]),
            apikey=str(normalized["AMARA_APIKEY"]),
        )

    @classmethod
    def from_file(cls, path: Path | str | None = None) -> Credentials:
        """Create credentials from a YAML secrets file located under ``conf/`` by default."""
        return cls.from_mapping(load_secrets(resolve_secrets_location(path)))


def build_headers(credentials: Credentials, content_type: str | None = None) -> dict[str, str]:
    """Return the authentication headers, plus JSON negotiation when asked for."""
    if content_type is not None and not isinstance(content_type, str):
        raise ArgumentError(
            f"content_type must be of the type str or None, {type(content_type).__name__} given."
        )
    headers = {
        USERNAME_HEADER: credentials.user,
        APIKEY_HEADER: credentials.apikey,
    }
    if content_type == JSON_CONTENT_TYPE:
        headers["Content-Type"] = "application/json"
        headers["Accept"] = "application/json"
    return headers
