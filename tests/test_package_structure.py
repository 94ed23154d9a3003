"""Sanity tests for the amara_api package surface."""

from __future__ import annotations

import tomllib
from pathlib import Path

import pytest

import amara_api
from amara_api import AmaraClient, ClientSettings, Credentials

REPO_ROOT = Path(__file__).resolve().parents[1]


def test_public_names_are_exported() -> None:
    for name in amara_api.__all__:
        assert hasattr(amara_api, name), name


def test_client_from_default_location_requires_secrets(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Given no secrets file anywhere, when `AmaraClient.from_file()` runs,
    then a `FileNotFoundError` surfaces."""
    monkeypatch.delenv("AMARA_CONFIG_PATH", raising=False)
    monkeypatch.setattr("amara_api.auth._repo_root", lambda: tmp_path / "repo")
    monkeypatch.chdir(tmp_path)

    with pytest.raises(FileNotFoundError, match="Secrets file not found for default"):
        AmaraClient.from_file()


def test_client_context_manager_closes_owned_http_client() -> None:
    credentials = Credentials(
        host="https://amara.org/api2/partners/",
        user="me",
        apikey="0123456789abcdef0123456789abcdef01234567",
    )

    with AmaraClient(credentials, ClientSettings(verify_tls=False)) as client:
        http_client = client._http_client
        assert not http_client.is_closed

    assert http_client.is_closed


def test_pyproject_readme_is_shipped() -> None:
    """Given the project metadata, when its readme is looked up, then the file
    exists next to pyproject.toml."""
    with (REPO_ROOT / "pyproject.toml").open("rb") as handle:
        project = tomllib.load(handle)["project"]

    assert (REPO_ROOT / project["readme"]).is_file()
