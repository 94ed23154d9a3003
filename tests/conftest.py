"""Pytest configuration: make ``src/`` importable and provide HTTP fakes."""

from __future__ import annotations

import json
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import pytest

# Ensure src directory is in path for imports
repo_root = Path(__file__).parent.parent
src_path = repo_root / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from amara_api.auth import Credentials  # noqa: E402
from amara_api.client import AmaraClient  # noqa: E402
from amara_api.config import ClientSettings  # noqa: E402

HOST = "https://amara.example.org/api2/partners/"
APIKEY = "0123456789abcdef0123456789abcdef01234567"

Handler = Callable[[httpx.Request], httpx.Response]


class RecordingTransport(httpx.MockTransport):
    """``httpx.MockTransport`` that remembers every request it served."""

    def __init__(self, handler: Handler) -> None:
        self.requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)


def json_response(payload: Any, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, content=json.dumps(payload).encode())


def page_payload(objects: list[Any], next_: Any, total_count: int) -> dict[str, Any]:
    return {
        "meta": {"next": next_, "total_count": total_count},
        "objects": objects,
    }


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(host=HOST, user="tester", apikey=APIKEY)


@pytest.fixture
def make_client(
    credentials: Credentials,
) -> Callable[..., tuple[AmaraClient, RecordingTransport]]:
    """Build a client whose HTTP traffic is answered by ``handler``."""

    def _make(handler: Handler, **settings: Any) -> tuple[AmaraClient, RecordingTransport]:
        transport = RecordingTransport(handler)
        http_client = httpx.Client(transport=transport)
        client = AmaraClient(credentials, ClientSettings(**settings), http_client=http_client)
        return client, transport

    return _make
