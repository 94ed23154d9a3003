"""Pagination engine.

Turns one logical "fetch resource X" request into the sequence of HTTP calls
needed to collect every page of an offset/limit paginated list, and passes
anything that is not a paginated list straight back to the caller.

Paginated responses look like::

    {"meta": {"next": ..., "total_count": 42, ...}, "objects": [...]}

Only GET responses with an ``objects`` key are paginated. Non-JSON bodies
(raw subtitle tracks, empty DELETE responses) are returned as bytes, and any
other JSON document is returned parsed.
"""

from __future__ import annotations

import json
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Any

from loguru import logger

from .auth import JSON_CONTENT_TYPE, Credentials, build_headers
from .config import ClientSettings
from .errors import ArgumentError, ProtocolViolationError, UnresolvableResourceError
from .resources import ResourceDescriptor, build_query_string, resolve_url
from .transport import Transport


@dataclass(frozen=True)
class Page:
    """One response of a paginated list."""

    objects: list[Any]
    next: Any
    total_count: int | None
    offset: int


@dataclass(frozen=True)
class Passthrough:
    """A response that is not a paginated list, returned verbatim."""

    payload: Any


def encode_body(body: Any, content_type: str | None) -> str | bytes | None:
    if body is None or isinstance(body, (str, bytes)):
        return body
    if content_type == JSON_CONTENT_TYPE:
        return json.dumps(body)
    if isinstance(body, Mapping):
        return build_query_string(body)
    raise ArgumentError(f"Cannot encode request body of type {type(body).__name__}")


class PaginationEngine:
    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    def traverse(
        self,
        method: str,
        descriptor: ResourceDescriptor,
        query: Mapping[str, Any] | None = None,
        body: Any = None,
        *,
        credentials: Credentials,
        settings: ClientSettings,
    ) -> Iterator[Page | Passthrough]:
        """Yield each page of the resource, or a single ``Passthrough``.

        The offset always advances by the effective page size: the query's
        ``limit``, or ``settings.limit`` (injected into GET queries that lack
        one). Traversal stops when ``meta.next`` is null, when a page is
        empty, or when the next offset reaches ``meta.total_count``.

        Raises:
            UnresolvableResourceError: Before any request, if no URL can be built.
            TransportError: If the transport exhausted its retries.
            ProtocolViolationError: If ``objects`` is present but not a list, or
                ``meta`` is present but not an object.
        """
        method = method.upper()
        headers = build_headers(credentials, descriptor.content_type)
        query = dict(query or {})
        if query.get("offset") is None:
            query["offset"] = 0
        if method == "GET" and query.get("limit") is None:
            query["limit"] = settings.limit
        page_size = int(query.get("limit") or settings.limit)
        payload = encode_body(body, descriptor.content_type)

        while True:
            url = resolve_url(credentials.host, descriptor, query)
            if url is None:
                raise UnresolvableResourceError(
                    f"Cannot build request for resource {descriptor.kind_name!r}",
                    context={"path_params": dict(descriptor.path_params)},
                )

            raw = self._transport.send(method, headers, url, payload, settings=settings)

            try:
                chunk = json.loads(raw)
            except ValueError:
                logger.debug(f"{method} {url}: non-JSON response passed through")
                yield Passthrough(raw)
                return

            if method != "GET" or not isinstance(chunk, dict) or "objects" not in chunk:
                yield Passthrough(chunk)
                return

            objects = chunk["objects"]
            if not isinstance(objects, list):
                raise ProtocolViolationError(
                    "Traversable resource's 'objects' property is not a list",
                    context={"url": url, "objects_type": type(objects).__name__},
                )

            meta = chunk.get("meta")
            if meta is None:
                meta = {}
            elif not isinstance(meta, Mapping):
                raise ProtocolViolationError(
                    "Traversable resource's 'meta' property is not an object",
                    context={"url": url, "meta_type": type(meta).__name__},
                )
            offset = int(query["offset"])
            page = Page(
                objects=objects,
                next=meta.get("next"),
                total_count=meta.get("total_count"),
                offset=offset,
            )
            logger.debug(
                f"{url}: {len(objects)} records at offset {offset} "
                f"(total {page.total_count}, next {page.next!r})"
            )
            yield page

            if page.next is None or not objects:
                return
            query["offset"] = offset + page_size
            if isinstance(page.total_count, int) and query["offset"] >= page.total_count:
                return

    def fetch(
        self,
        method: str,
        descriptor: ResourceDescriptor,
        query: Mapping[str, Any] | None = None,
        body: Any = None,
        *,
        credentials: Credentials,
        settings: ClientSettings,
    ) -> Any:
        """Return every record of a paginated list, or the verbatim payload."""
        records: list[Any] = []
        for item in self.traverse(
            method, descriptor, query, body, credentials=credentials, settings=settings
        ):
            if isinstance(item, Passthrough):
                return item.payload
            records.extend(item.objects)
        return records
