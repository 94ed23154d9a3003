"""Resource descriptors and URL resolution.

Every endpoint the client talks to is one row of ``RESOURCE_URL_TEMPLATES``.
A ``ResourceDescriptor`` names the row and carries the path parameters that
fill in its placeholders.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from urllib.parse import quote, urlencode

from .errors import ArgumentError


class ResourceKind(str, Enum):
    ACTIVITIES = "activities"
    ACTIVITY = "activity"
    VIDEOS = "videos"
    VIDEO = "video"
    LANGUAGES = "languages"
    LANGUAGE = "language"
    SUBTITLES = "subtitles"
    TASKS = "tasks"
    TASK = "task"
    MEMBERS = "members"
    SAFE_MEMBERS = "safe-members"
    MEMBER = "member"
    USERS = "users"


# Templates are relative to the account host. Note that the kind name does not
# always match the collection name (activities -> activity/).
RESOURCE_URL_TEMPLATES: dict[ResourceKind, str] = {
    ResourceKind.ACTIVITIES: "activity/",
    ResourceKind.ACTIVITY: "activity/{activity_id}/",
    ResourceKind.VIDEOS: "videos/",
    ResourceKind.VIDEO: "videos/{video_id}/",
    ResourceKind.LANGUAGES: "videos/{video_id}/languages/",
    ResourceKind.LANGUAGE: "videos/{video_id}/languages/{language}/",
    ResourceKind.SUBTITLES: "videos/{video_id}/languages/{language}/subtitles/",
    ResourceKind.TASKS: "teams/{team}/tasks/",
    ResourceKind.TASK: "teams/{team}/tasks/{task_id}/",
    ResourceKind.MEMBERS: "teams/{team}/members/",
    ResourceKind.SAFE_MEMBERS: "teams/{team}/safe-members/",
    ResourceKind.MEMBER: "teams/{team}/members/{username}/",
    ResourceKind.USERS: "users/{username}/",
}


@dataclass(frozen=True)
class ResourceDescriptor:
    """Identify one endpoint: its kind, path parameters and expected content type."""

    kind: ResourceKind | str
    path_params: Mapping[str, str] = field(default_factory=dict)
    content_type: str | None = "json"

    def __post_init__(self) -> None:
        if self.content_type is not None and not isinstance(self.content_type, str):
            raise ArgumentError(
                "content_type must be of the type str or None, "
                f"{type(self.content_type).__name__} given."
            )
        # Freeze a private copy so later edits to the caller's dict cannot leak in.
        object.__setattr__(self, "path_params", dict(self.path_params))

    @property
    def kind_name(self) -> str:
        if isinstance(self.kind, ResourceKind):
            return self.kind.value
        return str(self.kind)


def _query_value(value: Any) -> Any:
    if isinstance(value, bool):
        return int(value)
    return value


def build_query_string(query: Mapping[str, Any] | None) -> str:
    """URL-encode ``query``, dropping ``None`` values."""
    if not query:
        return ""
    pairs = [(key, _query_value(value)) for key, value in query.items() if value is not None]
    return urlencode(pairs)


def resolve_url(
    host: str, descriptor: ResourceDescriptor, query: Mapping[str, Any] | None = None
) -> str | None:
    """Build the request URL for ``descriptor``, or ``None`` when it cannot be built.

    Unknown kinds and templates missing a path parameter both resolve to
    ``None``. Path parameters are percent-encoded before substitution.

    Example:
        >>> resolve_url(
        ...     "https://amara.org/api2/partners/",
        ...     ResourceDescriptor("video", {"video_id": "abcdefABCDEF"}),
        ...     {"offset": 0},
        ... )
        'https://amara.org/api2/partners/videos/abcdefABCDEF/?offset=0'
    """
    try:
        kind = ResourceKind(descriptor.kind)
    except ValueError:
        return None

    encoded = {key: quote(str(value), safe="") for key, value in descriptor.path_params.items()}
    try:
        path = RESOURCE_URL_TEMPLATES[kind].format(**encoded)
    except KeyError:
        return None

    url = host.rstrip("/") + "/" + path
    query_string = build_query_string(query)
    if query_string:
        url = f"{url}?{query_string}"
    return url


__all__ = [
    "RESOURCE_URL_TEMPLATES",
    "ResourceDescriptor",
    "ResourceKind",
    "build_query_string",
    "resolve_url",
]
