"""
Amara API Client

High-level client for the Amara subtitling platform's partner API. Each public
method builds a ``ResourceDescriptor`` plus query/body payload and hands it to
the ``PaginationEngine``, which issues the HTTP calls and merges paginated
lists.

List methods return a ``list`` of records, single-resource methods return the
parsed JSON object, and raw payloads (subtitle tracks in a text format) come
back as ``bytes``. Methods taking a video id return ``None`` without any
request when the id is malformed, and so do writes naming an unknown
language code.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

import httpx
from loguru import logger

from .auth import Credentials, load_secrets, resolve_secrets_location
from .config import ClientSettings, load_settings
from .engine import PaginationEngine, Passthrough
from .errors import ArgumentError, RecordLimitExceededError
from .events import EventLogger, NullEventLogger, is_event_logger
from .resources import ResourceDescriptor, ResourceKind
from .transport import Transport, build_http_client
from .validation import (
    VERSIONED_TASK_TYPES,
    validate_account_change,
    validate_language_code,
    validate_role,
    validate_task_type,
    validate_video_id,
)


def _compact(values: Mapping[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in values.items() if value is not None}


def _is_language_record(value: Any) -> bool:
    return isinstance(value, Mapping) and "language_code" in value


class AmaraClient:
    """Authenticated, synchronous client for the Amara API.

    Settings are immutable: every call snapshots the current ``ClientSettings``
    and ``Credentials`` before its first request, and ``with_settings()``
    returns a new client instead of mutating this one.

    Example:
        >>> client = AmaraClient(
        ...     Credentials(host="https://amara.org/api2/partners/", user="me", apikey=key)
        ... )
        >>> videos = client.get_videos(team="my-team", limit=20)
    """

    def __init__(
        self,
        credentials: Credentials,
        settings: ClientSettings | None = None,
        *,
        event_logger: EventLogger | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._credentials = credentials
        self._settings = settings or ClientSettings()
        self._events: EventLogger = NullEventLogger()
        if event_logger is not None:
            self.set_logger(event_logger)
        self._owns_http_client = http_client is None
        self._http_client = http_client or build_http_client(self._settings)
        self._transport = Transport(self._http_client)
        self._engine = PaginationEngine(self._transport)
        logger.info(f"Amara API client initialized for {credentials.user} at {credentials.host}")

    @classmethod
    def from_file(cls, path: Path | str | None = None, **kwargs: Any) -> AmaraClient:
        """Create a client from a YAML secrets file (see ``Credentials.from_file``).

        Optional ``AMARA_*`` settings keys in the same file populate
        ``ClientSettings``.
        """
        normalized = load_secrets(resolve_secrets_location(path))
        return cls(Credentials.from_mapping(normalized), load_settings(normalized), **kwargs)

    @property
    def credentials(self) -> Credentials:
        return self._credentials

    @property
    def settings(self) -> ClientSettings:
        return self._settings

    def set_account(self, host: str, user: str, apikey: str) -> None:
        """Switch to another account, validating the triple as a whole.

        Raises:
            ConfigurationError: If the key is malformed or the change is inconsistent.
        """
        validate_account_change(self._credentials, host, user, apikey).raise_for_error()
        self._credentials = Credentials(host=host, user=user, apikey=apikey)
        logger.info(f"Amara API account switched to {user} at {host}")

    def set_logger(self, event_logger: Any) -> None:
        """Replace the event logger; the previous one stays if ``event_logger`` is unusable."""
        if not is_event_logger(event_logger):
            raise ArgumentError(
                f"{type(event_logger).__name__} does not implement the EventLogger methods"
            )
        self._events = event_logger

    def with_settings(self, **changes: Any) -> AmaraClient:
        """Return a client for the same account with ``changes`` applied to the settings."""
        return AmaraClient(
            self._credentials,
            self._settings.replace(**changes),
            event_logger=self._events,
            http_client=None if self._owns_http_client else self._http_client,
        )

    # Engine plumbing

    def _fetch(
        self,
        method: str,
        descriptor: ResourceDescriptor,
        query: Mapping[str, Any] | None = None,
        body: Any = None,
    ) -> Any:
        return self._engine.fetch(
            method,
            descriptor,
            query,
            body,
            credentials=self._credentials,
            settings=self._settings,
        )

    def _get_list(
        self,
        descriptor: ResourceDescriptor,
        query: Mapping[str, Any] | None = None,
        *,
        single_page: bool = False,
    ) -> Any:
        """GET a paginated list, refusing traversals larger than ``total_limit``.

        With ``single_page`` only the window starting at the query's ``offset``
        is fetched, and ``total_limit`` does not apply.
        """
        settings = self._settings
        records: list[Any] = []
        start: int | None = None
        for item in self._engine.traverse(
            "GET", descriptor, query, credentials=self._credentials, settings=settings
        ):
            if isinstance(item, Passthrough):
                return item.payload
            if single_page:
                records.extend(item.objects)
                break
            if start is None:
                start = item.offset
                if isinstance(item.total_count, int):
                    self._check_total_limit(descriptor, item.total_count - start, settings)
            records.extend(item.objects)
            self._check_total_limit(descriptor, len(records), settings)

        self._events.info(
            f"Fetched {len(records)} {descriptor.kind_name} records",
            {"resource": descriptor.kind_name, "count": len(records)},
        )
        return records

    def _check_total_limit(
        self, descriptor: ResourceDescriptor, count: int, settings: ClientSettings
    ) -> None:
        if count <= settings.total_limit:
            return
        message = (
            f"Listing {descriptor.kind_name} would fetch {count} records, above the "
            f"total_limit of {settings.total_limit}; raise total_limit or fetch one "
            "window at a time with single_page=True"
        )
        self._events.error(message, {"resource": descriptor.kind_name, "count": count})
        raise RecordLimitExceededError(message, total_count=count, total_limit=settings.total_limit)

    def _valid_video_id(self, video_id: Any, operation: str) -> bool:
        result = validate_video_id(video_id)
        if not result.ok:
            self._events.notice(result.message, {"operation": operation})
        return result.ok

    def _valid_language_code(self, language_code: Any, operation: str) -> bool:
        result = validate_language_code(language_code)
        if not result.ok:
            self._events.notice(result.message, {"operation": operation})
        return result.ok

    # Video languages

    def get_video_languages(self, video_id: str) -> Any:
        if not self._valid_video_id(video_id, "get_video_languages"):
            return None
        return self._get_list(
            ResourceDescriptor(ResourceKind.LANGUAGES, {"video_id": video_id})
        )

    def get_video_language(self, video_id: str, language_code: str) -> Any:
        """Get information about the subtitle track of one language."""
        if not self._valid_video_id(video_id, "get_video_language"):
            return None
        return self._fetch(
            "GET",
            ResourceDescriptor(
                ResourceKind.LANGUAGE, {"video_id": video_id, "language": language_code}
            ),
        )

    def create_video_language(self, video_id: str, language_code: str) -> Any:
        if not self._valid_video_id(video_id, "create_video_language"):
            return None
        if not self._valid_language_code(language_code, "create_video_language"):
            return None
        return self._fetch(
            "POST",
            ResourceDescriptor(ResourceKind.LANGUAGES, {"video_id": video_id}),
            body={"language_code": language_code},
        )

    @staticmethod
    def get_last_version(language_info: Any) -> int | None:
        """Return the newest ``version_no`` of a language record.

        ``versions`` is newest first. Version numbers start at 1 and may have
        gaps after deletions, so they are never used as list indexes.
        """
        if not isinstance(language_info, Mapping):
            raise ArgumentError(
                "language_info must be of the type mapping, "
                f"{type(language_info).__name__} given."
            )
        versions = language_info.get("versions")
        if not versions or not isinstance(versions[0], Mapping):
            return None
        return versions[0].get("version_no")

    def _last_version(
        self, video_id: str, language_code: str, language_info: Any = None
    ) -> int | None:
        if language_info is None:
            language_info = self.get_video_language(video_id, language_code)
            if not isinstance(language_info, Mapping):
                return None
        return self.get_last_version(language_info)

    # Videos

    def get_videos(
        self,
        team: str | None = None,
        project: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
        single_page: bool = False,
    ) -> Any:
        """List every video of a team/project.

        Large teams take many requests; the traversal is capped by
        ``settings.total_limit``. With ``single_page=True`` only the ``limit``
        records starting at ``offset`` are fetched, so a caller can walk a large
        team one window at a time.
        """
        return self._get_list(
            ResourceDescriptor(ResourceKind.VIDEOS),
            {"team": team, "project": project, "limit": limit, "offset": offset},
            single_page=single_page,
        )

    def get_video_info(self, video_id: str | None = None, video_url: str | None = None) -> Any:
        """Retrieve video metadata by id, or the videos registered for a URL."""
        if video_id is not None:
            if not self._valid_video_id(video_id, "get_video_info"):
                return None
            return self._fetch(
                "GET", ResourceDescriptor(ResourceKind.VIDEO, {"video_id": video_id})
            )
        if video_url is not None:
            return self._get_list(ResourceDescriptor(ResourceKind.VIDEOS), {"video_url": video_url})
        raise ArgumentError("get_video_info requires a video_id or a video_url")

    def move_video(
        self, video_id: str, team: str | None = None, project: str | None = None
    ) -> Any:
        """Move a video into a different team and/or project."""
        if not self._valid_video_id(video_id, "move_video"):
            return None
        return self._fetch(
            "PUT",
            ResourceDescriptor(ResourceKind.VIDEO, {"video_id": video_id}),
            body=_compact({"team": team, "project": project}),
        )

    # Activity

    def get_activities(
        self,
        team: str | None = None,
        video_id: str | None = None,
        activity_type: int | str | None = None,
        language: str | None = None,
        before: int | None = None,
        after: int | None = None,
        limit: int | None = None,
        offset: int | None = None,
        single_page: bool = False,
    ) -> Any:
        """List activity records.

        Without ``team`` or ``video_id`` this queries the public activity of
        the whole site, which is a heavy request.
        """
        return self._get_list(
            ResourceDescriptor(ResourceKind.ACTIVITIES),
            {
                "team": team,
                "video": video_id,
                "type": activity_type,
                "language": language,
                "before": before,
                "after": after,
                "limit": limit,
                "offset": offset,
            },
            single_page=single_page,
        )

    def get_activity(self, activity_id: str) -> Any:
        return self._fetch(
            "GET", ResourceDescriptor(ResourceKind.ACTIVITY, {"activity_id": activity_id})
        )

    # Tasks

    def get_tasks(
        self,
        team: str,
        video_id: str | None = None,
        task_type: str | None = None,
        assignee: str | None = None,
        priority: int | None = None,
        order_by: str | None = None,
        completed: bool | None = None,
        completed_before: int | None = None,
        open: bool | None = None,
        limit: int | None = None,
        offset: int | None = None,
        single_page: bool = False,
    ) -> Any:
        return self._get_list(
            ResourceDescriptor(ResourceKind.TASKS, {"team": team}),
            {
                "video_id": video_id,
                "type": task_type,
                "assignee": assignee,
                "priority": priority,
                "order_by": order_by,
                "completed": completed,
                "completed_before": completed_before,
                "open": open,
                "limit": limit,
                "offset": offset,
            },
            single_page=single_page,
        )

    def get_task_info(self, team: str, task_id: str) -> Any:
        return self._fetch(
            "GET", ResourceDescriptor(ResourceKind.TASK, {"team": team, "task_id": task_id})
        )

    def create_task(
        self,
        team: str,
        video_id: str,
        language_code: str,
        task_type: str,
        assignee: str | None = None,
        priority: int | None = None,
        completed: bool | None = None,
        approved: bool | None = None,
        version_no: int | None = None,
        language_info: Mapping[str, Any] | None = None,
    ) -> Any:
        """Create a task.

        Review and Approve tasks act on a subtitle version; when
        ``version_no`` is omitted the latest one is used, read from
        ``language_info`` if given or fetched otherwise.
        """
        if not self._valid_video_id(video_id, "create_task"):
            return None
        if not self._valid_language_code(language_code, "create_task"):
            return None
        result = validate_task_type(task_type)
        if not result.ok:
            raise ArgumentError(result.message)
        if version_no is None and task_type in VERSIONED_TASK_TYPES:
            version_no = self._last_version(video_id, language_code, language_info)
        return self._fetch(
            "POST",
            ResourceDescriptor(ResourceKind.TASKS, {"team": team}),
            body=_compact(
                {
                    "video_id": video_id,
                    "language": language_code,
                    "type": task_type,
                    "assignee": assignee,
                    "priority": priority,
                    "completed": completed,
                    "approved": approved,
                    "version_no": version_no,
                }
            ),
        )

    def delete_task(self, team: str, task_id: str) -> Any:
        return self._fetch(
            "DELETE", ResourceDescriptor(ResourceKind.TASK, {"team": team, "task_id": task_id})
        )

    # Subtitles

    def get_subtitle(
        self,
        video_id: str,
        language_code: str,
        version: int | None = None,
        sub_format: str | None = None,
        language_info: Mapping[str, Any] | None = None,
    ) -> Any:
        """Fetch a subtitle track.

        A version is needed to retrieve unpublished subtitles, so the latest
        one is looked up when ``version`` is omitted. Without ``sub_format``
        the service returns its internal subtitle object; with one (``srt``,
        ``vtt``, ``dfxp`` ...) the raw track comes back as bytes.
        """
        if not self._valid_video_id(video_id, "get_subtitle"):
            return None
        if version is None:
            version = self._last_version(video_id, language_code, language_info)
        if version is None:
            self._events.notice(
                f"No subtitle version found for {video_id}/{language_code}",
                {"operation": "get_subtitle"},
            )
            return None
        return self._fetch(
            "GET",
            ResourceDescriptor(
                ResourceKind.SUBTITLES,
                {"video_id": video_id, "language": language_code},
                content_type=None,
            ),
            {"format": sub_format, "version": version},
        )

    def upload_subtitle(
        self,
        video_id: str,
        language_code: str,
        subtitles: str,
        sub_format: str | None = None,
        title: str | None = None,
        description: str | None = None,
        complete: bool | None = None,
        language_info: Mapping[str, Any] | None = None,
    ) -> Any:
        """Upload a subtitle track, creating the language first if needed.

        The service expects a PUT here even though a new version is created.
        ``title`` and ``description`` default to the language record's. The
        service defaults ``sub_format`` to SRT.
        """
        if not self._valid_video_id(video_id, "upload_subtitle"):
            return None
        if not self._valid_language_code(language_code, "upload_subtitle"):
            return None
        if language_info is None:
            language_info = self.get_video_language(video_id, language_code)
            if not _is_language_record(language_info):
                self.create_video_language(video_id, language_code)
                language_info = self.get_video_language(video_id, language_code)
        if not isinstance(language_info, Mapping):
            language_info = {}
        return self._fetch(
            "PUT",
            ResourceDescriptor(
                ResourceKind.SUBTITLES, {"video_id": video_id, "language": language_code}
            ),
            body=_compact(
                {
                    "subtitles": subtitles,
                    "sub_format": sub_format,
                    "title": title if title is not None else language_info.get("title"),
                    "description": (
                        description
                        if description is not None
                        else language_info.get("description")
                    ),
                    "is_complete": complete,
                }
            ),
        )

    # Team members

    def get_members(
        self,
        team: str,
        limit: int | None = None,
        offset: int | None = None,
        single_page: bool = False,
    ) -> Any:
        return self._get_list(
            ResourceDescriptor(ResourceKind.MEMBERS, {"team": team}),
            {"limit": limit, "offset": offset},
            single_page=single_page,
        )

    def _add_to_team(self, kind: ResourceKind, team: str, username: str, role: str) -> Any:
        result = validate_role(role)
        if not result.ok:
            raise ArgumentError(result.message)
        return self._fetch(
            "POST",
            ResourceDescriptor(kind, {"team": team}),
            body={"username": username, "role": role},
        )

    def add_partner_member(self, team: str, username: str, role: str) -> Any:
        """Move a user straight into a partner team, without an invitation.

        Only works between teams the service has configured as partner teams.
        """
        return self._add_to_team(ResourceKind.MEMBERS, team, username, role)

    def add_member(self, team: str, username: str, role: str) -> Any:
        """Invite a user to a team; the user may decline."""
        return self._add_to_team(ResourceKind.SAFE_MEMBERS, team, username, role)

    def delete_member(self, team: str, username: str) -> Any:
        return self._fetch(
            "DELETE",
            ResourceDescriptor(ResourceKind.MEMBER, {"team": team, "username": username}),
        )

    # Users

    def get_user(self, username: str) -> Any:
        return self._fetch("GET", ResourceDescriptor(ResourceKind.USERS, {"username": username}))

    def get_users(self, usernames: Iterable[str]) -> list[Any] | None:
        """Fetch several user records, skipping the ones that do not resolve."""
        usernames = list(usernames)
        if not usernames:
            return None
        users: list[Any] = []
        for username in usernames:
            user = self.get_user(username)
            if not isinstance(user, Mapping):
                self._events.warning(
                    f"Skipping user {username!r}: unexpected response",
                    {"operation": "get_users", "username": username},
                )
                continue
            users.append(user)
        return users

    def is_valid_user(self, username: str) -> bool:
        user = self.get_user(username)
        return isinstance(user, Mapping) and "username" in user

    # Lifecycle

    def close(self) -> None:
        """Close the HTTP connection pool if this client created it."""
        if self._owns_http_client:
            self._transport.close()
            logger.info("Amara API client closed")

    def __enter__(self) -> AmaraClient:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()


__all__ = ["AmaraClient"]
