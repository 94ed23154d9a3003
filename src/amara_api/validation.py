"""Validators returning explicit result values.

Callers branch on ``ValidationResult.ok`` and ``ValidationResult.kind``
instead of catching exceptions. Configuration-level callers that must fail
hard convert a failed result with ``raise_for_error()``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol

from .errors import ConfigurationError

API_KEY_LENGTH = 40
VIDEO_ID_LENGTH = 12

_API_KEY_RE = re.compile(r"[0-9a-f]*")
_VIDEO_ID_RE = re.compile(r"[A-Za-z0-9]*")

TEAM_ROLES = frozenset({"admin", "manager", "owner", "contributor"})
TASK_TYPES = frozenset({"Subtitle", "Translate", "Review", "Approve"})
# Task types that act on an existing subtitle version.
VERSIONED_TASK_TYPES = frozenset({"Review", "Approve"})

LANGUAGE_CODES = frozenset(
    """
    aa ab ae af aka amh an arc ar arq ase as ast av ay az bam ba be ber bg bh bi bn bnt bo
    br bs bug cak ca ceb ce ch cho cku co cr cs ctd ctu cu cv cy da de dv dz ee efi el
    en-gb en eo es-ar es-mx es es-ni et eu fa ff fil fi fj fo fr-ca fr fy fy-nl ga gd gl
    gn gu gv hai hau haw haz hus hb hch he hi ho hr ht hu hup hy hz ia ibo id ie ig ii ik
    ilo inh io iro is it iu ja jv ka kar kau kg kik ki kin kj kk kl km kn ko kon kr ksh
    ks ku kv kw ky la lb lg li lin lkt lld ln lo lt ltg lu lua luo luy lv mad meta-audio
    meta-geo meta-tw meta-wiki mg mh mi mk ml mlg mo moh mn mni mnk mos mr ms mt mus my
    na nan nb nci nd ne ng nl nn no nr nso nv ny oc oji om or orm os pa pam pan pap pi pl
    pnb prs ps pt-br pt que qvi raj rm rn ro ru run rup ry rw sa sc sco sd se sg sgn sh
    si sk skx sl sm sna sot sq sr-latn sr srp ss st su sv swa szl ta tar te tet tg th tir
    tk tl tlh tn to toj tr ts tsn tsz tt tw ty tzh tzo ug uk umb ur uz ve vi vls vo wa
    wbl wol xho yaq yi yor yua za zam zh-cn zh-hk zh zh-sg zh-tw zul
    """.split()
)


class ValidationErrorKind(str, Enum):
    API_KEY_LENGTH = "api_key_length"
    API_KEY_CHARSET = "api_key_charset"
    ACCOUNT_HOST_CHANGE = "account_host_change"
    ACCOUNT_USER_CHANGE = "account_user_change"
    VIDEO_ID = "video_id"
    ROLE = "role"
    TASK_TYPE = "task_type"
    LANGUAGE_CODE = "language_code"


@dataclass(frozen=True)
class ValidationResult:
    ok: bool
    kind: ValidationErrorKind | None = None
    message: str = ""

    def __bool__(self) -> bool:
        return self.ok

    def raise_for_error(self) -> None:
        """Raise ``ConfigurationError`` when the result is a failure."""
        if not self.ok:
            raise ConfigurationError(self.message, kind=self.kind)


VALID = ValidationResult(ok=True)


def _invalid(kind: ValidationErrorKind, message: str) -> ValidationResult:
    return ValidationResult(ok=False, kind=kind, message=message)


class _Account(Protocol):
    host: str
    user: str
    apikey: str


def validate_api_key(apikey: Any) -> ValidationResult:
    """Check the key is exactly 40 lowercase hexadecimal characters."""
    if not isinstance(apikey, str) or len(apikey) != API_KEY_LENGTH:
        return _invalid(
            ValidationErrorKind.API_KEY_LENGTH,
            f"The API key is not {API_KEY_LENGTH} characters long",
        )
    if not _API_KEY_RE.fullmatch(apikey):
        return _invalid(
            ValidationErrorKind.API_KEY_CHARSET,
            "The API key should contain lowercase hexadecimal characters only",
        )
    return VALID


def validate_account_change(
    current: _Account | None, host: str, user: str, apikey: str
) -> ValidationResult:
    """Validate a replacement (host, user, apikey) triple against the current one.

    A key belongs to one user on one host, so moving to another host with the
    same key, or swapping the key while keeping the same user, is rejected.
    """
    result = validate_api_key(apikey)
    if not result.ok or current is None:
        return result
    if current.host != host and current.apikey == apikey:
        return _invalid(
            ValidationErrorKind.ACCOUNT_HOST_CHANGE,
            "Invalid API account settings: expected a different API key when changing hosts",
        )
    if current.apikey != apikey and current.user == user:
        return _invalid(
            ValidationErrorKind.ACCOUNT_USER_CHANGE,
            "Invalid API account settings: expected a different username when changing API keys",
        )
    return VALID


def validate_video_id(video_id: Any) -> ValidationResult:
    if (
        isinstance(video_id, str)
        and len(video_id) == VIDEO_ID_LENGTH
        and _VIDEO_ID_RE.fullmatch(video_id)
    ):
        return VALID
    return _invalid(ValidationErrorKind.VIDEO_ID, f"Invalid video id: {video_id!r}")


def validate_role(role: Any) -> ValidationResult:
    if isinstance(role, str) and role in TEAM_ROLES:
        return VALID
    return _invalid(ValidationErrorKind.ROLE, f"Invalid team role: {role!r}")


def validate_task_type(task_type: Any) -> ValidationResult:
    if isinstance(task_type, str) and task_type in TASK_TYPES:
        return VALID
    return _invalid(ValidationErrorKind.TASK_TYPE, f"Invalid task type: {task_type!r}")


def validate_language_code(language_code: Any) -> ValidationResult:
    if isinstance(language_code, str) and language_code in LANGUAGE_CODES:
        return VALID
    return _invalid(
        ValidationErrorKind.LANGUAGE_CODE, f"Unknown language code: {language_code!r}"
    )


__all__ = [
    "LANGUAGE_CODES",
    "TASK_TYPES",
    "TEAM_ROLES",
    "VERSIONED_TASK_TYPES",
    "ValidationErrorKind",
    "ValidationResult",
    "validate_account_change",
    "validate_api_key",
    "validate_language_code",
    "validate_role",
    "validate_task_type",
    "validate_video_id",
]
