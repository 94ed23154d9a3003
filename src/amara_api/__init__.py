"""Client library for the Amara subtitling platform API."""

from loguru import logger

from .auth import Credentials, build_headers
from .client import AmaraClient
from .config import ClientSettings
from .engine import Page, PaginationEngine, Passthrough
from .errors import (
    AmaraError,
    ArgumentError,
    ConfigurationError,
    ProtocolViolationError,
    RecordLimitExceededError,
    TransportError,
    UnresolvableResourceError,
)
from .events import BaseEventLogger, EventLogger, LoguruEventLogger, NullEventLogger
from .resources import ResourceDescriptor, ResourceKind, resolve_url
from .transport import Transport

__version__ = "0.4.1"

# Library convention: stay silent until the application opts in.
logger.disable("amara_api")

__all__ = [
    "AmaraClient",
    "AmaraError",
    "ArgumentError",
    "BaseEventLogger",
    "ClientSettings",
    "ConfigurationError",
    "Credentials",
    "EventLogger",
    "LoguruEventLogger",
    "NullEventLogger",
    "Page",
    "PaginationEngine",
    "Passthrough",
    "ProtocolViolationError",
    "RecordLimitExceededError",
    "ResourceDescriptor",
    "ResourceKind",
    "Transport",
    "TransportError",
    "UnresolvableResourceError",
    "build_headers",
    "resolve_url",
]
