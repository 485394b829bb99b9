"""Structured logging for the triage service.

Debug mode renders pipe-separated lines with icons. Production renders one
JSON document per event, tagged with the request correlation id.
"""

import logging
from dataclasses import dataclass, field
from enum import StrEnum

import orjson
import structlog
from asgi_correlation_id import correlation_id
from beartype import beartype

from triage.core.settings import settings


class LoggerError(Exception):
    """Exception for logger related issues."""


class LogLevel(StrEnum):
    """LogLevel types for logger configuration."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogIcon(StrEnum):
    """Icon mappings for the triage log categories."""

    DEFAULT = "📋"

    # Status & Results
    SUCCESS = "✅"
    ERROR = "❌"
    WARNING = "⚠️"
    INFO = "ℹ️"

    # Request flow
    START = "🚀"
    INBOUND = "📥"
    DETECTION = "🔍"
    PARSING = "🧩"
    COMPLETE = "✨"
    FORBIDDEN = "🚫"

    # Payloads
    TEXT = "📄"
    BINARY = "📦"
    JSON = "📝"

    # Service
    HEALTHCHECK = "❤️"
    NETWORK = "🌐"


@dataclass
class LoggerConfig:
    """Logger configuration derived from settings."""
    debug: bool = field(default_factory=lambda: settings.DEBUG)
    log_level: LogLevel = field(default_factory=lambda: LogLevel(settings.LOG_LEVEL))
    max_event_length: int = 80


def add_correlation_id(logger, method_name: str, event_dict: dict) -> dict:
    """Add correlation_id to event_dict if the current request carries one."""
    request_id = correlation_id.get()
    if request_id:
        event_dict["correlation_id"] = request_id
    return event_dict


class EventRulesProcessor:
    """
    Normalize log events before rendering.

    Rules:
    - Event messages are upper-cased.
    - Event messages longer than ``max_length`` are cut.
    - The ``icon`` kwarg, if given, must be a LogIcon member.
    - Icons are prepended only in debug mode.
    """

    def __init__(self, debug: bool, max_length: int = 80) -> None:
        self.debug = debug
        self.max_length = max_length

    @beartype
    def __call__(self, logger, name: str, event_dict: dict) -> dict:
        try:
            event = str(event_dict.get("event", ""))[: self.max_length].upper()
            icon_enum = LogIcon(event_dict.pop("icon", LogIcon.DEFAULT))
        except ValueError as err:
            raise LoggerError("Wrong Icon chosen, please choose a valid LogIcon enum member") from err

        if self.debug:
            event = f"{icon_enum.value} {event}"

        event_dict["event"] = event
        return event_dict


def dev_pipeline_renderer(logger, name: str, event_dict: dict) -> str:
    """Render log events as pipe-separated fields."""
    reserved_keys = {"timestamp", "level", "event", "filename", "lineno"}

    level = event_dict.get("level", LogLevel.INFO.value).upper()
    filename = event_dict.get("filename", "")
    location = f"{filename}:{event_dict.get('lineno', '')}" if filename else ""

    extra_kwargs = " | ".join(f"{k}={v}" for k, v in event_dict.items() if k not in reserved_keys)

    parts = [event_dict.get("timestamp", ""), level, event_dict.get("event", ""), extra_kwargs, location]
    return " | ".join(filter(None, parts))


def build_processors(config: LoggerConfig) -> list:
    """Processor chain for the configured mode, renderer last."""
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FILENAME,
                structlog.processors.CallsiteParameter.LINENO,
            ],
            additional_ignores=["logger"],
        ),
        EventRulesProcessor(debug=config.debug, max_length=config.max_event_length),
        add_correlation_id,
    ]
    if config.debug:
        return [*processors, dev_pipeline_renderer]
    return [*processors, structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer(serializer=orjson.dumps)]


def setup_logging(config: LoggerConfig) -> None:
    """Configure structlog once for the whole process."""
    structlog.configure(
        processors=build_processors(config),
        logger_factory=structlog.PrintLoggerFactory() if config.debug else structlog.BytesLoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(config.log_level.value)),
        cache_logger_on_first_use=True,
    )


setup_logging(LoggerConfig())

logger = structlog.get_logger()
