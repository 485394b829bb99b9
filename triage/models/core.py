"""Core models for inbound request classification."""

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

ByteLike = bytes | bytearray | memoryview | list | tuple


class MultipartSubtype(StrEnum):
    """Multipart content types the trigger recognizes."""

    FORM_DATA = "multipart/form-data"
    MIXED = "multipart/mixed"


class BodyKind(StrEnum):
    """Kinds reported for the known body representations."""

    TEXT = "text"
    BYTES = "bytes"
    ABSENT = "absent"


@dataclass(frozen=True, slots=True)
class Text:
    """Body already decoded to text by the host."""

    value: str


@dataclass(frozen=True, slots=True)
class Bytes:
    """Body delivered as a sequence of byte values."""

    value: ByteLike


@dataclass(frozen=True, slots=True)
class Absent:
    """No body was supplied."""


@dataclass(frozen=True, slots=True)
class Other:
    """Body of a shape the trigger does not interpret."""

    value: Any


RawBody = Text | Bytes | Absent | Other


def _is_byte_array(value: list | tuple) -> bool:
    return bool(value) and all(isinstance(item, int) and not isinstance(item, bool) for item in value)


def raw_body_from(value: Any) -> RawBody:
    """Wrap a body value as handed over by the host into its RawBody variant."""
    match value:
        case None:
            return Absent()
        case str():
            return Text(value)
        case bytes() | bytearray() | memoryview():
            return Bytes(value)
        # JSON form of a Node.js Buffer
        case {"type": "Buffer", "data": list() as data}:
            return Bytes(data)
        case list() | tuple() if _is_byte_array(value):
            return Bytes(value)
        case _:
            return Other(value)
