"""Report models returned by the multipart trigger."""

from typing import Any

import orjson
from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel

from triage.models.core import MultipartSubtype


def well_formed(text: str) -> str:
    """Replace lone surrogates so the text can be encoded as UTF-8."""
    return text.encode("utf-8", "surrogatepass").decode("utf-8", "replace")


def jsonable(value: Any) -> Any:
    """Return value as plain JSON data.

    Strings stay strings, containers are converted item by item, and only
    opaque values orjson cannot encode fall back to their repr.
    """
    match value:
        case str():
            return well_formed(value)
        case list() | tuple():
            return [jsonable(item) for item in value]
        case dict() if all(isinstance(key, str) for key in value):
            return {well_formed(key): jsonable(item) for key, item in value.items()}
    try:
        return orjson.loads(orjson.dumps(value))
    except orjson.JSONEncodeError:
        return repr(value)


class ContentTypeDescriptor(BaseModel):
    """Multipart subtype and boundary declared by a Content-Type header."""

    model_config = ConfigDict(frozen=True)

    subtype: MultipartSubtype
    boundary: str


class BodyDescriptor(BaseModel):
    """Normalized view of one body representation."""

    model_config = ConfigDict(ser_json_bytes="base64")

    kind: str
    buffer: bytes = b""
    preview: Any = None

    @field_serializer("preview", when_used="json")
    def _serialize_preview(self, preview: Any) -> Any:
        return jsonable(preview)


class ParseReport(BaseModel):
    """Everything the trigger could tell about a multipart request."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, ser_json_bytes="base64")

    content_type: MultipartSubtype
    boundary: str
    raw_body: BodyDescriptor
    body: BodyDescriptor

    @field_serializer("boundary", when_used="json")
    def _serialize_boundary(self, boundary: str) -> str:
        return well_formed(boundary)


class DebugTrail(BaseModel):
    """Per-request record of the stages entered and the values seen on the way."""

    stage: str = "received"
    completed: list[str] = Field(default_factory=list)
    notes: dict[str, Any] = Field(default_factory=dict)

    @property
    def last_completed(self) -> str | None:
        return self.completed[-1] if self.completed else None

    def enter(self, stage: str) -> None:
        self.stage = stage

    def record(self, **values: Any) -> None:
        self.notes.update(values)

    def complete(self) -> None:
        self.completed.append(self.stage)

    @field_serializer("notes", when_used="json")
    def _serialize_notes(self, notes: dict[str, Any]) -> dict[str, Any]:
        return {key: jsonable(value) for key, value in notes.items()}
