"""Classification of a request body into a BodyDescriptor."""

from beartype import beartype

from triage.core.logger import LogIcon, logger
from triage.core.settings import settings as st
from triage.models.core import Absent, BodyKind, Bytes, Other, RawBody, Text
from triage.models.report import BodyDescriptor, DebugTrail
from triage.parsing.errors import BufferConstructionFailed
from triage.parsing.preview import top_lines


@beartype
def classify_body(
    body: RawBody,
    trail: DebugTrail | None = None,
    *,
    stage: str = "body",
    preview_lines: int | None = None,
) -> BodyDescriptor:
    """Describe what was actually received for one body representation.

    Text is encoded to UTF-8 and previewed by its leading lines, byte-like
    values are materialized into a buffer without a preview, and anything
    else is passed through as the preview with an empty buffer.

    Raises:
        BufferConstructionFailed: a byte-like value holds items that are not bytes.
    """
    trail = trail if trail is not None else DebugTrail()
    trail.enter(stage)
    lines = st.PREVIEW_LINES if preview_lines is None else preview_lines

    match body:
        case Absent():
            descriptor = BodyDescriptor(kind=BodyKind.ABSENT, preview=None)
        case Text(value=text):
            # surrogatepass keeps lone surrogates from WTF-8 decoded bodies
            descriptor = BodyDescriptor(
                kind=BodyKind.TEXT,
                buffer=text.encode("utf-8", "surrogatepass"),
                preview=top_lines(text, lines),
            )
        case Bytes(value=data):
            try:
                buffer = bytes(data)
            except (TypeError, ValueError) as err:
                raise BufferConstructionFailed(f"Could not build a buffer from {stage}: {err}", trail) from err
            descriptor = BodyDescriptor(kind=BodyKind.BYTES, buffer=buffer, preview="")
        case Other(value=value):
            descriptor = BodyDescriptor(kind=type(value).__name__, preview=value)

    trail.record(**{f"{stage}_kind": descriptor.kind, f"{stage}_size": len(descriptor.buffer)})
    trail.complete()
    logger.debug(
        f"Classified {stage}",
        icon=LogIcon.BINARY if descriptor.kind == BodyKind.BYTES else LogIcon.TEXT,
        kind=str(descriptor.kind),
        size=len(descriptor.buffer),
    )
    return descriptor
