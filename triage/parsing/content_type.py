"""Content-Type header parsing for multipart requests.

Boundary values may contain inner spaces but never end with one, e.g.
``boundary=0a'()+_,-./:=? end``. Only the subtype and the raw boundary token
are extracted; the boundary character set is not validated.
"""

import re

from beartype import beartype

from triage.core.logger import LogIcon, logger
from triage.models.core import MultipartSubtype
from triage.models.report import ContentTypeDescriptor, DebugTrail
from triage.parsing.errors import HeaderMissing, MissingBoundary, UnrecognizedSubtype

SUBTYPE_PATTERN = re.compile("|".join(re.escape(subtype.value) for subtype in MultipartSubtype), re.IGNORECASE)
BOUNDARY_PATTERN = re.compile(r"boundary=([\S ]*\S)", re.IGNORECASE)


def scan_segments(pattern: re.Pattern[str], segments: list[str], group: int = 0) -> list[str]:
    """Collect the match of pattern in every segment, in segment order."""
    return [match.group(group) for segment in segments if (match := pattern.search(segment))]


def _keep_last(name: str, found: list[str]) -> str:
    """Later matches win; distinct earlier ones are logged as discarded."""
    kept = found[-1]
    discarded = [value for value in found[:-1] if value != kept]
    if discarded:
        logger.warning(f"Ambiguous {name} in content-type header", icon=LogIcon.WARNING, kept=kept, discarded=discarded)
    return kept


@beartype
def parse_content_type(header: str | None, trail: DebugTrail | None = None) -> ContentTypeDescriptor:
    """Extract the multipart subtype and boundary from a Content-Type header value.

    Raises:
        HeaderMissing: header is None or empty.
        UnrecognizedSubtype: no segment names a recognized multipart subtype.
        MissingBoundary: no segment carries a boundary parameter.
    """
    trail = trail if trail is not None else DebugTrail()
    trail.enter("content_type")

    if not header:
        raise HeaderMissing(f"Content-Type header is missing; got {header!r}", trail)

    segments = header.split(";")
    trail.record(
        header=header,
        segments=segments,
        subtype_pattern=SUBTYPE_PATTERN.pattern,
        boundary_pattern=BOUNDARY_PATTERN.pattern,
    )

    subtypes = scan_segments(SUBTYPE_PATTERN, segments)
    boundaries = scan_segments(BOUNDARY_PATTERN, segments, group=1)

    if not subtypes:
        raise UnrecognizedSubtype(f"Incorrect mime type in {header!r}", trail)
    if not boundaries:
        raise MissingBoundary(f"Incorrect boundary in {header!r}", trail)

    descriptor = ContentTypeDescriptor(
        subtype=MultipartSubtype(_keep_last("subtype", subtypes).lower()),
        boundary=_keep_last("boundary", boundaries),
    )
    trail.record(subtype=descriptor.subtype.value, boundary=descriptor.boundary)
    trail.complete()
    logger.debug("Content-type parsed", icon=LogIcon.DETECTION, subtype=descriptor.subtype.value)
    return descriptor
