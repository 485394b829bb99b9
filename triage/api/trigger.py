"""Multipart trigger endpoint.

Reports the declared multipart subtype, the boundary and what was received
for the raw and the decoded body, so integrations posting multipart payloads
can be debugged without parsing the parts.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any
from uuid import uuid4

from asgi_correlation_id import correlation_id
from robyn import Request, Response, status_codes
from robyn.robyn import HttpMethod

from triage.core.logger import LogIcon, logger
from triage.core.router import Router, json_response, parse_response, text_response
from triage.core.settings import settings as st
from triage.models.core import raw_body_from
from triage.models.report import DebugTrail, ParseReport
from triage.parsing.body import classify_body
from triage.parsing.content_type import parse_content_type
from triage.parsing.errors import TriageError

CORRELATION_HEADERS = ("x-correlation-id", "x-request-id")
TRIGGER_METHODS = (HttpMethod.GET, HttpMethod.POST, HttpMethod.PUT, HttpMethod.PATCH, HttpMethod.DELETE)

TRIGGER_PREFIX = "/api"

router = Router(prefix=TRIGGER_PREFIX)


@dataclass
class InboundRequest:
    """Host-independent view of the request the trigger inspects."""

    method: str
    headers: dict[str, str] = field(default_factory=dict)
    raw_body: Any = None
    body: Any = None
    path: str = ""

    def __post_init__(self) -> None:
        self.headers = {key.lower(): value for key, value in self.headers.items()}


def _read_header(headers: Any, name: str) -> str | None:
    if isinstance(headers, Mapping):
        return {key.lower(): value for key, value in headers.items()}.get(name)
    return headers.get(name) or headers.get(name.title())


def from_robyn(request: Request) -> InboundRequest:
    """Build an InboundRequest from a Robyn request.

    ``raw_body`` is the body as Robyn delivered it: text when it decoded as
    UTF-8, bytes otherwise. ``body`` is Robyn's decoded form view, absent
    when the host decoded nothing.
    """
    wanted = ("content-type", *CORRELATION_HEADERS)
    headers = {name: value for name in wanted if (value := _read_header(request.headers, name))}
    return InboundRequest(
        method=str(request.method),
        headers=headers,
        raw_body=getattr(request, "body", None),
        body=getattr(request, "form_data", None) or None,
        path=str(getattr(getattr(request, "url", None), "path", "") or ""),
    )


def build_report(inbound: InboundRequest, trail: DebugTrail) -> ParseReport:
    """Run the content-type parser and both body classifications."""
    content_type = parse_content_type(inbound.headers.get("content-type"), trail)
    return ParseReport(
        content_type=content_type.subtype,
        boundary=content_type.boundary,
        raw_body=classify_body(raw_body_from(inbound.raw_body), trail, stage="raw_body"),
        body=classify_body(raw_body_from(inbound.body), trail, stage="body"),
    )


def _correlation_id(inbound: InboundRequest) -> str:
    for name in CORRELATION_HEADERS:
        if value := inbound.headers.get(name):
            return value
    return uuid4().hex


def triage(inbound: InboundRequest) -> Response:
    """Answer one trigger invocation; never raises."""
    request_id = _correlation_id(inbound)
    token = correlation_id.set(request_id)
    tracing = {"x-correlation-id": request_id}
    try:
        logger.info("Multipart trigger processed a request", icon=LogIcon.INBOUND, method=inbound.method, path=inbound.path)

        if inbound.method.upper() != st.ACCEPTED_METHOD.upper():
            logger.info("Rejected request method", icon=LogIcon.FORBIDDEN, method=inbound.method)
            return text_response(st.REJECTION_MESSAGE, status_codes.HTTP_400_BAD_REQUEST, tracing)

        trail = DebugTrail()
        try:
            report = build_report(inbound, trail)
        except TriageError as ex:
            logger.error(f"Could not process the body: {ex}", icon=LogIcon.ERROR, error=type(ex).__name__, stage=ex.stage)
            return json_response(ex.to_payload(), status_codes.HTTP_500_INTERNAL_SERVER_ERROR, tracing)
        except Exception as ex:
            logger.exception("Unexpected failure while processing the body", icon=LogIcon.ERROR)
            payload = {
                "error": "InternalError",
                "message": str(ex),
                "stage": trail.stage,
                "lastCompletedStage": trail.last_completed,
                "trail": trail.model_dump(mode="json"),
            }
            return json_response(payload, status_codes.HTTP_500_INTERNAL_SERVER_ERROR, tracing)

        logger.info(
            "Multipart request classified",
            icon=LogIcon.SUCCESS,
            content_type=report.content_type.value,
            raw_body=str(report.raw_body.kind),
            body=str(report.body.kind),
        )
        return parse_response(report, headers=tracing)
    finally:
        correlation_id.reset(token)


@router.any(st.TRIGGER_PATH, methods=TRIGGER_METHODS)
async def multipart_trigger(request: Request) -> Response:
    return triage(from_robyn(request))
