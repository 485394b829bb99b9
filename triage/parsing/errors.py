"""Failures raised while classifying a multipart request."""

from typing import Any

from triage.models.report import DebugTrail


class TriageError(Exception):
    """Base class for request classification failures.

    Carries the trail accumulated up to the point of failure so the entry
    point can report where processing stopped.
    """

    def __init__(self, message: str, trail: DebugTrail | None = None) -> None:
        super().__init__(message)
        self.trail = trail if trail is not None else DebugTrail()
        self.stage = self.trail.stage

    def to_payload(self) -> dict[str, Any]:
        """Render the diagnostic object returned to the caller."""
        payload = {
            "error": type(self).__name__,
            "message": str(self),
            "stage": self.stage,
            "lastCompletedStage": self.trail.last_completed,
            "trail": self.trail.model_dump(mode="json"),
        }
        if self.__cause__ is not None:
            payload["cause"] = f"{type(self.__cause__).__name__}: {self.__cause__}"
        return payload


class HeaderMissing(TriageError):
    """No Content-Type header was supplied."""


class UnrecognizedSubtype(TriageError):
    """The header names neither multipart/form-data nor multipart/mixed."""


class MissingBoundary(TriageError):
    """The header carries no boundary parameter."""


class BufferConstructionFailed(TriageError):
    """A byte-like body could not be turned into a byte buffer."""
