"""Test fixtures for multipart-triage unit tests."""

from dataclasses import dataclass, field
from typing import Any

import pytest

from triage.api.trigger import InboundRequest
from triage.models.report import DebugTrail


# -----------------------------------------------------------------------------
# Mock classes for Robyn Request
# -----------------------------------------------------------------------------


@dataclass
class MockHeaders:
    """Mock Headers object for Robyn Request."""

    _data: dict = field(default_factory=dict)

    def get(self, key: str, default: str | None = None) -> str | None:
        return self._data.get(key, default)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def __getitem__(self, key: str) -> str:
        return self._data[key]

    def __setitem__(self, key: str, value: str) -> None:
        self._data[key] = value


@dataclass
class MockUrl:
    """Mock Url object for Robyn Request."""

    path: str = "/api/MultipartTrigger"


@dataclass
class MockRequest:
    """Mock Request object for Robyn."""

    body: str | bytes = ""
    headers: MockHeaders = field(default_factory=MockHeaders)
    method: str = "POST"
    form_data: dict = field(default_factory=dict)
    url: MockUrl = field(default_factory=MockUrl)


# -----------------------------------------------------------------------------
# Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def trail() -> DebugTrail:
    """Fresh debug trail for a single request."""
    return DebugTrail()


@pytest.fixture
def make_mock_request():
    """Factory fixture to create mock Robyn requests."""

    def _make(
        body: str | bytes = "",
        headers: dict | None = None,
        method: str = "POST",
        form_data: dict | None = None,
    ) -> MockRequest:
        return MockRequest(body=body, headers=MockHeaders(headers or {}), method=method, form_data=form_data or {})

    return _make


@pytest.fixture
def make_inbound():
    """Factory fixture to create inbound trigger requests."""

    def _make(
        method: str = "POST",
        content_type: str | None = "multipart/form-data; boundary=XYZ",
        raw_body: Any = None,
        body: Any = None,
        **headers: str,
    ) -> InboundRequest:
        if content_type is not None:
            headers["content-type"] = content_type
        return InboundRequest(method=method, headers=headers, raw_body=raw_body, body=body)

    return _make
