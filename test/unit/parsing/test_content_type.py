"""Tests for Content-Type header parsing."""

import pytest
from structlog.testing import capture_logs

from triage.models.core import MultipartSubtype
from triage.models.report import DebugTrail
from triage.parsing.content_type import BOUNDARY_PATTERN, SUBTYPE_PATTERN, parse_content_type, scan_segments
from triage.parsing.errors import HeaderMissing, MissingBoundary, TriageError, UnrecognizedSubtype


# -----------------------------------------------------------------------------
# Successful parsing
# -----------------------------------------------------------------------------


class TestParseContentType:
    """Tests for parse_content_type on well-formed headers."""

    def test_form_data_with_boundary(self) -> None:
        """Verify the basic form-data header is split into subtype and boundary."""
        result = parse_content_type("multipart/form-data; boundary=abc123")

        assert result.subtype == MultipartSubtype.FORM_DATA
        assert result.subtype == "multipart/form-data"
        assert result.boundary == "abc123"

    def test_boundary_keeps_inner_spaces_and_drops_trailing(self) -> None:
        """Verify the boundary runs to its last non-space character."""
        result = parse_content_type("multipart/form-data; boundary=a b c ")
        assert result.boundary == "a b c"

    def test_mixed_subtype(self) -> None:
        """Verify multipart/mixed is recognized."""
        result = parse_content_type("multipart/mixed; boundary=gc0p4Jq0M2Yt08jU534c0p")
        assert result.subtype == MultipartSubtype.MIXED
        assert result.boundary == "gc0p4Jq0M2Yt08jU534c0p"

    def test_boundary_before_subtype(self) -> None:
        """Verify segment order does not matter."""
        result = parse_content_type("boundary=XYZ; multipart/form-data")
        assert result.subtype == MultipartSubtype.FORM_DATA
        assert result.boundary == "XYZ"

    def test_subtype_is_case_insensitive(self) -> None:
        """Verify an upper-cased media type still maps to the enum member."""
        result = parse_content_type("Multipart/Form-Data; Boundary=XYZ")
        assert result.subtype == MultipartSubtype.FORM_DATA
        assert result.boundary == "XYZ"

    def test_extra_parameters_ignored(self) -> None:
        """Verify unrelated parameters are skipped."""
        result = parse_content_type("multipart/form-data; charset=utf-8; boundary=----WebKitFormBoundary7MA4YWxk")
        assert result.boundary == "----WebKitFormBoundary7MA4YWxk"

    @pytest.mark.parametrize(
        ("boundary", "expected"),
        [
            ("simple", "simple"),
            ("0a'()+_,-./:=? end", "0a'()+_,-./:=? end"),
            ("with trailing   ", "with trailing"),
            ('"quoted"', '"quoted"'),
        ],
    )
    def test_boundary_extraction(self, boundary: str, expected: str) -> None:
        """Verify the boundary is the exact substring up to its last non-space character."""
        result = parse_content_type(f"multipart/mixed; boundary={boundary}")
        assert result.boundary == expected

    def test_last_match_wins(self) -> None:
        """Verify later segments override earlier matches."""
        result = parse_content_type("multipart/form-data; boundary=first; multipart/mixed; boundary=second")
        assert result.subtype == MultipartSubtype.MIXED
        assert result.boundary == "second"


# -----------------------------------------------------------------------------
# Failures
# -----------------------------------------------------------------------------


class TestParseContentTypeFailures:
    """Tests for parse_content_type failure modes."""

    @pytest.mark.parametrize("header", [None, ""])
    def test_missing_header(self, header: str | None) -> None:
        """Verify a missing header raises HeaderMissing."""
        with pytest.raises(HeaderMissing):
            parse_content_type(header)

    @pytest.mark.parametrize("header", ["text/plain", "application/json; boundary=x", "multipart/related; boundary=x"])
    def test_unrecognized_subtype(self, header: str) -> None:
        """Verify non-multipart or unsupported subtypes raise UnrecognizedSubtype."""
        with pytest.raises(UnrecognizedSubtype):
            parse_content_type(header)

    def test_missing_boundary(self) -> None:
        """Verify a multipart header without boundary raises MissingBoundary."""
        with pytest.raises(MissingBoundary):
            parse_content_type("multipart/mixed")

    def test_empty_boundary(self) -> None:
        """Verify an empty or blank boundary value is not accepted."""
        with pytest.raises(MissingBoundary):
            parse_content_type("multipart/form-data; boundary=   ")

    def test_subtype_checked_before_boundary(self) -> None:
        """Verify a header lacking both reports the subtype first."""
        with pytest.raises(UnrecognizedSubtype):
            parse_content_type("text/plain")

    def test_errors_share_base_class(self) -> None:
        """Verify every content-type failure is a TriageError."""
        for error in (HeaderMissing, UnrecognizedSubtype, MissingBoundary):
            assert issubclass(error, TriageError)


# -----------------------------------------------------------------------------
# Debug trail
# -----------------------------------------------------------------------------


class TestContentTypeTrail:
    """Tests for trail bookkeeping during header parsing."""

    def test_success_marks_stage_completed(self, trail: DebugTrail) -> None:
        """Verify the stage is completed and the matches recorded."""
        parse_content_type("multipart/form-data; boundary=abc", trail)

        assert trail.completed == ["content_type"]
        assert trail.notes["segments"] == ["multipart/form-data", " boundary=abc"]
        assert trail.notes["boundary_pattern"] == BOUNDARY_PATTERN.pattern
        assert trail.notes["subtype_pattern"] == SUBTYPE_PATTERN.pattern
        assert trail.notes["boundary"] == "abc"

    def test_failure_carries_trail(self, trail: DebugTrail) -> None:
        """Verify the raised error holds the trail and the failing stage."""
        with pytest.raises(MissingBoundary) as exc_info:
            parse_content_type("multipart/mixed", trail)

        assert exc_info.value.trail is trail
        assert exc_info.value.stage == "content_type"
        assert trail.completed == []
        assert trail.notes["header"] == "multipart/mixed"


# -----------------------------------------------------------------------------
# scan_segments
# -----------------------------------------------------------------------------


def test_scan_segments_keeps_segment_order() -> None:
    """Verify matches come back in segment order and misses are skipped."""
    segments = ["boundary=one", " charset=utf-8", " boundary=two"]
    assert scan_segments(BOUNDARY_PATTERN, segments, group=1) == ["one", "two"]


# -----------------------------------------------------------------------------
# Ambiguous headers
# -----------------------------------------------------------------------------


class TestAmbiguousHeaderWarnings:
    """Tests for the warning logged when later matches override earlier ones."""

    def test_distinct_boundaries_warn(self) -> None:
        """Verify the kept and discarded boundaries are named in one warning."""
        with capture_logs() as logs:
            result = parse_content_type("multipart/form-data; boundary=first; boundary=second")

        warnings = [entry for entry in logs if entry["log_level"] == "warning"]
        assert result.boundary == "second"
        assert len(warnings) == 1
        assert warnings[0]["kept"] == "second"
        assert warnings[0]["discarded"] == ["first"]

    def test_distinct_subtypes_warn(self) -> None:
        with capture_logs() as logs:
            parse_content_type("multipart/form-data; multipart/mixed; boundary=b")

        warnings = [entry for entry in logs if entry["log_level"] == "warning"]
        assert len(warnings) == 1
        assert warnings[0]["kept"] == "multipart/mixed"
        assert warnings[0]["discarded"] == ["multipart/form-data"]

    def test_repeated_boundary_does_not_warn(self) -> None:
        """Verify the same value seen twice is not treated as ambiguous."""
        with capture_logs() as logs:
            result = parse_content_type("multipart/form-data; boundary=same; boundary=same")

        assert result.boundary == "same"
        assert [entry for entry in logs if entry["log_level"] == "warning"] == []
