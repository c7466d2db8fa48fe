"""Tests for TraceContext."""

from dataclasses import FrozenInstanceError

import pytest

from w3c_correlation.correlation.constants import (
    PARENT_SPAN_ID_TAG,
    SPAN_ID_TAG,
    TRACE_ID_TAG,
    TRACESTATE_TAG,
)
from w3c_correlation.correlation.context import TraceContext
from w3c_correlation.correlation.errors import CorrelationError, InvalidTraceContextError
from w3c_correlation.correlation.ids import format_request_id, is_valid_span_id, is_valid_trace_id

TRACE_ID = "4bf92f3577b34da6a3ce929d0e0e4736"
SPAN_ID = "00f067aa0ba902b7"
PARENT_SPAN_ID = "b7ad6b7169203331"


class TestTraceContextAccessors:
    """Test tag accessors and legacy id fallbacks."""

    def test_accessors_read_tags(self) -> None:
        """Test that accessors read the recognized tags."""
        ctx = TraceContext(
            tags={
                TRACE_ID_TAG: TRACE_ID,
                SPAN_ID_TAG: SPAN_ID,
                PARENT_SPAN_ID_TAG: PARENT_SPAN_ID,
                TRACESTATE_TAG: "congo=t61rcWkgMzE",
                "unknown": "ignored",
            }
        )
        assert ctx.trace_id == TRACE_ID
        assert ctx.span_id == SPAN_ID
        assert ctx.parent_span_id == PARENT_SPAN_ID
        assert ctx.trace_state == "congo=t61rcWkgMzE"

    def test_absent_tags(self) -> None:
        """Test that missing tags read as None."""
        ctx = TraceContext(tags={TRACE_ID_TAG: TRACE_ID})
        assert ctx.span_id is None
        assert ctx.parent_span_id is None
        assert ctx.trace_state is None

    def test_ids_fall_back_to_w3c(self) -> None:
        """Test root and full id when there is no legacy id."""
        ctx = TraceContext.from_ids(TRACE_ID, SPAN_ID)
        assert ctx.root_id == TRACE_ID
        assert ctx.id == format_request_id(TRACE_ID, SPAN_ID)

    def test_ids_from_legacy_id(self) -> None:
        """Test root and full id derived from a legacy id."""
        ctx = TraceContext.from_ids(TRACE_ID, SPAN_ID, legacy_id="|legacyroot.1.2.")
        assert ctx.root_id == "legacyroot"
        assert ctx.id == "|legacyroot.1.2."

    def test_explicit_legacy_root(self) -> None:
        """Test that an explicit legacy root wins over the derived one."""
        ctx = TraceContext.from_ids(
            TRACE_ID, SPAN_ID, legacy_id="|a.1.", legacy_root_id="explicit"
        )
        assert ctx.root_id == "explicit"

    def test_no_id_without_span(self) -> None:
        """Test that a context without span or legacy id has no full id."""
        assert TraceContext.from_ids(TRACE_ID).id is None

    def test_trace_context_is_immutable(self) -> None:
        """Test that TraceContext is immutable (frozen dataclass)."""
        ctx = TraceContext.new_trace()
        with pytest.raises(FrozenInstanceError):
            ctx.legacy_id = "new-id"  # type: ignore[misc]

    def test_tags_are_read_only(self) -> None:
        """Test that a validated context's tags cannot be rewritten."""
        ctx = TraceContext.from_ids(TRACE_ID, SPAN_ID)
        with pytest.raises(TypeError):
            ctx.tags[TRACE_ID_TAG] = "0" * 32  # type: ignore[index]
        with pytest.raises(AttributeError):
            ctx.tags.pop(SPAN_ID_TAG)  # type: ignore[attr-defined]
        assert ctx.trace_id == TRACE_ID
        assert ctx.span_id == SPAN_ID

    def test_tags_are_copied_from_caller(self) -> None:
        """Test that changing the caller's dict does not change the context."""
        tags = {TRACE_ID_TAG: TRACE_ID, SPAN_ID_TAG: SPAN_ID}
        ctx = TraceContext(tags=tags)
        tags[TRACE_ID_TAG] = "0" * 32
        del tags[SPAN_ID_TAG]

        assert ctx.trace_id == TRACE_ID
        assert ctx.span_id == SPAN_ID

    def test_trace_context_is_hashable(self) -> None:
        """Test that equal contexts hash equal and can be used in sets."""
        first = TraceContext.from_ids(TRACE_ID, SPAN_ID, legacy_id="|abc.1.")
        second = TraceContext.from_ids(TRACE_ID, SPAN_ID, legacy_id="|abc.1.")
        other = TraceContext.from_ids(TRACE_ID, PARENT_SPAN_ID)

        assert first == second
        assert hash(first) == hash(second)
        assert first != other
        assert len({first, second, other}) == 2
        assert hash(TraceContext()) == hash(TraceContext(tags={}))


class TestFromIds:
    """Test building contexts from individual ids."""

    def test_from_ids_sets_tags(self) -> None:
        """Test that only the given ids become tags."""
        ctx = TraceContext.from_ids(TRACE_ID, SPAN_ID, trace_state="a=b")
        assert ctx.tags == {TRACE_ID_TAG: TRACE_ID, SPAN_ID_TAG: SPAN_ID, TRACESTATE_TAG: "a=b"}

    def test_from_ids_rejects_bad_trace_id(self) -> None:
        """Test that an empty or malformed trace id is rejected."""
        with pytest.raises(InvalidTraceContextError):
            TraceContext.from_ids("")
        with pytest.raises(InvalidTraceContextError):
            TraceContext.from_ids("0" * 32)

    def test_from_ids_rejects_bad_span_ids(self) -> None:
        """Test that malformed span ids are rejected."""
        with pytest.raises(InvalidTraceContextError, match="span id"):
            TraceContext.from_ids(TRACE_ID, span_id="xyz")
        with pytest.raises(InvalidTraceContextError, match="parent span id"):
            TraceContext.from_ids(TRACE_ID, SPAN_ID, parent_span_id=SPAN_ID.upper() + "A")

    def test_error_hierarchy(self) -> None:
        """Test that the error is both a CorrelationError and a ValueError."""
        assert issubclass(InvalidTraceContextError, CorrelationError)
        assert issubclass(InvalidTraceContextError, ValueError)


class TestNewTraceAndSpan:
    """Test trace and span creation."""

    def test_new_trace_creates_unique_ids(self) -> None:
        """Test that new_trace generates valid, unique ids without a parent."""
        ctx1 = TraceContext.new_trace()
        ctx2 = TraceContext.new_trace()

        assert ctx1.trace_id != ctx2.trace_id
        assert is_valid_trace_id(ctx1.trace_id)
        assert is_valid_span_id(ctx1.span_id)
        assert ctx1.parent_span_id is None

    def test_new_span_creates_child_context(self) -> None:
        """Test that new_span keeps the trace and parents to the current span."""
        parent = TraceContext.new_trace(trace_state="vendor=1")
        child = parent.new_span()

        assert child.trace_id == parent.trace_id
        assert child.parent_span_id == parent.span_id
        assert child.span_id != parent.span_id
        assert is_valid_span_id(child.span_id)
        assert child.trace_state == "vendor=1"

    def test_new_span_preserves_trace_id(self) -> None:
        """Test that the trace id survives nested spans."""
        root = TraceContext.new_trace()
        child1 = root.new_span()
        child2 = child1.new_span()

        assert root.trace_id == child1.trace_id == child2.trace_id
        assert child2.parent_span_id == child1.span_id

    def test_new_span_keeps_legacy_root_only(self) -> None:
        """Test that a child keeps the legacy root but not the legacy id."""
        parent = TraceContext.from_ids(TRACE_ID, SPAN_ID, legacy_id="|legacyroot.1.")
        child = parent.new_span()

        assert child.legacy_id is None
        assert child.root_id == "legacyroot"
        assert child.id == format_request_id(TRACE_ID, child.span_id)


class TestFromLegacyId:
    """Test bridging legacy-only contexts to W3C tags."""

    def test_reuses_w3c_compatible_root(self) -> None:
        """Test that a valid W3C root becomes the trace id."""
        legacy_id = f"|{TRACE_ID}.1."
        ctx = TraceContext.from_legacy_id(legacy_id)

        assert ctx.trace_id == TRACE_ID
        assert is_valid_span_id(ctx.span_id)
        assert ctx.parent_span_id is None
        assert ctx.legacy_id == legacy_id
        assert ctx.root_id == TRACE_ID

    def test_generates_trace_id_for_legacy_root(self) -> None:
        """Test that a non W3C root gets a fresh trace id and is kept as root."""
        ctx = TraceContext.from_legacy_id("|legacyroot.1.")

        assert is_valid_trace_id(ctx.trace_id)
        assert ctx.trace_id != "legacyroot"
        assert ctx.root_id == "legacyroot"

    def test_parent_span_from_compatible_parent(self) -> None:
        """Test that the parent span id is recovered from a W3C-compatible parent."""
        parent = format_request_id(TRACE_ID, PARENT_SPAN_ID)
        ctx = TraceContext.from_legacy_id(f"|{TRACE_ID}.1.", parent_legacy_id=parent)

        assert ctx.parent_span_id == PARENT_SPAN_ID

    def test_parent_span_absent_for_legacy_parent(self) -> None:
        """Test that a hierarchical parent id does not yield a parent span id."""
        ctx = TraceContext.from_legacy_id("|legacyroot.1.", parent_legacy_id="|legacyroot.")
        assert ctx.parent_span_id is None
