"""Trace context consumed by the correlation resolver.

This module provides the explicit ambient tracing context handed to
``CorrelationResolver.resolve``. It replaces a process-wide "current activity"
with a value the caller passes in, so resolution never depends on hidden
global state.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from w3c_correlation.correlation.constants import (
    PARENT_SPAN_ID_TAG,
    SPAN_ID_TAG,
    TRACE_ID_TAG,
    TRACESTATE_TAG,
)
from w3c_correlation.correlation.errors import InvalidTraceContextError
from w3c_correlation.correlation.ids import (
    extract_root_id,
    format_request_id,
    generate_span_id,
    generate_trace_id,
    is_valid_span_id,
    is_valid_trace_id,
    span_id_from_request_id,
)
from w3c_correlation.telemetry import LEGACY_CONTEXT_BRIDGED, get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class TraceContext:
    """Already-parsed distributed tracing context.

    The context exposes W3C identifiers as string tags (unknown tags are
    carried but ignored by the resolver) plus the pre-W3C hierarchical
    identifier of the same operation, if the caller has one.

    This is a frozen dataclass and should never be modified after creation.
    Use new_span() to derive a child context.

    Attributes:
        tags: Key/value tags; recognized keys are the W3C trace id, span id,
            parent span id and tracestate tags. Stored as a read-only
            copy of the given mapping.
        legacy_id: Full legacy hierarchical identifier (e.g. ``|abc.1.``).
        legacy_root_id: Legacy root identifier. Derived from legacy_id when
            not given.
    """

    tags: Mapping[str, str] = field(default_factory=dict)
    legacy_id: str | None = None
    legacy_root_id: str | None = None

    def __post_init__(self) -> None:
        # Snapshot the caller's mapping so later changes to it cannot leak in.
        object.__setattr__(self, "tags", MappingProxyType(dict(self.tags)))

    def __hash__(self) -> int:
        return hash((frozenset(self.tags.items()), self.legacy_id, self.legacy_root_id))

    @property
    def trace_id(self) -> str | None:
        """W3C trace id tag value."""
        return self.tags.get(TRACE_ID_TAG)

    @property
    def span_id(self) -> str | None:
        """W3C span id tag value."""
        return self.tags.get(SPAN_ID_TAG)

    @property
    def parent_span_id(self) -> str | None:
        """W3C parent span id tag value."""
        return self.tags.get(PARENT_SPAN_ID_TAG)

    @property
    def trace_state(self) -> str | None:
        """Opaque vendor tracestate value."""
        return self.tags.get(TRACESTATE_TAG)

    @property
    def root_id(self) -> str | None:
        """Root identifier of the ambient operation.

        Falls back to the trace id when the context has no legacy identifier.
        """
        return self.legacy_root_id or extract_root_id(self.legacy_id) or self.trace_id

    @property
    def id(self) -> str | None:
        """Full identifier of the ambient operation.

        Falls back to the legacy encoding of (trace id, span id) when the
        context has no legacy identifier.
        """
        if self.legacy_id:
            return self.legacy_id
        if self.trace_id and self.span_id:
            return format_request_id(self.trace_id, self.span_id)
        return None

    @classmethod
    def from_ids(
        cls,
        trace_id: str,
        span_id: str | None = None,
        parent_span_id: str | None = None,
        trace_state: str | None = None,
        legacy_id: str | None = None,
        legacy_root_id: str | None = None,
    ) -> "TraceContext":
        """Build a context from individual identifiers.

        Args:
            trace_id: 32 lowercase hex characters.
            span_id: Optional 16 lowercase hex characters.
            parent_span_id: Optional 16 lowercase hex characters.
            trace_state: Optional opaque vendor state.
            legacy_id: Optional legacy hierarchical identifier.
            legacy_root_id: Optional legacy root identifier.

        Returns:
            A new TraceContext.

        Raises:
            InvalidTraceContextError: If any identifier is malformed.
        """
        if not is_valid_trace_id(trace_id):
            raise InvalidTraceContextError(f"Invalid trace id: {trace_id!r}")
        for name, value in (("span id", span_id), ("parent span id", parent_span_id)):
            if value is not None and not is_valid_span_id(value):
                raise InvalidTraceContextError(f"Invalid {name}: {value!r}")

        tags = {TRACE_ID_TAG: trace_id}
        if span_id is not None:
            tags[SPAN_ID_TAG] = span_id
        if parent_span_id is not None:
            tags[PARENT_SPAN_ID_TAG] = parent_span_id
        if trace_state is not None:
            tags[TRACESTATE_TAG] = trace_state
        return cls(tags=tags, legacy_id=legacy_id, legacy_root_id=legacy_root_id)

    @classmethod
    def new_trace(cls, trace_state: str | None = None) -> "TraceContext":
        """Start a new trace.

        Returns:
            A new TraceContext with generated trace and span ids and no parent.
        """
        return cls.from_ids(
            trace_id=generate_trace_id(),
            span_id=generate_span_id(),
            trace_state=trace_state,
        )

    def new_span(self) -> "TraceContext":
        """Create a child span within this trace.

        Returns:
            A new TraceContext with the same trace id and trace state, a new
            span id, and this context's span id as its parent span id. Only
            the legacy root is inherited; the child's id is derived from its
            W3C identifiers.
        """
        tags = {
            key: value
            for key, value in self.tags.items()
            if key not in (SPAN_ID_TAG, PARENT_SPAN_ID_TAG)
        }
        tags[SPAN_ID_TAG] = generate_span_id()
        if self.span_id is not None:
            tags[PARENT_SPAN_ID_TAG] = self.span_id
        return TraceContext(
            tags=tags, legacy_root_id=self.legacy_root_id or extract_root_id(self.legacy_id)
        )

    @classmethod
    def from_legacy_id(
        cls, legacy_id: str, parent_legacy_id: str | None = None
    ) -> "TraceContext":
        """Bridge a context that only carries a legacy hierarchical id.

        The legacy root is reused as the trace id when it is already a valid
        W3C trace id; otherwise a new trace id is generated. A new span id is
        always generated. The parent span id is recovered from
        parent_legacy_id when that is a W3C-compatible request id.

        Args:
            legacy_id: Legacy identifier of the ambient operation.
            parent_legacy_id: Legacy identifier of its parent, if known.

        Returns:
            A new TraceContext that keeps legacy_id for legacy-property stamping.
        """
        root_id = extract_root_id(legacy_id)
        reused_root = is_valid_trace_id(root_id)
        trace_id = root_id if reused_root and root_id else generate_trace_id()
        parent_span_id = span_id_from_request_id(parent_legacy_id)

        log.debug(
            LEGACY_CONTEXT_BRIDGED,
            legacy_id=legacy_id,
            trace_id=trace_id,
            reused_root=reused_root,
            has_parent_span=parent_span_id is not None,
        )
        return cls.from_ids(
            trace_id=trace_id,
            span_id=generate_span_id(),
            parent_span_id=parent_span_id,
            legacy_id=legacy_id,
            legacy_root_id=root_id,
        )
