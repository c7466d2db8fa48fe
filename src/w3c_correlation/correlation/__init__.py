"""W3C Trace Context correlation for telemetry records.

This module provides:
- Trace and span id generation (W3C format)
- TraceContext, the explicit ambient tracing context
- Telemetry record models (closed set of kinds)
- CorrelationResolver and TelemetryInitializer
"""

from w3c_correlation.correlation.constants import (
    LEGACY_REQUEST_ID_PROPERTY,
    LEGACY_ROOT_ID_PROPERTY,
    PARENT_SPAN_ID_TAG,
    SPAN_ID_TAG,
    TRACE_ID_TAG,
    TRACESTATE_PROPERTY,
    TRACESTATE_TAG,
)
from w3c_correlation.correlation.context import TraceContext
from w3c_correlation.correlation.errors import CorrelationError, InvalidTraceContextError
from w3c_correlation.correlation.ids import (
    extract_root_id,
    format_request_id,
    generate_span_id,
    generate_trace_id,
    is_valid_request_id,
    is_valid_span_id,
    is_valid_trace_id,
)
from w3c_correlation.correlation.policies import SqlExemptionPolicy
from w3c_correlation.correlation.records import (
    ChildRecord,
    DependencyRecord,
    EventRecord,
    ExceptionRecord,
    OperationContext,
    OperationRecord,
    RequestRecord,
    TelemetryRecord,
    TraceRecord,
    parse_record,
)
from w3c_correlation.correlation.resolver import CorrelationResolver, TelemetryInitializer

__all__ = [
    # Identifiers
    "generate_trace_id",
    "generate_span_id",
    "is_valid_trace_id",
    "is_valid_span_id",
    "format_request_id",
    "is_valid_request_id",
    "extract_root_id",
    # Context
    "TraceContext",
    # Records
    "OperationContext",
    "RequestRecord",
    "DependencyRecord",
    "TraceRecord",
    "EventRecord",
    "ExceptionRecord",
    "OperationRecord",
    "ChildRecord",
    "TelemetryRecord",
    "parse_record",
    # Resolution
    "CorrelationResolver",
    "TelemetryInitializer",
    "SqlExemptionPolicy",
    # Errors
    "CorrelationError",
    "InvalidTraceContextError",
    # Keys
    "TRACE_ID_TAG",
    "SPAN_ID_TAG",
    "PARENT_SPAN_ID_TAG",
    "TRACESTATE_TAG",
    "TRACESTATE_PROPERTY",
    "LEGACY_ROOT_ID_PROPERTY",
    "LEGACY_REQUEST_ID_PROPERTY",
]
