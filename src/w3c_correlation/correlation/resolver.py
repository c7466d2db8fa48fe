"""Correlation id resolution for outgoing telemetry records.

Requests and dependencies are initialized from the ambient span: the span
was created for that operation, so the record's id is the span's id. Traces,
events and exceptions are children of the ambient span instead. The one
exception is the SQL diagnostic-source instrumentation, where the ambient
span is the parent of the dependency call (see policies.SqlExemptionPolicy).

Usage:
    resolver = CorrelationResolver()
    resolver.resolve(record, TraceContext.new_trace())
"""

from typing import assert_never

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
from w3c_correlation.correlation.ids import format_request_id, is_valid_request_id
from w3c_correlation.correlation.policies import SqlExemptionPolicy
from w3c_correlation.correlation.records import (
    DependencyRecord,
    EventRecord,
    ExceptionRecord,
    OperationRecord,
    RequestRecord,
    TelemetryRecord,
    TraceRecord,
)
from w3c_correlation.telemetry import (
    CORRELATION_REENTRANCY_GUARD_HIT,
    CORRELATION_RESOLVED,
    CORRELATION_SKIPPED_NO_CONTEXT,
    SQL_DEPENDENCY_EXEMPTED,
    get_logger,
)

log = get_logger(__name__)


def _as_operation_record(record: TelemetryRecord) -> OperationRecord | None:
    """Return the record if it anchors a span, None if it is a child record."""
    match record:
        case RequestRecord() | DependencyRecord():
            return record
        case TraceRecord() | EventRecord() | ExceptionRecord():
            return None
        case _:
            assert_never(record)


class CorrelationResolver:
    """Stamps W3C and legacy correlation ids onto telemetry records.

    The resolver holds no per-call state and can be shared across threads;
    each record must only be resolved by one caller at a time.

    Args:
        enable_legacy_reentrancy_guard: Skip re-resolution of operation records
            whose id is already a valid legacy encoding of their operation id.
            Only needed on runtimes whose ambient context propagation can
            re-invoke resolution after an id was force-set. Defaults to the
            ``enable_legacy_reentrancy_guard`` setting.
        sql_exemption: Policy for records that keep their instrumentation id.
            Defaults to the SQL diagnostic-source policy from settings.
    """

    def __init__(  # noqa: D107
        self,
        enable_legacy_reentrancy_guard: bool | None = None,
        sql_exemption: SqlExemptionPolicy | None = None,
    ) -> None:
        if enable_legacy_reentrancy_guard is None or sql_exemption is None:
            from w3c_correlation.config.settings import get_settings  # noqa: PLC0415

            settings = get_settings()
            if enable_legacy_reentrancy_guard is None:
                enable_legacy_reentrancy_guard = settings.enable_legacy_reentrancy_guard
            if sql_exemption is None:
                sql_exemption = SqlExemptionPolicy(
                    dependency_type=settings.sql_dependency_type,
                    sdk_version_prefix=settings.sql_diagnostic_source_prefix,
                )
        self.enable_legacy_reentrancy_guard = enable_legacy_reentrancy_guard
        self.sql_exemption = sql_exemption

    def resolve(
        self,
        record: TelemetryRecord,
        context: TraceContext | None,
        force_update: bool = False,
    ) -> None:
        """Populate the record's correlation fields from the trace context.

        Args:
            record: Record to update in place.
            context: Ambient trace context. None leaves the record untouched.
            force_update: Bypass the reentrancy guard and always re-resolve.
        """
        if context is None:
            log.debug(CORRELATION_SKIPPED_NO_CONTEXT, kind=record.kind)
            return

        operation_record = _as_operation_record(record)
        initialize_from_current = operation_record is not None
        if initialize_from_current and self.sql_exemption.applies_to(record):
            initialize_from_current = False
            log.debug(SQL_DEPENDENCY_EXEMPTED, sdk_version=record.sdk_version)

        span_id: str | None = None
        parent_span_id: str | None = None
        for key, value in context.tags.items():
            if key == TRACE_ID_TAG:
                record.operation.id = value
            elif key == SPAN_ID_TAG:
                span_id = value
            elif key == PARENT_SPAN_ID_TAG:
                parent_span_id = value
            elif key == TRACESTATE_TAG and operation_record is not None:
                operation_record.properties[TRACESTATE_PROPERTY] = value

        operation_id = record.operation.id

        if operation_record is not None and initialize_from_current:
            if (
                self.enable_legacy_reentrancy_guard
                and not force_update
                and is_valid_request_id(operation_record.id, operation_id)
            ):
                log.debug(
                    CORRELATION_REENTRANCY_GUARD_HIT,
                    kind=record.kind,
                    record_id=operation_record.id,
                )
                return

            operation_record.id = format_request_id(operation_id, span_id)
            if parent_span_id is not None:
                record.operation.parent_id = format_request_id(operation_id, parent_span_id)
        else:
            record.operation.parent_id = format_request_id(operation_id, span_id)

        if operation_record is not None:
            root_id = context.root_id
            if root_id is not None and operation_id != root_id:
                operation_record.properties[LEGACY_ROOT_ID_PROPERTY] = root_id

            context_id = context.id
            if context_id is not None and operation_record.id != context_id:
                operation_record.properties[LEGACY_REQUEST_ID_PROPERTY] = context_id

        log.debug(
            CORRELATION_RESOLVED,
            kind=record.kind,
            operation_id=operation_id,
            initialized_from_current=initialize_from_current,
        )


class TelemetryInitializer:
    """Pipeline hook that resolves correlation ids for each outgoing record.

    The caller supplies the ambient context with every record; there is no
    process-wide current context.

    Args:
        resolver: Resolver to delegate to. Defaults to one built from settings.
    """

    def __init__(self, resolver: CorrelationResolver | None = None) -> None:  # noqa: D107
        self.resolver = resolver or CorrelationResolver()

    def initialize(self, record: TelemetryRecord, context: TraceContext | None) -> None:
        """Initialize a record's correlation ids from the ambient context.

        Args:
            record: Record about to be handed to the exporter.
            context: Ambient trace context, or None when there is none.
        """
        self.resolver.resolve(record, context, force_update=False)
