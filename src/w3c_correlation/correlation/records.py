"""Pydantic models for telemetry records that carry correlation identifiers.

Record kinds form a closed set discriminated by ``kind``:
- Operation records (request, dependency) anchor a span and carry their own id
- Child records (trace, event, exception) attach to the current span

Only correlation fields are modelled here; business fields (duration,
success, messages) belong to the exporting pipeline.
"""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, TypeAdapter


class OperationContext(BaseModel):
    """Operation block shared by every record kind."""

    id: str | None = Field(None, description="Operation (trace) id")
    parent_id: str | None = Field(None, description="Legacy-form id of the parent span")


class _RecordBase(BaseModel):
    operation: OperationContext = Field(
        default_factory=OperationContext, description="Operation correlation block"
    )
    properties: dict[str, str] = Field(default_factory=dict, description="Custom properties")
    sdk_version: str = Field(
        default="", description="Version tag of the instrumentation that produced the record"
    )


class RequestRecord(_RecordBase):
    """Incoming request handled by this process."""

    kind: Literal["request"] = "request"
    id: str | None = Field(None, description="Legacy-form request id")


class DependencyRecord(_RecordBase):
    """Outgoing call made by this process (HTTP, SQL, queue, ...)."""

    kind: Literal["dependency"] = "dependency"
    id: str | None = Field(None, description="Legacy-form dependency id")
    dependency_type: str | None = Field(None, description="Dependency type (e.g. 'SQL', 'Http')")


class TraceRecord(_RecordBase):
    """Log line attached to the current span."""

    kind: Literal["trace"] = "trace"


class EventRecord(_RecordBase):
    """Custom event attached to the current span."""

    kind: Literal["event"] = "event"


class ExceptionRecord(_RecordBase):
    """Exception attached to the current span."""

    kind: Literal["exception"] = "exception"


OperationRecord = RequestRecord | DependencyRecord
ChildRecord = TraceRecord | EventRecord | ExceptionRecord

TelemetryRecord = Annotated[
    RequestRecord | DependencyRecord | TraceRecord | EventRecord | ExceptionRecord,
    Field(discriminator="kind"),
]

_record_adapter: TypeAdapter[TelemetryRecord] = TypeAdapter(TelemetryRecord)


def parse_record(data: dict[str, Any]) -> TelemetryRecord:
    """Validate a raw mapping into the matching record model.

    Args:
        data: Mapping with a ``kind`` key.

    Returns:
        The record model selected by ``kind``.

    Raises:
        pydantic.ValidationError: If ``kind`` is unknown or fields are invalid.
    """
    return _record_adapter.validate_python(data)
