"""W3C trace/span identifier generation and the legacy request-id encoding.

Identifiers follow the W3C Trace Context format:
- trace id: 16 random bytes rendered as 32 lowercase hex characters
- span id: 8 random bytes rendered as 16 lowercase hex characters

An all-zero identifier is invalid per W3C and is never returned.

The legacy hierarchical request id wraps a (trace id, span id) pair as
``|<trace-id>.<span-id>.`` so that consumers built before W3C support can
still group telemetry by root and look up exact request ids.
"""

import re
import secrets

TRACE_ID_HEX_LENGTH = 32
SPAN_ID_HEX_LENGTH = 16

# "|" + 32 + "." + 16 + "."
REQUEST_ID_LENGTH = 1 + TRACE_ID_HEX_LENGTH + 1 + SPAN_ID_HEX_LENGTH + 1

_TRACE_ID_RE = re.compile(r"^[0-9a-f]{32}$")
_SPAN_ID_RE = re.compile(r"^[0-9a-f]{16}$")


def _random_hex(num_bytes: int) -> str:
    """Return non-zero random bytes as lowercase hex."""
    while True:
        value = secrets.token_hex(num_bytes)
        if value.strip("0"):
            return value


def generate_trace_id() -> str:
    """Generate a random W3C trace id.

    Returns:
        32 lowercase hex characters (128 random bits), never all zeros.
    """
    return _random_hex(TRACE_ID_HEX_LENGTH // 2)


def generate_span_id() -> str:
    """Generate a random W3C span id.

    Returns:
        16 lowercase hex characters (64 random bits), never all zeros.
    """
    return _random_hex(SPAN_ID_HEX_LENGTH // 2)


def is_valid_trace_id(value: str | None) -> bool:
    """Check that value is a well-formed, non-zero W3C trace id."""
    if not value:
        return False
    return _TRACE_ID_RE.match(value) is not None and value.strip("0") != ""


def is_valid_span_id(value: str | None) -> bool:
    """Check that value is a well-formed, non-zero W3C span id."""
    if not value:
        return False
    return _SPAN_ID_RE.match(value) is not None and value.strip("0") != ""


def format_request_id(trace_id: str | None, span_id: str | None) -> str:
    """Encode a trace id and span id in the legacy hierarchical form.

    Args:
        trace_id: W3C trace id (the operation id).
        span_id: W3C span id. ``None`` renders as an empty segment.

    Returns:
        ``"|" + trace_id + "." + span_id + "."``

    Example:
        >>> format_request_id("4bf92f3577b34da6a3ce929d0e0e4736", "00f067aa0ba902b7")
        '|4bf92f3577b34da6a3ce929d0e0e4736.00f067aa0ba902b7.'
    """
    return f"|{trace_id or ''}.{span_id or ''}."


def is_valid_request_id(value: str | None, operation_id: str | None) -> bool:
    """Check whether value is a legacy encoding of operation_id.

    The shape is fixed: 51 characters, ``|`` first, ``.`` at offset 33 and the
    next ``.`` at offset 50, with the operation id starting at offset 1.
    Anything else, including ``None``, is reported as not valid.
    """
    if not value or not operation_id:
        return False
    return (
        len(value) == REQUEST_ID_LENGTH
        and value[0] == "|"
        and value[TRACE_ID_HEX_LENGTH + 1] == "."
        and value.find(".", TRACE_ID_HEX_LENGTH + 2) == REQUEST_ID_LENGTH - 1
        and value.find(operation_id, 1, TRACE_ID_HEX_LENGTH + 1) == 1
    )


def extract_root_id(legacy_id: str | None) -> str | None:
    """Return the root segment of a hierarchical request id.

    ``|abc.1.2.`` has root ``abc``; an id without a ``.`` is its own root.
    """
    if not legacy_id:
        return None
    start = 1 if legacy_id.startswith("|") else 0
    end = legacy_id.find(".", start)
    root = legacy_id[start:] if end < 0 else legacy_id[start:end]
    return root or None


def span_id_from_request_id(request_id: str | None) -> str | None:
    """Return the span id of a W3C-compatible legacy request id, if it is one."""
    if not request_id or len(request_id) != REQUEST_ID_LENGTH:
        return None
    trace_id = request_id[1 : TRACE_ID_HEX_LENGTH + 1]
    if not is_valid_request_id(request_id, trace_id):
        return None
    span_id = request_id[TRACE_ID_HEX_LENGTH + 2 : REQUEST_ID_LENGTH - 1]
    return span_id if is_valid_span_id(span_id) else None
