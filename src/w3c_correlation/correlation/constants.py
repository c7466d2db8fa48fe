"""Tag names and property keys shared by the correlation components.

Tag names are the keys the ambient tracing context exposes. Property keys are
what downstream exporters read off resolved records; they are part of the
output contract and must not change.
"""

# Ambient context tags
TRACE_ID_TAG = "w3c_traceId"
SPAN_ID_TAG = "w3c_spanId"
PARENT_SPAN_ID_TAG = "w3c_parentSpanId"
TRACESTATE_TAG = "tracestate"

# Record properties
TRACESTATE_PROPERTY = "tracestate"
LEGACY_ROOT_ID_PROPERTY = "legacyRootId"
LEGACY_REQUEST_ID_PROPERTY = "legacyRequestId"

# Instrumentation that stamps SQL dependency ids from its own diagnostic events
SQL_DEPENDENCY_TYPE = "SQL"
RDD_DIAGNOSTIC_SOURCE_PREFIX = "rdddsc"
