"""Exemption policy for instrumentation that stamps its own dependency ids.

The SQL diagnostic-source instrumentation sets a dependency's id directly
from its own diagnostic events, one level finer than the ambient span. For
those records the ambient span is the parent, not the record itself, so the
resolver must not overwrite the id.

The match is deliberately narrow: dependency type AND sdk version prefix.
Other instrumentation sources needing the same treatment should get their own
policy rather than a broader match here.
"""

from dataclasses import dataclass

from w3c_correlation.correlation.constants import (
    RDD_DIAGNOSTIC_SOURCE_PREFIX,
    SQL_DEPENDENCY_TYPE,
)
from w3c_correlation.correlation.records import DependencyRecord, TelemetryRecord


@dataclass(frozen=True)
class SqlExemptionPolicy:
    """Decides whether a record keeps its instrumentation-assigned id.

    Attributes:
        dependency_type: Dependency type that is eligible.
        sdk_version_prefix: Version tag prefix of the exempted instrumentation.
    """

    dependency_type: str = SQL_DEPENDENCY_TYPE
    sdk_version_prefix: str = RDD_DIAGNOSTIC_SOURCE_PREFIX

    def is_sql_dependency(self, record: TelemetryRecord) -> bool:
        """Check whether the record is a dependency of the configured SQL type."""
        return (
            isinstance(record, DependencyRecord)
            and record.dependency_type == self.dependency_type
        )

    def applies_to(self, record: TelemetryRecord) -> bool:
        """Check whether the record is exempt from span-anchoring.

        Args:
            record: Record being resolved.

        Returns:
            True only for dependency records of the configured type whose
            sdk version starts with the configured prefix (case-sensitive).
        """
        return self.is_sql_dependency(record) and record.sdk_version.startswith(
            self.sdk_version_prefix
        )
