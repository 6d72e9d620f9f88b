"""Value types shared by the aggregator, the checker and the reporters."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


# =====================================================================
# Constraint values
# =====================================================================

class WhenUnsatisfiable(str, Enum):
    DO_NOT_SCHEDULE = "DoNotSchedule"
    SCHEDULE_ANYWAY = "ScheduleAnyway"


class SelectorOperator(str, Enum):
    IN = "In"
    NOT_IN = "NotIn"
    EXISTS = "Exists"
    DOES_NOT_EXIST = "DoesNotExist"


@dataclass(frozen=True)
class SelectorRequirement:
    key: str
    operator: str
    values: tuple[str, ...] = ()


@dataclass(frozen=True)
class LabelSelector:
    match_labels: tuple[tuple[str, str], ...] = ()
    match_expressions: tuple[SelectorRequirement, ...] = ()

    @classmethod
    def build(cls, match_labels: dict[str, str] | None = None,
              match_expressions: list[SelectorRequirement] | None = None) -> LabelSelector:
        return cls(
            match_labels=tuple(sorted((match_labels or {}).items())),
            match_expressions=tuple(match_expressions or ()),
        )

    @property
    def is_empty(self) -> bool:
        return not self.match_labels and not self.match_expressions


@dataclass(frozen=True)
class TopologySpreadConstraint:
    max_skew: int
    topology_key: str
    when_unsatisfiable: str
    label_selector: LabelSelector | None = None
    min_domains: int | None = None
    node_affinity_policy: str | None = None
    node_taints_policy: str | None = None
    match_label_keys: tuple[str, ...] = ()

    @property
    def is_hard(self) -> bool:
        return self.when_unsatisfiable == WhenUnsatisfiable.DO_NOT_SCHEDULE.value


@dataclass(frozen=True)
class PodSpread:
    """A pod as the aggregator sees it: its name and declared spread constraints."""

    name: str
    constraints: tuple[TopologySpreadConstraint, ...] = ()


# =====================================================================
# Grouping and findings
# =====================================================================

@dataclass
class Group:
    fingerprint: str
    constraint: TopologySpreadConstraint
    expected: set[str] = field(default_factory=set)
    actual: set[str] | None = None


class Classification(str, Enum):
    CONSISTENT = "Consistent"
    DRIFTED = "Drifted"
    CONCENTRATED = "Concentrated"
    QUERY_FAILED = "QueryFailed"


class Severity(str, Enum):
    WARNING = "warning"
    INFO = "info"


SEVERITY_BY_CLASSIFICATION = {
    Classification.DRIFTED: Severity.WARNING,
    Classification.QUERY_FAILED: Severity.WARNING,
    Classification.CONCENTRATED: Severity.INFO,
}


@dataclass
class Finding:
    namespace: str
    classification: Classification
    fingerprint: str
    topology_key: str
    max_skew: int
    when_unsatisfiable: str
    selector: str
    expected: list[str] = field(default_factory=list)
    actual: list[str] = field(default_factory=list)
    error: str = ""

    @property
    def severity(self) -> Severity:
        return SEVERITY_BY_CLASSIFICATION[self.classification]

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "namespace": self.namespace,
            "classification": self.classification.value,
            "severity": self.severity.value,
            "fingerprint": self.fingerprint,
            "topology_key": self.topology_key,
            "max_skew": self.max_skew,
            "when_unsatisfiable": self.when_unsatisfiable,
            "selector": self.selector,
        }
        if self.classification == Classification.DRIFTED:
            data["expected_pods"] = self.expected
            data["actual_pods"] = self.actual
        elif self.classification == Classification.CONCENTRATED:
            data["pods"] = self.actual
        elif self.classification == Classification.QUERY_FAILED:
            data["expected_pods"] = self.expected
            data["error"] = self.error
        return data


@dataclass
class NamespaceReport:
    namespace: str
    pod_count: int = 0
    group_count: int = 0
    findings: list[Finding] = field(default_factory=list)

    def count(self, classification: Classification) -> int:
        return sum(1 for f in self.findings if f.classification == classification)
