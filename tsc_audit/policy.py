"""Audit policy: concentration threshold, enabled checks and constraint filters."""

from __future__ import annotations

from dataclasses import dataclass

from tsc_audit.errors import PolicyError
from tsc_audit.models import TopologySpreadConstraint

CONCENTRATION_THRESHOLD = 5
HOST_TOPOLOGY_KEYS = ("kubernetes.io/hostname",)


@dataclass(frozen=True)
class AuditPolicy:
    """Which constraints are aggregated and which classifications are reported."""

    concentration_threshold: int = CONCENTRATION_THRESHOLD
    check_drift: bool = True
    check_concentration: bool = True
    include_schedule_anyway: bool = True
    include_host_topology: bool = True
    host_topology_keys: tuple[str, ...] = HOST_TOPOLOGY_KEYS

    def __post_init__(self) -> None:
        if isinstance(self.concentration_threshold, bool) or not isinstance(self.concentration_threshold, int):
            raise PolicyError(f"concentration threshold must be an integer, got {self.concentration_threshold!r}")
        if self.concentration_threshold < 0:
            raise PolicyError(f"concentration threshold must be >= 0, got {self.concentration_threshold}")
        if not (self.check_drift or self.check_concentration):
            raise PolicyError("at least one of the drift and concentration checks must be enabled")

    def admits(self, tsc: TopologySpreadConstraint) -> bool:
        if not self.include_schedule_anyway and not tsc.is_hard:
            return False
        if not self.include_host_topology and tsc.topology_key in self.host_topology_keys:
            return False
        return True

    def is_concentrated(self, tsc: TopologySpreadConstraint, matched: int) -> bool:
        return self.check_concentration and tsc.is_hard and matched > self.concentration_threshold
