from tsc_audit.checks.aggregator import aggregate_constraints
from tsc_audit.checks.consistency import check_groups, classify

__all__ = ["aggregate_constraints", "check_groups", "classify"]
