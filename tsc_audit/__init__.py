"""Audit pod placement against declared topology spread constraints."""

from tsc_audit.audit import audit_cluster, audit_namespace, summarize
from tsc_audit.errors import ClusterAccessError, InvalidSelectorError, PolicyError, SelectorQueryError, TscAuditError
from tsc_audit.fingerprint import fingerprint, render_selector
from tsc_audit.models import Classification, Finding, NamespaceReport, TopologySpreadConstraint
from tsc_audit.policy import AuditPolicy

__version__ = "0.1.0"

__all__ = [
    "AuditPolicy",
    "Classification",
    "ClusterAccessError",
    "Finding",
    "InvalidSelectorError",
    "NamespaceReport",
    "PolicyError",
    "SelectorQueryError",
    "TopologySpreadConstraint",
    "TscAuditError",
    "audit_cluster",
    "audit_namespace",
    "fingerprint",
    "render_selector",
    "summarize",
]
