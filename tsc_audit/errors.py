from __future__ import annotations


class TscAuditError(Exception):
    pass


class ClusterAccessError(TscAuditError):
    """Namespace or pod enumeration failed; the audit cannot continue."""


class SelectorQueryError(TscAuditError):
    """Listing pods through one constraint's selector failed."""


class InvalidSelectorError(SelectorQueryError):
    pass


class PolicyError(TscAuditError, ValueError):
    pass
