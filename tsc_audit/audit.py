"""Namespace-by-namespace audit driver."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any

from tsc_audit.checks import aggregate_constraints, check_groups
from tsc_audit.models import Classification, NamespaceReport
from tsc_audit.policy import AuditPolicy

logger = logging.getLogger("tsc_audit.audit")


def audit_namespace(cluster: Any, namespace: str, policy: AuditPolicy) -> NamespaceReport:
    pods = cluster.list_pods(namespace)
    groups = aggregate_constraints(pods, policy)
    logger.debug("%s: %d pods, %d constraint groups", namespace, len(pods), len(groups))
    return NamespaceReport(
        namespace=namespace,
        pod_count=len(pods),
        group_count=len(groups),
        findings=check_groups(cluster, namespace, groups, policy),
    )


def audit_cluster(cluster: Any, policy: AuditPolicy | None = None,
                  namespace: str | None = None) -> Iterator[NamespaceReport]:
    """Yield one report per namespace, in name order.

    ClusterAccessError from namespace or pod listing propagates out of the
    generator; reports already yielded stay valid, nothing is yielded for the
    failing namespace or any after it.
    """
    policy = policy or AuditPolicy()
    namespaces = [namespace] if namespace else sorted(cluster.list_namespaces())
    for ns in namespaces:
        yield audit_namespace(cluster, ns, policy)


def summarize(reports: list[NamespaceReport]) -> dict[str, Any]:
    findings = [f for r in reports for f in r.findings]
    return {
        "namespace_count": len(reports),
        "pod_count": sum(r.pod_count for r in reports),
        "group_count": sum(r.group_count for r in reports),
        "total_findings": len(findings),
        "drifted_count": sum(r.count(Classification.DRIFTED) for r in reports),
        "concentrated_count": sum(r.count(Classification.CONCENTRATED) for r in reports),
        "query_failed_count": sum(r.count(Classification.QUERY_FAILED) for r in reports),
    }
