from __future__ import annotations

import logging
from typing import Any

from tsc_audit.errors import SelectorQueryError
from tsc_audit.fingerprint import NO_SELECTOR, describe_selector, render_selector
from tsc_audit.models import Classification, Finding, Group
from tsc_audit.policy import AuditPolicy

logger = logging.getLogger("tsc_audit.consistency")


def classify(group: Group, policy: AuditPolicy) -> Classification:
    if group.actual is None:
        return Classification.QUERY_FAILED
    if policy.check_drift and group.expected != group.actual:
        return Classification.DRIFTED
    if policy.is_concentrated(group.constraint, len(group.actual)):
        return Classification.CONCENTRATED
    return Classification.CONSISTENT


def _finding(namespace: str, group: Group, classification: Classification, selector: str,
             error: str = "") -> Finding:
    tsc = group.constraint
    return Finding(
        namespace=namespace,
        classification=classification,
        fingerprint=group.fingerprint,
        topology_key=tsc.topology_key,
        max_skew=tsc.max_skew,
        when_unsatisfiable=tsc.when_unsatisfiable,
        selector=selector,
        expected=sorted(group.expected),
        actual=sorted(group.actual or ()),
        error=error,
    )


def resolve_actual(cluster: Any, namespace: str, group: Group) -> str:
    """Fill ``group.actual`` from the cluster and return the rendered selector."""
    selector = render_selector(group.constraint.label_selector)
    if selector == NO_SELECTOR:
        raise SelectorQueryError("label selector has no requirements")
    group.actual = set(cluster.list_pods_by_selector(namespace, selector))
    return selector


def check_groups(cluster: Any, namespace: str, groups: dict[str, Group],
                 policy: AuditPolicy | None = None) -> list[Finding]:
    """Resolve and classify every group of one namespace, in fingerprint order."""
    policy = policy or AuditPolicy()
    findings: list[Finding] = []

    for key in sorted(groups):
        group = groups[key]
        try:
            selector = resolve_actual(cluster, namespace, group)
        except SelectorQueryError as exc:
            selector = describe_selector(group.constraint.label_selector)
            logger.warning("failed to list pods from tsc.labelSelector: ns=%s, selector=%s, %s",
                           namespace, selector, exc)
            findings.append(_finding(namespace, group, Classification.QUERY_FAILED, selector, error=str(exc)))
            continue

        classification = classify(group, policy)
        if classification == Classification.CONSISTENT:
            continue
        findings.append(_finding(namespace, group, classification, selector))

    return findings
