from __future__ import annotations

import logging
from collections.abc import Iterable

from tsc_audit.fingerprint import fingerprint
from tsc_audit.models import Group, PodSpread
from tsc_audit.policy import AuditPolicy

logger = logging.getLogger("tsc_audit.aggregator")


def aggregate_constraints(pods: Iterable[PodSpread], policy: AuditPolicy | None = None) -> dict[str, Group]:
    """Group one namespace's pods by the fingerprint of each spread constraint they declare.

    The first constraint seen for a fingerprint is kept as the group's template;
    later pods only add their names to ``expected``.
    """
    policy = policy or AuditPolicy()
    groups: dict[str, Group] = {}
    skipped = 0

    for pod in pods:
        for tsc in pod.constraints:
            if not policy.admits(tsc):
                skipped += 1
                continue
            key = fingerprint(tsc)
            group = groups.get(key)
            if group is None:
                group = groups[key] = Group(fingerprint=key, constraint=tsc)
            group.expected.add(pod.name)

    if skipped:
        logger.debug("skipped %d constraints excluded by policy", skipped)
    return groups
