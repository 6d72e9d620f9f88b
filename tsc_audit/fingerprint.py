"""Canonical serialization, digests and selector rendering for spread constraints."""

from __future__ import annotations

import hashlib
import json
from typing import Any

from tsc_audit.errors import InvalidSelectorError
from tsc_audit.models import LabelSelector, SelectorOperator, SelectorRequirement, TopologySpreadConstraint

NO_SELECTOR = "<none>"

_VALUED_OPERATORS = {SelectorOperator.IN.value, SelectorOperator.NOT_IN.value}
_VALUELESS_OPERATORS = {SelectorOperator.EXISTS.value, SelectorOperator.DOES_NOT_EXIST.value}


# =====================================================================
# Canonical form
# =====================================================================

def _canonical_requirement(req: SelectorRequirement) -> dict[str, Any]:
    data: dict[str, Any] = {"key": req.key, "operator": req.operator}
    values = sorted(set(req.values))
    if values:
        data["values"] = values
    return data


def canonical_selector(selector: LabelSelector) -> dict[str, Any]:
    data: dict[str, Any] = {}
    if selector.match_labels:
        data["matchLabels"] = dict(selector.match_labels)
    if selector.match_expressions:
        reqs = [_canonical_requirement(r) for r in selector.match_expressions]
        reqs.sort(key=lambda r: (r["key"], r["operator"], r.get("values", [])))
        # identical requirements repeated in one selector are one requirement
        deduped: list[dict[str, Any]] = []
        for r in reqs:
            if not deduped or deduped[-1] != r:
                deduped.append(r)
        data["matchExpressions"] = deduped
    return data


def canonical_constraint(tsc: TopologySpreadConstraint) -> dict[str, Any]:
    data: dict[str, Any] = {
        "maxSkew": tsc.max_skew,
        "topologyKey": tsc.topology_key,
        "whenUnsatisfiable": tsc.when_unsatisfiable,
    }
    # nil matches no pods, {} matches every pod
    if tsc.label_selector is not None:
        data["labelSelector"] = canonical_selector(tsc.label_selector)
    if tsc.min_domains is not None:
        data["minDomains"] = tsc.min_domains
    if tsc.node_affinity_policy:
        data["nodeAffinityPolicy"] = tsc.node_affinity_policy
    if tsc.node_taints_policy:
        data["nodeTaintsPolicy"] = tsc.node_taints_policy
    if tsc.match_label_keys:
        data["matchLabelKeys"] = sorted(set(tsc.match_label_keys))
    return data


def serialize(tsc: TopologySpreadConstraint) -> str:
    return json.dumps(canonical_constraint(tsc), sort_keys=True, separators=(",", ":"))


def fingerprint(tsc: TopologySpreadConstraint) -> str:
    return hashlib.sha1(serialize(tsc).encode("utf-8")).hexdigest()


# =====================================================================
# Selector rendering (label query syntax accepted by the API server)
# =====================================================================

def _render_requirement(key: str, operator: str, values: list[str]) -> str:
    if operator in _VALUED_OPERATORS:
        if not values:
            raise InvalidSelectorError(f"{key}: operator {operator} requires at least one value")
        word = "in" if operator == SelectorOperator.IN.value else "notin"
        return f"{key} {word} ({','.join(values)})"
    if operator in _VALUELESS_OPERATORS:
        if values:
            raise InvalidSelectorError(f"{key}: operator {operator} takes no values")
        return key if operator == SelectorOperator.EXISTS.value else f"!{key}"
    raise InvalidSelectorError(f"{key}: {operator!r} is not a valid label selector operator")


def render_selector(selector: LabelSelector | None) -> str:
    """Render a selector to its canonical query string.

    Requirements are ordered by key and values are deduplicated and sorted, so
    two selectors that differ only in declaration order render identically.
    A missing selector or one without requirements renders as ``<none>``; a
    malformed one raises InvalidSelectorError.
    """
    if selector is None or selector.is_empty:
        return NO_SELECTOR

    reqs: list[tuple[str, str, list[str]]] = []
    for key, value in selector.match_labels:
        reqs.append((key, "=", [value]))
    for r in selector.match_expressions:
        reqs.append((r.key, r.operator, sorted(set(r.values))))
    reqs.sort()

    parts = []
    for key, operator, values in reqs:
        if operator == "=":
            parts.append(f"{key}={values[0]}")
        else:
            parts.append(_render_requirement(key, operator, values))
    # duplicated requirements collapse, order is already canonical
    return ",".join(dict.fromkeys(parts))


def describe_selector(selector: LabelSelector | None) -> str:
    try:
        return render_selector(selector)
    except InvalidSelectorError:
        return "<error>"
