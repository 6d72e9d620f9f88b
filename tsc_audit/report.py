"""Human-readable and line-delimited JSON rendering of audit findings."""

from __future__ import annotations

import json

from tsc_audit.models import Classification, Finding


# =====================================================================
# Text and JSON rendering
# =====================================================================

def _names(names: list[str]) -> str:
    return "[" + " ".join(names) + "]"


def format_finding(f: Finding) -> list[str]:
    lines = [
        f"{f.classification.value} TSC",
        f"- {f.namespace}, {f.when_unsatisfiable}, topologyKey={f.topology_key}, "
        f"maxSkew={f.max_skew}, selector={f.selector}",
    ]
    if f.classification == Classification.DRIFTED:
        lines.append(f"- expectedPods={_names(f.expected)}")
        lines.append(f"- actualPods  ={_names(f.actual)}")
    elif f.classification == Classification.CONCENTRATED:
        lines.append(f"- pods={_names(f.actual)}")
    elif f.classification == Classification.QUERY_FAILED:
        lines.append(f"- expectedPods={_names(f.expected)}")
        lines.append(f"- error={f.error}")
    return lines


def format_text(findings: list[Finding]) -> str:
    """One block per finding, each followed by a blank line."""
    out: list[str] = []
    for f in findings:
        out.extend(format_finding(f))
        out.append("")
    return "\n".join(out) + ("\n" if out else "")


def format_json_lines(findings: list[Finding]) -> str:
    return "".join(json.dumps(f.to_dict(), sort_keys=True) + "\n" for f in findings)


def render(findings: list[Finding], fmt: str = "text") -> str:
    if fmt == "json":
        return format_json_lines(findings)
    return format_text(findings)
