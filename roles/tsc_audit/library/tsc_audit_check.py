#!/usr/bin/python
# -*- coding: utf-8 -*-
# SPDX-License-Identifier: MIT

"""Ansible module auditing pod placement against topology spread constraints.

Connects to the K8s API from the Ansible control node, groups every pod's
topology spread constraints by content, re-resolves each constraint's label
selector and reports drifted and concentrated constraints.

All API calls are read-only (list). Zero writes to the cluster.
"""

from __future__ import annotations

DOCUMENTATION = r"""
---
module: tsc_audit_check
short_description: Audit topology spread constraints against live pod placement
version_added: "0.1.0"
description:
  - Groups the topology spread constraints declared by pods into identical
    rules and compares the pods declaring each rule with the pods its label
    selector currently matches.
  - Reports drifted constraints (the two pod sets differ) and concentrated
    hard constraints (DoNotSchedule matching more pods than a threshold).
  - Completely read-only. All API calls are list operations.
options:
  kubeconfig:
    description: Path to the kubeconfig file.
    type: path
    default: ~/.kube/config
  context:
    description: Kubeconfig context to use. Defaults to current context.
    type: str
  namespace:
    description: Limit the audit to a single namespace. Omit for all namespaces.
    type: str
  concentration_threshold:
    description: DoNotSchedule constraints matching more pods than this are reported.
    type: int
    default: 5
  checks:
    description: Classifications to report.
    type: list
    elements: str
    default: [drift, concentration]
  include_schedule_anyway:
    description: Audit ScheduleAnyway constraints as well as DoNotSchedule ones.
    type: bool
    default: true
  include_host_topology:
    description: Audit constraints whose topology key is host-level.
    type: bool
    default: true
  host_topology_keys:
    description: Topology keys treated as host-level.
    type: list
    elements: str
    default: [kubernetes.io/hostname]
requirements:
  - tsc-audit (Python package, installs the kubernetes client)
author:
  - tsc-audit contributors
"""

EXAMPLES = r"""
- name: Audit every namespace of the current context
  tsc_audit_check:
  register: tsc

- name: Only look for concentrated hard constraints in one namespace
  tsc_audit_check:
    namespace: my-app
    checks:
      - concentration
    concentration_threshold: 10
  register: tsc

- name: Fail playbook if any constraint drifted
  tsc_audit_check:
  register: tsc
  failed_when: tsc.summary.drifted_count > 0
"""

RETURN = r"""
findings:
  description: Drifted, concentrated and unresolvable constraints.
  type: list
  returned: always
  elements: dict
  sample:
    - namespace: "ns1"
      classification: "Drifted"
      severity: "warning"
      topology_key: "zone"
      max_skew: 1
      when_unsatisfiable: "DoNotSchedule"
      selector: "app=foo"
      expected_pods: ["p1", "p2", "p3"]
      actual_pods: ["p1", "p2"]
summary:
  description: Audit counts.
  type: dict
  returned: always
  sample:
    namespace_count: 5
    pod_count: 42
    group_count: 7
    total_findings: 2
    drifted_count: 1
    concentrated_count: 1
    query_failed_count: 0
report_text:
  description: Human-readable text report, one block per finding.
  type: str
  returned: always
"""

CHECK_CHOICES = ["drift", "concentration"]


# =====================================================================
# Ansible Module Entry Point
# =====================================================================

def run_module():
    from ansible.module_utils.basic import AnsibleModule

    module = AnsibleModule(
        argument_spec=dict(
            kubeconfig=dict(type="path", default="~/.kube/config"),
            context=dict(type="str", default=None),
            namespace=dict(type="str", default=None),
            concentration_threshold=dict(type="int", default=5),
            checks=dict(type="list", elements="str", default=CHECK_CHOICES, choices=CHECK_CHOICES),
            include_schedule_anyway=dict(type="bool", default=True),
            include_host_topology=dict(type="bool", default=True),
            host_topology_keys=dict(type="list", elements="str", default=["kubernetes.io/hostname"]),
        ),
        supports_check_mode=True,
    )

    # Verify the audit package (and with it the kubernetes client) is available
    try:
        from tsc_audit import AuditPolicy, ClusterAccessError, PolicyError, audit_cluster, summarize
        from tsc_audit.collector import load_cluster
        from tsc_audit.report import format_text
    except ImportError as e:
        module.fail_json(msg=f"The 'tsc-audit' Python package is required ({e}). Install with: pip install tsc-audit")
        return

    enabled_checks = set(module.params["checks"])
    try:
        policy = AuditPolicy(
            concentration_threshold=module.params["concentration_threshold"],
            check_drift="drift" in enabled_checks,
            check_concentration="concentration" in enabled_checks,
            include_schedule_anyway=module.params["include_schedule_anyway"],
            include_host_topology=module.params["include_host_topology"],
            host_topology_keys=tuple(module.params["host_topology_keys"]),
        )
    except PolicyError as e:
        module.fail_json(msg=f"Invalid audit policy: {e}")
        return

    try:
        cluster = load_cluster(module.params["kubeconfig"], module.params["context"])
        reports = list(audit_cluster(cluster, policy, namespace=module.params["namespace"]))
    except ClusterAccessError as e:
        module.fail_json(msg=f"Failed to audit Kubernetes cluster: {e}")
        return

    findings = [f for r in reports for f in r.findings]
    module.exit_json(
        changed=False,
        summary=summarize(reports),
        findings=[f.to_dict() for f in findings],
        report_text=format_text(findings),
    )


def main():
    run_module()


if __name__ == "__main__":
    main()
