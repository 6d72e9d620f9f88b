"""Command-line entry point: ``tsc-audit``."""

from __future__ import annotations

import argparse
import logging
import os
import sys

from tsc_audit import __version__
from tsc_audit.audit import audit_cluster
from tsc_audit.collector import load_cluster
from tsc_audit.errors import ClusterAccessError, PolicyError
from tsc_audit.policy import CONCENTRATION_THRESHOLD, HOST_TOPOLOGY_KEYS, AuditPolicy
from tsc_audit.report import render

logger = logging.getLogger("tsc_audit.cli")


def default_kubeconfig() -> str | None:
    home = os.path.expanduser("~")
    if not home or home == "~":
        return None
    return os.path.join(home, ".kube", "config")


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tsc-audit",
        description="Report pods whose topology spread constraints have drifted or concentrated",
    )
    parser.add_argument("--version", action="version", version=f"tsc-audit {__version__}")

    kubeconfig = default_kubeconfig()
    if kubeconfig:
        parser.add_argument("--kubeconfig", default=kubeconfig,
                            help="(optional) absolute path to the kubeconfig file (default: %(default)s)")
    else:
        parser.add_argument("--kubeconfig", required=True, help="absolute path to the kubeconfig file")
    parser.add_argument("--context", help="kubeconfig context to use (default: current context)")
    parser.add_argument("-n", "--namespace", help="audit a single namespace instead of all of them")

    policy = parser.add_argument_group("policy")
    policy.add_argument("--threshold", type=int, default=CONCENTRATION_THRESHOLD,
                        help="report DoNotSchedule constraints matching more pods than this (default: %(default)s)")
    policy.add_argument("--no-drift", dest="check_drift", action="store_false",
                        help="do not compare declaring pods with selector-matched pods")
    policy.add_argument("--no-concentration", dest="check_concentration", action="store_false",
                        help="do not report concentrated hard constraints")
    policy.add_argument("--exclude-schedule-anyway", dest="include_schedule_anyway", action="store_false",
                        help="ignore ScheduleAnyway constraints")
    policy.add_argument("--exclude-host-topology", dest="include_host_topology", action="store_false",
                        help="ignore constraints on host-level topology keys")
    policy.add_argument("--host-topology-key", dest="host_topology_keys", action="append",
                        help=f"topology key treated as host-level (repeatable, default: {', '.join(HOST_TOPOLOGY_KEYS)})")

    parser.add_argument("--format", choices=["text", "json"], default="text",
                        help="output format (default: text)")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging on stderr")
    return parser


def build_policy(args: argparse.Namespace) -> AuditPolicy:
    return AuditPolicy(
        concentration_threshold=args.threshold,
        check_drift=args.check_drift,
        check_concentration=args.check_concentration,
        include_schedule_anyway=args.include_schedule_anyway,
        include_host_topology=args.include_host_topology,
        host_topology_keys=tuple(args.host_topology_keys or HOST_TOPOLOGY_KEYS),
    )


def main(argv: list[str] | None = None) -> int:
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        policy = build_policy(args)
    except PolicyError as e:
        parser.print_usage(sys.stderr)
        print(f"tsc-audit: error: {e}", file=sys.stderr)
        return 2

    try:
        cluster = load_cluster(args.kubeconfig, args.context)
        for report in audit_cluster(cluster, policy, namespace=args.namespace):
            sys.stdout.write(render(report.findings, args.format))
            sys.stdout.flush()
    except ClusterAccessError as e:
        logger.error("%s", e)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
