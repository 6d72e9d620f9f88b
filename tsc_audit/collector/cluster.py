"""Read-only access to the cluster through the Kubernetes Python client."""

from __future__ import annotations

import logging
import os
from typing import Any

import urllib3
from kubernetes import client, config
from kubernetes.client.exceptions import ApiException
from kubernetes.config.kube_config import KUBE_CONFIG_DEFAULT_LOCATION

from tsc_audit.errors import ClusterAccessError, InvalidSelectorError, SelectorQueryError
from tsc_audit.models import LabelSelector, PodSpread, SelectorRequirement, TopologySpreadConstraint

logger = logging.getLogger("tsc_audit.collector")

_TRANSPORT_ERRORS = (ApiException, urllib3.exceptions.HTTPError)


# =====================================================================
# Model conversion
# =====================================================================

def convert_selector(selector: Any) -> LabelSelector | None:
    if selector is None:
        return None
    return LabelSelector.build(
        match_labels=selector.match_labels,
        match_expressions=[
            SelectorRequirement(key=e.key, operator=e.operator, values=tuple(e.values or ()))
            for e in selector.match_expressions or []
        ],
    )


def convert_constraint(tsc: Any) -> TopologySpreadConstraint:
    return TopologySpreadConstraint(
        max_skew=tsc.max_skew,
        topology_key=tsc.topology_key,
        when_unsatisfiable=tsc.when_unsatisfiable,
        label_selector=convert_selector(tsc.label_selector),
        min_domains=getattr(tsc, "min_domains", None),
        node_affinity_policy=getattr(tsc, "node_affinity_policy", None),
        node_taints_policy=getattr(tsc, "node_taints_policy", None),
        match_label_keys=tuple(getattr(tsc, "match_label_keys", None) or ()),
    )


def convert_pod(pod: Any) -> PodSpread:
    spec = pod.spec
    constraints = spec.topology_spread_constraints if spec else None
    return PodSpread(
        name=pod.metadata.name,
        constraints=tuple(convert_constraint(t) for t in constraints or []),
    )


# =====================================================================
# Cluster client
# =====================================================================

class ClusterClient:
    """The three read-only calls the audit needs, with errors mapped to audit errors."""

    def __init__(self, api_client: client.ApiClient | None = None):
        self.core = client.CoreV1Api(api_client)

    def list_namespaces(self) -> list[str]:
        try:
            result = self.core.list_namespace()
        except _TRANSPORT_ERRORS as exc:
            raise ClusterAccessError(f"failed to list namespaces: {_describe(exc)}") from exc
        names = [ns.metadata.name for ns in result.items]
        logger.debug("listed %d namespaces", len(names))
        return names

    def list_pods(self, namespace: str) -> list[PodSpread]:
        try:
            result = self.core.list_namespaced_pod(namespace)
        except _TRANSPORT_ERRORS as exc:
            raise ClusterAccessError(f"failed to list pods in namespace {namespace}: {_describe(exc)}") from exc
        pods = [convert_pod(p) for p in result.items]
        logger.debug("listed %d pods in %s", len(pods), namespace)
        return pods

    def list_pods_by_selector(self, namespace: str, selector: str) -> list[str]:
        try:
            result = self.core.list_namespaced_pod(namespace, label_selector=selector)
        except ApiException as exc:
            if exc.status == 400:
                raise InvalidSelectorError(_describe(exc)) from exc
            raise SelectorQueryError(_describe(exc)) from exc
        except urllib3.exceptions.HTTPError as exc:
            raise SelectorQueryError(_describe(exc)) from exc
        names = [p.metadata.name for p in result.items]
        logger.debug("selector %r matched %d pods in %s", selector, len(names), namespace)
        return names


def _describe(exc: Exception) -> str:
    if isinstance(exc, ApiException):
        return f"({exc.status}) {exc.reason}"
    return str(exc)


def _kubeconfig_exists(kubeconfig: str) -> bool:
    return any(os.path.exists(os.path.expanduser(p)) for p in kubeconfig.split(os.pathsep) if p)


def load_cluster(kubeconfig: str | None = None, context: str | None = None) -> ClusterClient:
    """Build a client from a kubeconfig.

    In-cluster credentials are used only when no kubeconfig file exists; a
    kubeconfig that exists but cannot be loaded is reported as is.
    """
    path = kubeconfig or KUBE_CONFIG_DEFAULT_LOCATION
    if _kubeconfig_exists(path):
        try:
            config.load_kube_config(config_file=path, context=context)
        except Exception as exc:
            raise ClusterAccessError(f"failed to load kubeconfig {path}: {exc}") from exc
    else:
        logger.debug("kubeconfig %s not found, trying in-cluster config", path)
        try:
            config.load_incluster_config()
        except Exception as exc:
            raise ClusterAccessError(
                f"kubeconfig {path} not found and in-cluster config unavailable: {exc}"
            ) from exc
    return ClusterClient(client.ApiClient())
