"""Shared test fixtures."""

from __future__ import annotations

import pytest

from tsc_audit.errors import ClusterAccessError
from tsc_audit.models import LabelSelector, PodSpread, SelectorRequirement, TopologySpreadConstraint


def make_tsc(
    max_skew: int = 1,
    topology_key: str = "zone",
    when: str = "DoNotSchedule",
    labels: dict[str, str] | None = None,
    expressions: list[SelectorRequirement] | None = None,
    **extra,
) -> TopologySpreadConstraint:
    if labels is None and expressions is None:
        labels = {"app": "foo"}
    return TopologySpreadConstraint(
        max_skew=max_skew,
        topology_key=topology_key,
        when_unsatisfiable=when,
        label_selector=LabelSelector.build(labels, expressions),
        **extra,
    )


def make_pods(names: list[str], *constraints: TopologySpreadConstraint) -> list[PodSpread]:
    return [PodSpread(name=n, constraints=tuple(constraints)) for n in names]


class FakeCluster:
    """Stands in for ClusterClient without a real API server."""

    def __init__(
        self,
        pods: dict[str, list[PodSpread]] | None = None,
        matches: dict[tuple[str, str], list[str] | Exception] | None = None,
        failing_namespaces: set[str] | None = None,
        namespace_error: Exception | None = None,
    ):
        self.pods = pods or {}
        self.matches = matches or {}
        self.failing_namespaces = failing_namespaces or set()
        self.namespace_error = namespace_error
        self.selector_queries: list[tuple[str, str]] = []
        self.pod_listings: list[str] = []

    def list_namespaces(self) -> list[str]:
        if self.namespace_error is not None:
            raise self.namespace_error
        # deliberately unsorted
        return list(reversed(sorted(self.pods)))

    def list_pods(self, namespace: str) -> list[PodSpread]:
        self.pod_listings.append(namespace)
        if namespace in self.failing_namespaces:
            raise ClusterAccessError(f"failed to list pods in namespace {namespace}: (403) Forbidden")
        return list(self.pods.get(namespace, []))

    def list_pods_by_selector(self, namespace: str, selector: str) -> list[str]:
        self.selector_queries.append((namespace, selector))
        result = self.matches.get((namespace, selector), [])
        if isinstance(result, Exception):
            raise result
        return list(result)


@pytest.fixture
def fake_cluster():
    """Factory fixture for creating FakeCluster instances."""
    def _create(**kwargs) -> FakeCluster:
        return FakeCluster(**kwargs)
    return _create
