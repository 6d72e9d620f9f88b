"""Tests for canonical serialization, fingerprints and selector rendering."""

import pytest

from tests.conftest import make_tsc
from tsc_audit.errors import InvalidSelectorError
from tsc_audit.fingerprint import NO_SELECTOR, describe_selector, fingerprint, render_selector, serialize
from tsc_audit.models import LabelSelector, SelectorRequirement, TopologySpreadConstraint


class TestFingerprint:
    def test_identical_constraints_share_fingerprint(self):
        assert fingerprint(make_tsc()) == fingerprint(make_tsc())

    def test_is_sha1_hex(self):
        fp = fingerprint(make_tsc())
        assert len(fp) == 40
        int(fp, 16)

    @pytest.mark.parametrize("changed", [
        {"max_skew": 2},
        {"topology_key": "kubernetes.io/hostname"},
        {"when": "ScheduleAnyway"},
        {"labels": {"app": "bar"}},
        {"min_domains": 3},
        {"node_taints_policy": "Honor"},
    ])
    def test_any_field_change_changes_fingerprint(self, changed):
        assert fingerprint(make_tsc(**changed)) != fingerprint(make_tsc())

    def test_match_labels_order_does_not_matter(self):
        a = make_tsc(labels={"app": "foo", "tier": "web"})
        b = make_tsc(labels={"tier": "web", "app": "foo"})
        assert fingerprint(a) == fingerprint(b)

    def test_match_expressions_order_does_not_matter(self):
        e1 = SelectorRequirement("app", "In", ("foo", "bar"))
        e2 = SelectorRequirement("tier", "Exists")
        a = make_tsc(expressions=[e1, e2])
        b = make_tsc(expressions=[e2, SelectorRequirement("app", "In", ("bar", "foo"))])
        assert fingerprint(a) == fingerprint(b)

    def test_duplicate_values_are_ignored(self):
        a = make_tsc(expressions=[SelectorRequirement("app", "In", ("foo", "foo"))])
        b = make_tsc(expressions=[SelectorRequirement("app", "In", ("foo",))])
        assert fingerprint(a) == fingerprint(b)

    def test_match_label_keys_order_does_not_matter(self):
        a = make_tsc(match_label_keys=("pod-template-hash", "app"))
        b = make_tsc(match_label_keys=("app", "pod-template-hash"))
        assert fingerprint(a) == fingerprint(b)

    def test_nil_selector_differs_from_empty_selector(self):
        nil = TopologySpreadConstraint(max_skew=1, topology_key="zone", when_unsatisfiable="DoNotSchedule")
        empty = TopologySpreadConstraint(max_skew=1, topology_key="zone", when_unsatisfiable="DoNotSchedule",
                                         label_selector=LabelSelector())
        assert fingerprint(nil) != fingerprint(empty)
        assert '"labelSelector"' not in serialize(nil)
        assert '"labelSelector":{}' in serialize(empty)

    def test_serialization_is_compact_and_sorted(self):
        assert serialize(make_tsc()) == (
            '{"labelSelector":{"matchLabels":{"app":"foo"}},"maxSkew":1,'
            '"topologyKey":"zone","whenUnsatisfiable":"DoNotSchedule"}'
        )


class TestRenderSelector:
    def test_match_labels(self):
        assert render_selector(LabelSelector.build({"tier": "web", "app": "foo"})) == "app=foo,tier=web"

    def test_expressions(self):
        selector = LabelSelector.build(match_expressions=[
            SelectorRequirement("env", "NotIn", ("prod", "dev")),
            SelectorRequirement("app", "In", ("b", "a")),
            SelectorRequirement("canary", "DoesNotExist"),
            SelectorRequirement("bravo", "Exists"),
        ])
        assert render_selector(selector) == "app in (a,b),bravo,!canary,env notin (dev,prod)"

    def test_labels_and_expressions_sorted_by_key(self):
        selector = LabelSelector.build(
            {"zeta": "1"},
            [SelectorRequirement("alpha", "Exists")],
        )
        assert render_selector(selector) == "alpha,zeta=1"

    def test_empty_selector(self):
        assert render_selector(LabelSelector()) == NO_SELECTOR

    @pytest.mark.parametrize("req", [
        SelectorRequirement("app", "Matches", ("x",)),
        SelectorRequirement("app", "In", ()),
        SelectorRequirement("app", "Exists", ("x",)),
    ])
    def test_malformed_selector_raises(self, req):
        selector = LabelSelector.build(match_expressions=[req])
        with pytest.raises(InvalidSelectorError):
            render_selector(selector)
        assert describe_selector(selector) == "<error>"
