"""
Tests for allow set resolution.
"""

import pytest

from attrlimit.aliases import NameAliasTable
from attrlimit.core import RequestContext
from attrlimit.policy import (
    AllowSetResolver, ConditionalReleaseRule, ExactSet, UNRESTRICTED,
    expand_metadata_policy, intersect_names_only, parse_static_policy
)


@pytest.fixture
def resolver():
    return AllowSetResolver()


@pytest.fixture
def ctx():
    return RequestContext(relying_party="sp1")


def policy(raw):
    return parse_static_policy(raw)[0]


class TestExpandMetadataPolicy:
    """Test alias expansion of metadata policies"""

    def test_names_without_alias_are_kept(self):
        assert expand_metadata_policy(["cn", "mail"], NameAliasTable()) == ["cn", "mail"]

    def test_single_alias_replaced(self):
        table = NameAliasTable({"urn:oid:2.5.4.3": "cn"})
        result = expand_metadata_policy(["urn:oid:2.5.4.3", "mail"], table)
        assert result == ["mail", "cn"]

    def test_single_alias_retained_in_duplicate_mode(self):
        table = NameAliasTable({"urn:oid:2.5.4.3": "cn"}, duplicate=True)
        result = expand_metadata_policy(["urn:oid:2.5.4.3", "mail"], table)
        assert result == ["urn:oid:2.5.4.3", "mail", "cn"]

    def test_multiple_targets_appended_in_order(self):
        table = NameAliasTable({"oid": ["a", "b"]})
        assert expand_metadata_policy(["oid", "cn"], table) == ["cn", "a", "b"]

    def test_alias_listing_itself_is_retained(self):
        table = NameAliasTable({"mail": ["mail", "email"]})
        assert expand_metadata_policy(["mail"], table) == ["mail", "mail", "email"]

    def test_canonical_names_are_not_expanded_again(self):
        table = NameAliasTable({"a": "b", "b": "c"})
        assert expand_metadata_policy(["a"], table) == ["b"]

    def test_multiple_targets_in_duplicate_mode(self):
        table = NameAliasTable({"oid": ["a", "b"]}, duplicate=True)
        assert expand_metadata_policy(["oid"], table) == ["oid", "a", "b"]


class TestResolve:
    """Test allowed set computation"""

    def test_no_policy_is_unrestricted(self, resolver, ctx):
        allowed = resolver.resolve(policy([]), [], NameAliasTable(), None, ctx, {})
        assert allowed is UNRESTRICTED
        assert allowed.unrestricted

    def test_static_policy_only_keeps_constraints(self, resolver, ctx):
        allowed = resolver.resolve(
            policy(["cn", {"mail": ["x@y.com"]}]), [], NameAliasTable(), None, ctx, {}
        )
        assert allowed.names == ("cn",)
        assert allowed.constraints == {"mail": ExactSet(("x@y.com",))}

    def test_metadata_policy_only(self, resolver, ctx):
        allowed = resolver.resolve(policy([]), ["cn", "sn"], NameAliasTable(), None, ctx, {})
        assert allowed.names == ("cn", "sn")
        assert allowed.constraints == {}

    def test_both_policies_intersect_by_name(self, resolver, ctx):
        allowed = resolver.resolve(
            policy(["sn", "cn", "uid"]), ["cn", "sn"], NameAliasTable(), None, ctx, {}
        )
        assert allowed.names == ("sn", "cn")

    def test_both_policies_drop_value_constraints(self, resolver, ctx):
        allowed = resolver.resolve(
            policy([{"mail": ["x@y.com"]}]), ["mail", "cn"], NameAliasTable(), None, ctx, {}
        )
        assert allowed.names == ("mail",)
        assert allowed.constraints == {}

    def test_metadata_aliases_expanded_before_intersection(self, resolver, ctx):
        table = NameAliasTable({"urn:oid:2.5.4.3": "cn"})
        allowed = resolver.resolve(
            policy(["cn", "mail"]), ["urn:oid:2.5.4.3"], table, None, ctx, {}
        )
        assert allowed.names == ("cn",)

    def test_static_policy_names_are_not_aliased(self, resolver, ctx):
        table = NameAliasTable({"urn:oid:2.5.4.3": "cn"})
        allowed = resolver.resolve(
            policy(["urn:oid:2.5.4.3"]), [], table, None, ctx, {}
        )
        assert allowed.names == ("urn:oid:2.5.4.3",)


class TestConditionalRelease:
    """Test the conditional release rule"""

    rule = ConditionalReleaseRule.create(["sp1"], ["idp1"], "eduPersonTargetedID")

    def test_rule_widens_static_policy(self, resolver, ctx):
        allowed = resolver.resolve(
            policy(["cn"]), [], NameAliasTable(), self.rule, ctx, {"idpEntityId": ["idp1"]}
        )
        assert allowed.names == ("cn", "eduPersonTargetedID")

    def test_rule_ignored_for_other_relying_party(self, resolver):
        allowed = resolver.resolve(
            policy(["cn"]), [], NameAliasTable(), self.rule,
            RequestContext(relying_party="sp2"), {"idpEntityId": ["idp1"]}
        )
        assert allowed.names == ("cn",)

    def test_rule_ignored_for_other_identity_source(self, resolver, ctx):
        allowed = resolver.resolve(
            policy(["cn"]), [], NameAliasTable(), self.rule, ctx, {"idpEntityId": ["idp2"]}
        )
        assert allowed.names == ("cn",)

    def test_rule_needs_idp_entity_id_attribute(self, resolver, ctx):
        allowed = resolver.resolve(policy(["cn"]), [], NameAliasTable(), self.rule, ctx, {})
        assert allowed.names == ("cn",)

    def test_rule_does_not_persist(self, resolver, ctx):
        static = policy(["cn"])
        resolver.resolve(static, [], NameAliasTable(), self.rule, ctx, {"idpEntityId": ["idp1"]})
        assert static.names() == ["cn"]

    def test_rule_name_intersected_with_metadata(self, resolver, ctx):
        allowed = resolver.resolve(
            policy(["cn"]), ["cn"], NameAliasTable(), self.rule, ctx, {"idpEntityId": ["idp1"]}
        )
        assert allowed.names == ("cn",)

    def test_rule_with_bare_string_idp_entity_id(self, resolver, ctx):
        allowed = resolver.resolve(
            policy(["cn"]), [], NameAliasTable(), self.rule, ctx, {"idpEntityId": "idp1"}
        )
        assert allowed.names == ("cn", "eduPersonTargetedID")

    def test_applies_with_bare_string(self):
        assert self.rule.applies("sp1", "idp1")
        assert not self.rule.applies("sp1", "idp")


def test_intersect_names_only_keeps_static_multiplicity():
    allowed = intersect_names_only(policy(["cn", "cn", "sn"]), ["cn"])
    assert allowed.names == ("cn", "cn")


class TestRequestContext:
    """Test metadata and identity source lookups"""

    def test_identity_sources(self):
        assert RequestContext.identity_sources({"idpEntityId": ["idp1", "idp2"]}) == ["idp1", "idp2"]
        assert RequestContext.identity_sources({"idpEntityId": "idp1"}) == ["idp1"]
        assert RequestContext.identity_sources({}) == []

    def test_bare_string_metadata_policy(self):
        ctx = RequestContext(destination={"attributes": "cn"})
        assert ctx.metadata_policy() == ["cn"]

    def test_destination_metadata_preferred(self):
        ctx = RequestContext(destination={"attributes": ["cn"]}, source={"attributes": ["sn"]})
        assert ctx.metadata_policy() == ["cn"]
        assert RequestContext(source={"attributes": ["sn"]}).metadata_policy() == ["sn"]
