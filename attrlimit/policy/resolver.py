"""
Allow set resolution.

Combines the static policy, the metadata policy, the alias table and the
conditional release rule into the allowed set for one filter pass.
"""

from typing import List, Mapping, Optional, Sequence
import logging

from ..aliases.table import NameAliasTable
from .types import (
    AllowedSet, ConditionalReleaseRule, StaticPolicy, UNRESTRICTED
)


logger = logging.getLogger(__name__)


def expand_metadata_policy(metadata_policy: Sequence[str], alias_table: NameAliasTable) -> List[str]:
    """
    Replace aliases in a metadata policy with their canonical names.

    Names that are not aliases stay in place. Canonical names are appended
    after the original names, in processing order, and are not expanded
    again. The alias itself is dropped unless the table is in duplicate
    mode, or a multi-valued alias lists itself as one of its targets.
    """
    kept: List[str] = []
    appended: List[str] = []

    for name in metadata_policy:
        target = alias_table.get(name)
        if target is None:
            kept.append(name)
            continue

        if isinstance(target, str):
            retain = alias_table.duplicate
            appended.append(target)
        else:
            retain = alias_table.duplicate or name in target
            appended.extend(target)

        if retain:
            kept.append(name)
        else:
            logger.debug(f"[AttributeLimit] unset metadata allowed attribute {name!r}")

    return kept + appended


def intersect_names_only(static_policy: StaticPolicy, metadata_names: Sequence[str]) -> AllowedSet:
    """
    Intersect static policy names with the metadata policy.

    Value constraints of the static policy are discarded here: a constrained
    entry contributes only its name, and every admitted attribute keeps all
    of its values. Static order and multiplicity are preserved.
    """
    admitted = set(metadata_names)
    return AllowedSet(names=tuple(name for name in static_policy.names() if name in admitted))


class AllowSetResolver:
    """
    Resolves the allowed set for a single filter pass.
    """

    def __init__(self, log: Optional[logging.Logger] = None):
        self.log = log or logger

    def effective_static_policy(self, static_policy: StaticPolicy,
                                conditional_rule: Optional[ConditionalReleaseRule],
                                ctx,
                                attributes: Mapping[str, Sequence[str]]) -> StaticPolicy:
        """Apply the conditional release rule to the static policy for this pass only."""
        if conditional_rule is None:
            return static_policy

        idp_entity_ids = ctx.identity_sources(attributes)
        if conditional_rule.applies(ctx.relying_party, idp_entity_ids):
            self.log.debug(
                f"[AttributeLimit] releasing {conditional_rule.attribute!r} "
                f"to {ctx.relying_party!r}"
            )
            return static_policy.with_name(conditional_rule.attribute)
        return static_policy

    def resolve(self, static_policy: StaticPolicy, metadata_policy: Sequence[str],
                alias_table: NameAliasTable, conditional_rule: Optional[ConditionalReleaseRule],
                ctx, attributes: Mapping[str, Sequence[str]]) -> AllowedSet:
        """
        Compute the allowed set.

        Args:
            static_policy: Policy configured on the filter
            metadata_policy: Attribute names from the relying party or source metadata
            alias_table: Alias table applied to the metadata policy
            conditional_rule: Optional conditional release rule
            ctx: RequestContext of the current exchange
            attributes: Attribute bag, read for the identity source entity id

        Returns:
            AllowedSet: UNRESTRICTED when neither policy limits the attributes
        """
        policy = self.effective_static_policy(
            static_policy, conditional_rule, ctx, attributes
        )

        expanded = expand_metadata_policy(metadata_policy, alias_table)
        self.log.debug(f"[AttributeLimit] metadata allowed attributes={expanded!r}")

        if policy.is_empty() and not expanded:
            self.log.debug("[AttributeLimit] No limit on attributes")
            return UNRESTRICTED

        if not policy.is_empty():
            if not expanded:
                allowed = AllowedSet(names=tuple(policy.bare_names()),
                                     constraints=policy.constraints())
            else:
                allowed = intersect_names_only(policy, expanded)
        else:
            allowed = AllowedSet(names=tuple(expanded))

        self.log.debug(f"[AttributeLimit] allowedAttributes={allowed.to_dict()!r}")
        return allowed
