"""
Policy types for the attribute limit filter.
Implements value constraints, allow entries, the static policy and the
allowed set computed for a single filter pass.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple, Any, Union


IDP_ENTITY_ID_ATTRIBUTE = "idpEntityId"


class ValueConstraint(ABC):
    """
    Restriction on the values of a single attribute.
    Exactly one mode is active per constraint.
    """

    @property
    @abstractmethod
    def mode(self) -> str:
        """Name of the constraint mode."""
        pass

    @property
    @abstractmethod
    def members(self) -> Tuple[str, ...]:
        """Configured values or patterns, in declared order."""
        pass

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            'mode': self.mode,
            'members': list(self.members)
        }


@dataclass(frozen=True)
class ExactSet(ValueConstraint):
    """Allow only values equal to one of the configured values."""
    values: Tuple[str, ...] = ()

    @property
    def mode(self) -> str:
        return "exact"

    @property
    def members(self) -> Tuple[str, ...]:
        return self.values


@dataclass(frozen=True)
class CaseInsensitiveSet(ValueConstraint):
    """Allow values equal to one of the configured values, ignoring case."""
    values: Tuple[str, ...] = ()

    @property
    def mode(self) -> str:
        return "ignore_case"

    @property
    def members(self) -> Tuple[str, ...]:
        return self.values


@dataclass(frozen=True)
class RegexSet(ValueConstraint):
    """Allow values matched by at least one of the configured patterns."""
    patterns: Tuple[str, ...] = ()

    @property
    def mode(self) -> str:
        return "regex"

    @property
    def members(self) -> Tuple[str, ...]:
        return self.patterns


@dataclass(frozen=True)
class BareName:
    """Allow every value of the named attribute."""
    name: str


@dataclass(frozen=True)
class Constrained:
    """Allow the named attribute, restricted by a value constraint."""
    name: str
    constraint: ValueConstraint


AllowEntry = Union[BareName, Constrained]


@dataclass(frozen=True)
class StaticPolicy:
    """
    Ordered allow entries configured on a filter instance.
    Immutable for the lifetime of the filter.
    """
    entries: Tuple[AllowEntry, ...] = ()

    def names(self) -> List[str]:
        """All entry names, constrained ones included, in declared order."""
        return [entry.name for entry in self.entries]

    def bare_names(self) -> List[str]:
        """Names admitted with all of their values."""
        return [entry.name for entry in self.entries if isinstance(entry, BareName)]

    def constraints(self) -> Dict[str, ValueConstraint]:
        """Lookup from attribute name to its value constraint."""
        return {
            entry.name: entry.constraint
            for entry in self.entries
            if isinstance(entry, Constrained)
        }

    def with_name(self, name: str) -> 'StaticPolicy':
        """Return a copy with a bare entry for ``name`` appended."""
        return StaticPolicy(self.entries + (BareName(name),))

    def is_empty(self) -> bool:
        return not self.entries

    def __len__(self) -> int:
        return len(self.entries)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            'names': self.bare_names(),
            'constraints': {k: v.to_dict() for k, v in self.constraints().items()}
        }


@dataclass(frozen=True)
class AllowedSet:
    """
    Attribute names and value constraints admitted for one filter pass.

    ``names`` admits an attribute with all of its values. ``constraints``
    admits an attribute whose values pass the constraint.
    """
    names: Tuple[str, ...] = ()
    constraints: Dict[str, ValueConstraint] = field(default_factory=dict)
    unrestricted: bool = False

    def admits_all_values(self, name: str) -> bool:
        return name in self.names

    def constraint_for(self, name: str) -> Optional[ValueConstraint]:
        return self.constraints.get(name)

    def has_constraint(self, name: str) -> bool:
        return name in self.constraints

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        if self.unrestricted:
            return {'unrestricted': True}
        return {
            'names': list(self.names),
            'constraints': {k: v.to_dict() for k, v in self.constraints.items()}
        }


# No limit on attributes
UNRESTRICTED = AllowedSet(unrestricted=True)


@dataclass(frozen=True)
class ConditionalReleaseRule:
    """
    Re-admit one attribute when a relying party receives an assertion
    from one of a set of identity sources.
    """
    relying_parties: FrozenSet[str]
    identity_sources: FrozenSet[str]
    attribute: str

    @classmethod
    def create(cls, relying_parties: Iterable[str], identity_sources: Iterable[str],
               attribute: str) -> 'ConditionalReleaseRule':
        return cls(frozenset(relying_parties), frozenset(identity_sources), attribute)

    def applies(self, relying_party: Optional[str], idp_entity_ids: Iterable[str]) -> bool:
        """Check whether the rule releases its attribute for this exchange."""
        if relying_party is None or relying_party not in self.relying_parties:
            return False
        if isinstance(idp_entity_ids, str):
            idp_entity_ids = [idp_entity_ids]
        return any(idp in self.identity_sources for idp in idp_entity_ids)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            'relying_parties': sorted(self.relying_parties),
            'identity_sources': sorted(self.identity_sources),
            'attribute': self.attribute
        }
