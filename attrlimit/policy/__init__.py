"""
Package policy implements static attribute policies, allow set resolution
and value filtering.
"""

from .types import (
    ValueConstraint,
    ExactSet,
    CaseInsensitiveSet,
    RegexSet,
    BareName,
    Constrained,
    AllowEntry,
    StaticPolicy,
    AllowedSet,
    UNRESTRICTED,
    ConditionalReleaseRule,
    IDP_ENTITY_ID_ATTRIBUTE
)

from .parser import (
    parse_static_policy,
    parse_constraint
)

from .resolver import (
    AllowSetResolver,
    expand_metadata_policy,
    intersect_names_only
)

from .values import ValueFilter

__all__ = [
    # Types
    'ValueConstraint',
    'ExactSet',
    'CaseInsensitiveSet',
    'RegexSet',
    'BareName',
    'Constrained',
    'AllowEntry',
    'StaticPolicy',
    'AllowedSet',
    'UNRESTRICTED',
    'ConditionalReleaseRule',
    'IDP_ENTITY_ID_ATTRIBUTE',

    # Parsing
    'parse_static_policy',
    'parse_constraint',

    # Resolution
    'AllowSetResolver',
    'expand_metadata_policy',
    'intersect_names_only',

    # Values
    'ValueFilter'
]
