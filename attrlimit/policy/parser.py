"""
Parsing of static attribute policies from configuration.

A policy is either a list, where plain strings allow every value of an
attribute and mappings attach a value constraint to each of their keys::

    ["cn", "mail", {"eduPersonAffiliation": ["member", "staff"]}]

or a mapping where integer keys are plain names and string keys carry a
constraint payload::

    {0: "cn", "eduPersonEntitlement": {"regex": True, 0: "^urn:mace:"}}

A constraint payload is a list of allowed values, or a mapping with a
``regex`` or ``ignoreCase`` marker whose index-keyed members are the
patterns or values. Integer keys and digit strings such as ``"0"`` (the
only key type JSON has) are both indexes.
"""

from typing import Any, Dict, List, Mapping, Tuple

from ..errors import ConfigurationError
from .types import (
    AllowEntry, BareName, CaseInsensitiveSet, Constrained, ExactSet, RegexSet,
    StaticPolicy, ValueConstraint
)


REGEX_MARKER = "regex"
IGNORE_CASE_MARKER = "ignoreCase"
MARKERS = (REGEX_MARKER, IGNORE_CASE_MARKER)

# Keys consumed as filter options instead of policy entries
OPTION_KEYS = ("default",)


def _member(name: str, value: Any) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(
            f"Values for {name!r} must be strings, got {value!r}",
            details={'attribute': name}
        )
    return value


def _is_index(key: Any) -> bool:
    # JSON object keys are always strings, so "0", "1", ... count as indexes
    if isinstance(key, bool):
        return False
    if isinstance(key, int):
        return True
    return isinstance(key, str) and key.isascii() and key.isdigit()


def _members(name: str, payload: Mapping[Any, Any]) -> Tuple[str, ...]:
    members = []
    for key, value in payload.items():
        if key in MARKERS:
            continue
        if not _is_index(key):
            raise ConfigurationError(
                f"Unknown key {key!r} in values for {name!r}",
                details={'attribute': name}
            )
        members.append(_member(name, value))
    return tuple(members)


def _marked_members(name: str, payload: Mapping[Any, Any], marker: str) -> Tuple[str, ...]:
    members = _members(name, payload)
    if not members:
        raise ConfigurationError(
            f"Values for {name!r} marked {marker!r} list no values",
            details={'attribute': name}
        )
    return members


def parse_constraint(name: str, payload: Any) -> ValueConstraint:
    """
    Build the value constraint for ``name`` from its configured payload.

    Raises:
        ConfigurationError: If the payload is not a list or a mapping, a
            mapping has keys other than indexes and markers, or a marked
            mapping lists no values.
    """
    if isinstance(payload, (list, tuple)):
        return ExactSet(tuple(_member(name, value) for value in payload))

    if isinstance(payload, Mapping):
        if payload.get(REGEX_MARKER):
            return RegexSet(_marked_members(name, payload, REGEX_MARKER))
        if payload.get(IGNORE_CASE_MARKER):
            return CaseInsensitiveSet(_marked_members(name, payload, IGNORE_CASE_MARKER))
        return ExactSet(_members(name, payload))

    raise ConfigurationError(
        f"Values for {name!r} must be specified in an array.",
        details={'attribute': name}
    )


def _bare_entry(value: Any) -> BareName:
    if not isinstance(value, str):
        raise ConfigurationError(
            f"Invalid attribute name: {value!r}",
            details={'value': repr(value)}
        )
    return BareName(value)


def parse_static_policy(raw: Any) -> Tuple[StaticPolicy, Dict[str, Any]]:
    """
    Parse a configured policy.

    Args:
        raw: Policy as a list or a mapping (see module docstring). ``None``
            means an empty policy.

    Returns:
        The static policy and the filter options found alongside it.

    Raises:
        ConfigurationError: If an entry is neither a name nor a constrained entry.
    """
    entries: List[AllowEntry] = []
    options: Dict[str, Any] = {}

    if raw is None:
        return StaticPolicy(), options

    if isinstance(raw, Mapping):
        for index, value in raw.items():
            if index in OPTION_KEYS:
                options[index] = bool(value)
            elif _is_index(index):
                entries.append(_bare_entry(value))
            elif isinstance(index, str):
                entries.append(Constrained(index, parse_constraint(index, value)))
            else:
                raise ConfigurationError(f"Invalid option: {index!r}")
        return StaticPolicy(tuple(entries)), options

    if not isinstance(raw, (list, tuple)):
        raise ConfigurationError(f"Attribute policy must be a list or a mapping, got {type(raw).__name__}")

    for item in raw:
        if isinstance(item, Mapping):
            for name, payload in item.items():
                if name in OPTION_KEYS:
                    options[name] = bool(payload)
                elif isinstance(name, str):
                    entries.append(Constrained(name, parse_constraint(name, payload)))
                else:
                    raise ConfigurationError(f"Invalid option: {name!r}")
        else:
            entries.append(_bare_entry(item))

    return StaticPolicy(tuple(entries)), options
