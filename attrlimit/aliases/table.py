"""
Attribute name alias table.
Maps alternate attribute name encodings (such as OIDs) to canonical names.
"""

from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, Mapping, Optional, Tuple, Union
import logging

from ..errors import ConfigurationError


logger = logging.getLogger(__name__)

AliasTarget = Union[str, Tuple[str, ...]]

DEFAULT_ALIAS_MAPS = ("oid2name",)


def _normalize(source: str, mapping: Any) -> Dict[str, AliasTarget]:
    if not isinstance(mapping, Mapping):
        raise ConfigurationError(
            f"Attribute map {source!r} didn't define an attribute map.",
            details={'resource': source}
        )

    table: Dict[str, AliasTarget] = {}
    for alias, target in mapping.items():
        if not isinstance(alias, str):
            raise ConfigurationError(f"Attribute map {source!r} has a non-string name: {alias!r}")
        if isinstance(target, str):
            table[alias] = target
        elif isinstance(target, (list, tuple)) and all(isinstance(t, str) for t in target):
            table[alias] = tuple(target)
        else:
            raise ConfigurationError(
                f"Attribute map {source!r} maps {alias!r} to {target!r}, expected a name or a list of names",
                details={'resource': source, 'alias': alias}
            )
    return table


def _as_tuple(target: AliasTarget) -> Tuple[str, ...]:
    return (target,) if isinstance(target, str) else target


class NameAliasTable(Mapping):
    """
    Immutable mapping from alias name to one or more canonical names.

    A table is never modified after construction; merging returns a new
    table so readers always see a consistent snapshot.
    """

    def __init__(self, mapping: Optional[Mapping[str, Any]] = None, duplicate: bool = False,
                 source: str = "<memory>"):
        """
        Initialize alias table.

        Args:
            mapping: Alias to canonical name, or list of canonical names
            duplicate: Keep the alias next to its canonical names when expanding,
                and concatenate colliding entries when merging
            source: Resource name used in error messages
        """
        self.duplicate = duplicate
        self._map = MappingProxyType(_normalize(source, mapping or {}))

    def __getitem__(self, name: str) -> AliasTarget:
        return self._map[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._map)

    def __len__(self) -> int:
        return len(self._map)

    def resolve(self, name: str) -> Tuple[str, ...]:
        """Return the canonical names for ``name``, empty if it is not an alias."""
        target = self._map.get(name)
        if target is None:
            return ()
        return _as_tuple(target)

    def merged(self, mapping: Mapping[str, Any], source: str = "<memory>") -> 'NameAliasTable':
        """
        Return a new table with ``mapping`` merged in.

        Without duplicate mode later entries overwrite earlier ones. In
        duplicate mode colliding entries are concatenated.
        """
        incoming = _normalize(source, mapping)
        combined: Dict[str, AliasTarget] = dict(self._map)

        for alias, target in incoming.items():
            if self.duplicate and alias in combined:
                combined[alias] = _as_tuple(combined[alias]) + _as_tuple(target)
            else:
                combined[alias] = target

        return NameAliasTable(combined, duplicate=self.duplicate)

    @classmethod
    def load(cls, loader, names: Iterable[str] = DEFAULT_ALIAS_MAPS,
             duplicate: bool = False) -> 'NameAliasTable':
        """
        Load and merge the named alias maps in order.

        Raises:
            ConfigurationError: If a map cannot be found or is malformed.
        """
        table = cls(duplicate=duplicate)
        for name in names:
            table = table.merged(loader.load(name), source=name)
            logger.debug(f"Loaded attribute map {name!r}, {len(table)} aliases")
        return table

    def __repr__(self) -> str:
        return f"NameAliasTable({len(self._map)} aliases, duplicate={self.duplicate})"
