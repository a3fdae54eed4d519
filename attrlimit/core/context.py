"""
Request context for a filter pass.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..errors import ConfigurationError
from ..policy.types import IDP_ENTITY_ID_ATTRIBUTE


def _as_list(value: Any) -> List[str]:
    # A single name or entity id given as a bare string
    if isinstance(value, str):
        return [value]
    return list(value or [])


@dataclass
class RequestContext:
    """
    Per-exchange inputs of a filter pass.

    ``destination`` is the relying party metadata and ``source`` the identity
    source metadata. Either may carry an ``attributes`` list.
    """
    relying_party: Optional[str] = None
    destination: Mapping[str, Any] = field(default_factory=dict)
    source: Mapping[str, Any] = field(default_factory=dict)

    def metadata_policy(self) -> List[str]:
        """Allowed attribute names from metadata, destination first."""
        if self.destination and 'attributes' in self.destination:
            return _as_list(self.destination['attributes'])
        if self.source and 'attributes' in self.source:
            return _as_list(self.source['attributes'])
        return []

    @staticmethod
    def identity_sources(attributes: Mapping[str, Sequence[str]]) -> List[str]:
        """Identity source entity ids carried in the attribute bag."""
        return _as_list(attributes.get(IDP_ENTITY_ID_ATTRIBUTE))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            'relying_party': self.relying_party,
            'metadata_policy': self.metadata_policy()
        }

    @classmethod
    def from_state(cls, state: Mapping[str, Any]) -> 'RequestContext':
        """
        Create from a request state holding ``Destination`` and ``Source`` metadata.

        Raises:
            ConfigurationError: If a metadata record is not a mapping.
        """
        destination = state.get('Destination') or {}
        source = state.get('Source') or {}
        for label, record in (('Destination', destination), ('Source', source)):
            if not isinstance(record, Mapping):
                raise ConfigurationError(f"{label} metadata must be a mapping")

        return cls(
            relying_party=destination.get('entityid'),
            destination=destination,
            source=source
        )
