"""
Configuration module for the attribute limit filter.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional
import os

import yaml

from ..aliases.table import DEFAULT_ALIAS_MAPS
from ..errors import ConfigurationError
from ..policy.types import ConditionalReleaseRule
from ..util.config import get_bool_config, get_list_config, get_config_value, load_config_file


def _name_list(label: str, value: Any) -> List[str]:
    # A bare string would otherwise become one entry per character
    if not isinstance(value, (list, tuple)):
        raise ConfigurationError(f"{label} must be a list, got {value!r}")
    return list(value)


@dataclass
class ConditionalReleaseConfig:
    """Conditional release rule settings"""
    relying_parties: List[str] = field(default_factory=list)
    identity_sources: List[str] = field(default_factory=list)
    attribute: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ConditionalReleaseConfig':
        """Create from dictionary representation."""
        if not isinstance(data, Mapping):
            raise ConfigurationError("conditional_release must be a mapping")
        return cls(
            relying_parties=_name_list('conditional_release.relying_parties',
                                       data.get('relying_parties', [])),
            identity_sources=_name_list('conditional_release.identity_sources',
                                        data.get('identity_sources', [])),
            attribute=data.get('attribute', '')
        )

    def validate(self) -> bool:
        if not self.attribute or not isinstance(self.attribute, str):
            raise ConfigurationError("conditional_release.attribute is required")
        for label, ids in (('relying_parties', self.relying_parties),
                           ('identity_sources', self.identity_sources)):
            if not all(isinstance(i, str) for i in ids):
                raise ConfigurationError(f"conditional_release.{label} must be a list of entity ids")
        return True

    def to_rule(self) -> ConditionalReleaseRule:
        return ConditionalReleaseRule.create(self.relying_parties, self.identity_sources, self.attribute)


@dataclass
class FilterConfig:
    """Configuration for an attribute limit filter"""
    policy: Any = field(default_factory=list)
    alias_map_names: List[str] = field(default_factory=lambda: list(DEFAULT_ALIAS_MAPS))
    alias_map_dir: Optional[str] = None
    duplicate: bool = False
    conditional_release: Optional[ConditionalReleaseConfig] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FilterConfig':
        """Create from dictionary representation."""
        if not isinstance(data, dict):
            raise ConfigurationError("Filter configuration must be a mapping")

        release = data.get('conditional_release')
        return cls(
            policy=data.get('policy', []),
            alias_map_names=_name_list('alias_map_names',
                                       data.get('alias_map_names', DEFAULT_ALIAS_MAPS)),
            alias_map_dir=data.get('alias_map_dir'),
            duplicate=bool(data.get('duplicate', False)),
            conditional_release=ConditionalReleaseConfig.from_dict(release) if release is not None else None
        )

    @classmethod
    def from_file(cls, file_path: str) -> 'FilterConfig':
        """Create configuration from a JSON or YAML file"""
        try:
            data = load_config_file(file_path)
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Could not load filter configuration {file_path!r}: {e}") from e
        return cls.from_dict(data)

    @classmethod
    def from_env(cls) -> 'FilterConfig':
        """Create configuration from environment variables"""
        policy_file = get_config_value("policy_file")
        config = cls.from_file(policy_file) if policy_file else cls()

        config.alias_map_dir = get_config_value("alias_map_dir", config.alias_map_dir)
        config.alias_map_names = get_list_config("alias_maps", config.alias_map_names)
        config.duplicate = get_bool_config("duplicate", config.duplicate)
        return config

    def rule(self) -> Optional[ConditionalReleaseRule]:
        if self.conditional_release is None:
            return None
        return self.conditional_release.to_rule()

    def validate(self) -> bool:
        """Validate the configuration"""
        if not isinstance(self.policy, (list, tuple, dict)):
            raise ConfigurationError("policy must be a list or a mapping")
        if (not isinstance(self.alias_map_names, (list, tuple))
                or not all(isinstance(name, str) and name for name in self.alias_map_names)):
            raise ConfigurationError("alias_map_names must be a list of map names")
        if self.alias_map_dir is not None and not os.path.isdir(self.alias_map_dir):
            raise ConfigurationError(f"alias_map_dir {self.alias_map_dir!r} is not a directory")
        if self.conditional_release is not None:
            self.conditional_release.validate()
        return True
