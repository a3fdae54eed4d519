"""
Loaders for attribute name alias maps.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Mapping, Optional
import json
import logging

import yaml

from ..errors import ConfigurationError


logger = logging.getLogger(__name__)


class AliasMapLoader(ABC):
    """
    Base class for alias map sources.
    """

    @abstractmethod
    def load(self, name: str) -> Mapping[str, Any]:
        """
        Load the alias map called ``name``.

        Raises:
            ConfigurationError: If the map cannot be found or parsed.
        """
        pass


class DictAliasMapLoader(AliasMapLoader):
    """
    In-memory alias maps, keyed by map name.
    """

    def __init__(self, maps: Optional[Dict[str, Mapping[str, Any]]] = None):
        self.maps = dict(maps or {})

    def load(self, name: str) -> Mapping[str, Any]:
        if name not in self.maps:
            raise ConfigurationError(f"Could not find attributemap {name!r}",
                                     details={'resource': name})
        return self.maps[name]


class FileAliasMapLoader(AliasMapLoader):
    """
    Alias maps stored as ``<directory>/<name>.yaml``, ``.yml`` or ``.json``.
    """

    EXTENSIONS = (".yaml", ".yml", ".json")

    def __init__(self, directory: str):
        self.directory = Path(directory)

    def find(self, name: str) -> Optional[Path]:
        for ext in self.EXTENSIONS:
            path = self.directory / f"{name}{ext}"
            if path.is_file():
                return path
        return None

    def load(self, name: str) -> Mapping[str, Any]:
        path = self.find(name)
        if path is None:
            raise ConfigurationError(
                f"Could not find attributemap file: {self.directory / name}",
                details={'resource': name, 'directory': str(self.directory)}
            )

        try:
            with open(path, 'r', encoding='utf-8') as f:
                if path.suffix == ".json":
                    data = json.load(f)
                else:
                    data = yaml.safe_load(f)
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Attribute map file {str(path)!r} could not be read: {e}",
                                     details={'resource': name}) from e

        if not isinstance(data, Mapping):
            raise ConfigurationError(
                f"Attribute map file {str(path)!r} didn't define an attribute map.",
                details={'resource': name}
            )

        logger.debug(f"Read attribute map file {path}")
        return data
