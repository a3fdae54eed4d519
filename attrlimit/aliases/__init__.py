"""
Attribute name alias tables and their loaders.
"""

from .table import NameAliasTable, DEFAULT_ALIAS_MAPS
from .loader import AliasMapLoader, FileAliasMapLoader, DictAliasMapLoader

__all__ = [
    'NameAliasTable',
    'DEFAULT_ALIAS_MAPS',
    'AliasMapLoader',
    'FileAliasMapLoader',
    'DictAliasMapLoader'
]
