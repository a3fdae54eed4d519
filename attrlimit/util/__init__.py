"""
Configuration helpers shared by the filter configuration.
"""

from .config import (
    get_config_value, load_config_file, get_bool_config, get_list_config
)

__all__ = [
    'get_config_value', 'load_config_file', 'get_bool_config', 'get_list_config'
]
