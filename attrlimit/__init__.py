"""
attrlimit Python Package

Attribute release filter: limits which identity attributes, and which of
their values, are forwarded to a relying party.
"""

__version__ = "0.1.0"

from .core.engine import FilterEngine
from .core.config import FilterConfig, ConditionalReleaseConfig
from .core.context import RequestContext
from .errors import AttrLimitError, ConfigurationError, PatternError

__all__ = [
    "FilterEngine",
    "FilterConfig",
    "ConditionalReleaseConfig",
    "RequestContext",
    "AttrLimitError",
    "ConfigurationError",
    "PatternError",
]
