from .config import FilterConfig, ConditionalReleaseConfig
from .context import RequestContext
from .engine import FilterEngine

__all__ = ["FilterConfig", "ConditionalReleaseConfig", "RequestContext", "FilterEngine"]
