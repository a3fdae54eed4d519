"""
Prometheus metrics for filter passes.
"""

from .collector import FilterMetrics, MetricConfig

__all__ = ['FilterMetrics', 'MetricConfig']
