"""
Prometheus metrics for the attribute limit filter.
"""

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Optional
import logging
import time

from prometheus_client import CollectorRegistry, Counter, Histogram, generate_latest


logger = logging.getLogger(__name__)


@dataclass
class MetricConfig:
    """Configuration for metrics collection."""

    enabled: bool = True
    namespace: str = "attrlimit"


class FilterMetrics:
    """Metrics collector for filter passes."""

    def __init__(self, config: MetricConfig = None, registry: Optional[CollectorRegistry] = None):
        """
        Initialize metrics collector.

        Args:
            config: Metrics configuration
            registry: Registry to register metrics on, a private one by default
        """
        self.config = config or MetricConfig()
        self.registry = registry or CollectorRegistry()

        ns = self.config.namespace

        self.filter_passes = Counter(
            f'{ns}_filter_passes_total',
            'Total number of filter passes',
            ['outcome'],
            registry=self.registry
        )

        self.attributes_removed = Counter(
            f'{ns}_attributes_removed_total',
            'Total number of attributes removed from attribute bags',
            registry=self.registry
        )

        self.values_removed = Counter(
            f'{ns}_values_removed_total',
            'Total number of attribute values removed by value constraints',
            registry=self.registry
        )

        self.pattern_errors = Counter(
            f'{ns}_pattern_errors_total',
            'Total number of invalid value patterns met while filtering',
            ['attribute'],
            registry=self.registry
        )

        self.filter_duration = Histogram(
            f'{ns}_filter_duration_seconds',
            'Filter pass duration in seconds',
            buckets=[0.0001, 0.0002, 0.0005, 0.001, 0.002, 0.005, 0.01, 0.02, 0.05, 0.1],
            registry=self.registry
        )

        logger.debug("Filter metrics initialized")

    def record_pass(self, outcome: str) -> None:
        """Record a filter pass, ``unrestricted`` or ``filtered``."""
        if not self.config.enabled:
            return
        self.filter_passes.labels(outcome=outcome).inc()

    def record_removed(self, attributes: int, values: int) -> None:
        """Record attributes and values removed by a filter pass."""
        if not self.config.enabled:
            return
        if attributes:
            self.attributes_removed.inc(attributes)
        if values:
            self.values_removed.inc(values)

    def record_pattern_error(self, attribute: str) -> None:
        """Record an invalid value pattern."""
        if not self.config.enabled:
            return
        self.pattern_errors.labels(attribute=attribute).inc()

    @contextmanager
    def time_pass(self):
        """Measure the duration of a filter pass."""
        start = time.perf_counter()
        try:
            yield
        finally:
            if self.config.enabled:
                self.filter_duration.observe(time.perf_counter() - start)

    def export(self) -> bytes:
        """Render the registry in the Prometheus text format."""
        return generate_latest(self.registry)
