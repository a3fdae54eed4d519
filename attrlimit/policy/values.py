"""
Value filtering for constrained attributes.
"""

from typing import List, Optional, Sequence
import logging
import re

from ..errors import PatternError
from .types import CaseInsensitiveSet, ExactSet, RegexSet, ValueConstraint


logger = logging.getLogger(__name__)


class ValueFilter:
    """
    Computes the surviving values of an attribute under a value constraint.
    """

    def __init__(self, log: Optional[logging.Logger] = None, metrics=None):
        """
        Initialize value filter.

        Args:
            log: Diagnostics logger, defaults to the module logger
            metrics: Optional FilterMetrics receiving pattern errors
        """
        self.log = log or logger
        self.metrics = metrics

    def filter(self, name: str, values: Sequence[str], constraint: ValueConstraint) -> List[str]:
        """
        Filter ``values`` of attribute ``name``.

        Exact and case-insensitive sets keep the original value order. Regex
        sets return values in match order: all values claimed by the first
        pattern, then those claimed by the second, and so on.
        """
        if isinstance(constraint, ExactSet):
            allowed = set(constraint.values)
            return [value for value in values if value in allowed]

        if isinstance(constraint, CaseInsensitiveSet):
            allowed = {value.casefold() for value in constraint.values}
            return [value for value in values if value.casefold() in allowed]

        if isinstance(constraint, RegexSet):
            return self._filter_regex(name, values, constraint.patterns)

        raise TypeError(f"Unsupported value constraint: {type(constraint).__name__}")

    def _filter_regex(self, name: str, values: Sequence[str], patterns: Sequence[str]) -> List[str]:
        remaining = list(values)
        matched: List[str] = []

        for pattern in patterns:
            try:
                compiled = re.compile(pattern)
            except re.error as e:
                self._report(PatternError(name, pattern, str(e)))
                continue

            unclaimed = []
            for value in remaining:
                if compiled.search(value):
                    matched.append(value)
                else:
                    unclaimed.append(value)
            remaining = unclaimed

        return matched

    def _report(self, error: PatternError) -> None:
        self.log.warning(f"[AttributeLimit] {error.message}")
        if self.metrics is not None:
            self.metrics.record_pattern_error(error.attribute)
