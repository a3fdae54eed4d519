"""
Attribute limit filter engine.
Limits the attributes, and the attribute values, released for one
authentication exchange.
"""

from typing import Any, Dict, Iterable, List, MutableMapping, Optional
import logging

from ..aliases.loader import AliasMapLoader, FileAliasMapLoader
from ..aliases.table import DEFAULT_ALIAS_MAPS, NameAliasTable
from ..errors import ConfigurationError
from ..policy.parser import parse_static_policy
from ..policy.resolver import AllowSetResolver
from ..policy.types import ConditionalReleaseRule, StaticPolicy, ValueConstraint
from ..policy.values import ValueFilter
from .context import RequestContext


logger = logging.getLogger(__name__)

AttributeBag = MutableMapping[str, List[str]]


class FilterEngine:
    """
    Removes attributes, and attribute values, that may not be released.

    The static policy, the conditional release rule and the alias table are
    read-only once the engine is built; concurrent passes over independent
    attribute bags share them without locking.
    """

    def __init__(self,
                 static_policy: Optional[StaticPolicy] = None,
                 alias_table: Optional[NameAliasTable] = None,
                 alias_loader: Optional[AliasMapLoader] = None,
                 conditional_rule: Optional[ConditionalReleaseRule] = None,
                 alias_map_names: Iterable[str] = DEFAULT_ALIAS_MAPS,
                 duplicate: bool = False,
                 is_default: bool = False,
                 log: Optional[logging.Logger] = None,
                 metrics=None):
        """
        Initialize filter engine.

        Args:
            static_policy: Policy configured on this filter
            alias_table: Preloaded alias table, takes precedence over alias_loader
            alias_loader: Source of the alias maps, loaded on first use
            conditional_rule: Optional conditional release rule
            alias_map_names: Alias maps to load through alias_loader, in merge order
            duplicate: Keep aliases next to their canonical names
            is_default: Value of the ``default`` filter option
            log: Diagnostics logger, defaults to the module logger
            metrics: Optional FilterMetrics
        """
        self.static_policy = static_policy or StaticPolicy()
        self.alias_loader = alias_loader
        self.conditional_rule = conditional_rule
        self.alias_map_names = tuple(alias_map_names)
        self.duplicate = duplicate
        self.is_default = is_default
        self.log = log or logger
        self.metrics = metrics

        self._alias_table = alias_table
        self.resolver = AllowSetResolver(self.log)
        self.value_filter = ValueFilter(self.log, metrics)

    @classmethod
    def from_config(cls, config, loader: Optional[AliasMapLoader] = None,
                    log: Optional[logging.Logger] = None, metrics=None) -> 'FilterEngine':
        """
        Create an engine from a FilterConfig.

        Raises:
            ConfigurationError: If the configuration is invalid.
        """
        config.validate()
        policy, options = parse_static_policy(config.policy)

        if loader is None and config.alias_map_dir:
            loader = FileAliasMapLoader(config.alias_map_dir)

        return cls(
            static_policy=policy,
            alias_loader=loader,
            conditional_rule=config.rule(),
            alias_map_names=config.alias_map_names,
            duplicate=config.duplicate,
            is_default=options.get('default', False),
            log=log,
            metrics=metrics
        )

    @property
    def alias_table(self) -> NameAliasTable:
        """The alias table, loaded on first use."""
        if self._alias_table is None:
            self._alias_table = self._load_aliases()
        return self._alias_table

    def _load_aliases(self) -> NameAliasTable:
        if self.alias_loader is None:
            return NameAliasTable(duplicate=self.duplicate)
        return NameAliasTable.load(self.alias_loader, self.alias_map_names, self.duplicate)

    def reload_aliases(self) -> NameAliasTable:
        """
        Load a fresh alias table and swap it in.
        Passes already running keep the table they started with.
        """
        table = self._load_aliases()
        self._alias_table = table
        return table

    def process(self, attributes: AttributeBag, ctx: RequestContext) -> None:
        """
        Filter an attribute bag in place.

        Args:
            attributes: Attribute name to list of values, mutated in place
            ctx: Context of the current exchange

        Raises:
            ConfigurationError: If the alias maps cannot be loaded or a value
                constraint is malformed.
        """
        if self.metrics is not None:
            with self.metrics.time_pass():
                self._process(attributes, ctx)
        else:
            self._process(attributes, ctx)

    def _process(self, attributes: AttributeBag, ctx: RequestContext) -> None:
        alias_table = self.alias_table
        allowed = self.resolver.resolve(
            self.static_policy,
            ctx.metadata_policy(),
            alias_table,
            self.conditional_rule,
            ctx,
            attributes
        )

        if allowed.unrestricted:
            if self.metrics is not None:
                self.metrics.record_pass("unrestricted")
            return

        filtered: Dict[str, List[str]] = {}
        dropped: List[str] = []
        values_removed = 0

        for name, values in list(attributes.items()):
            if allowed.admits_all_values(name):
                filtered[name] = values
                continue

            if not allowed.has_constraint(name):
                dropped.append(name)
                continue

            constraint = allowed.constraint_for(name)
            if not isinstance(constraint, ValueConstraint):
                raise ConfigurationError(
                    f"AttributeLimit: Values for {name!r} must be specified in an array.",
                    details={'attribute': name}
                )

            kept = self.value_filter.filter(name, values, constraint)
            values_removed += len(values) - len(kept)
            if kept:
                filtered[name] = kept
            else:
                dropped.append(name)

        if dropped:
            self.log.debug(f"[AttributeLimit] removed attributes={dropped!r}")

        attributes.clear()
        attributes.update(filtered)

        if self.metrics is not None:
            self.metrics.record_pass("filtered")
            self.metrics.record_removed(len(dropped), values_removed)

    def process_state(self, state: MutableMapping[str, Any]) -> None:
        """
        Filter the ``Attributes`` of a request state in place.

        The state carries ``Destination`` and ``Source`` metadata records,
        the relying party is ``Destination['entityid']``.
        """
        if 'Attributes' not in state or not isinstance(state['Attributes'], MutableMapping):
            raise ConfigurationError("Request state has no Attributes")
        self.process(state['Attributes'], RequestContext.from_state(state))
