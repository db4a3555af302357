"""Aggregation of prioritized configuration sources into one snapshot."""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, NoReturn, Optional

from .. import log
from ..errors import Code, ConfstackError, new_error
from .merge import merge_by_priority
from .source import ConfigSource, describe
from .types import AggregatorState, ConfigMap, ProvenanceRecord


class ConfigAggregator:
    """Pull every registered source once and merge the results by priority.

    Sources are read sequentially in registration order. Each result is
    stored under the source's priority; a later source with the same
    priority replaces the earlier mapping outright. The finalized view is
    the ascending-priority union of those mappings, so larger priorities
    override smaller ones.

    A failing source is fatal: the error is wrapped with
    ``Code.CONFIG_AGGREGATION`` and sent through ``log.fatal``, which raises
    ``SystemExit``. The previously finalized snapshot is left untouched.
    """

    component = "ConfigAggregator"

    def __init__(self) -> None:
        self._per_priority: Dict[int, ConfigMap] = {}
        self._finalized: ConfigMap = {}
        self._provenance: Dict[str, ProvenanceRecord] = {}
        self._state = AggregatorState.UNINITIALIZED

    def initialize(self, *sources: ConfigSource) -> "ConfigAggregator":
        """Read ``sources`` and replace the finalized configuration.

        Args:
            *sources: Zero or more sources, in registration order.

        Returns:
            This aggregator, for chaining.

        Raises:
            SystemExit: If any source fails to read.
            ConfstackError: If the aggregator already reached the fatal state.
        """
        if self._state is AggregatorState.FATAL:
            raise ConfstackError(
                "Aggregator failed earlier and cannot be re-initialized",
                code=Code.INVALID_STATE,
                component=self.component,
            )
        self._state = AggregatorState.AGGREGATING

        per_priority: Dict[int, ConfigMap] = {}
        labels: Dict[int, str] = {}
        for source in sources:
            try:
                config = source.read()
                if config is None:
                    config = {}
                if not isinstance(config, Mapping):
                    raise TypeError(
                        f"source returned {type(config).__name__}, expected a mapping"
                    )
                priority = source.priority()
                per_priority[priority] = dict(config)
            except Exception as exc:
                self._fail(source, exc)
            labels[priority] = describe(source)

        finalized, provenance = merge_by_priority(per_priority, labels)

        # swap only fully built maps in
        self._per_priority = per_priority
        self._finalized = finalized
        self._provenance = provenance
        self._state = AggregatorState.FINALIZED
        log.debug(
            "Configuration finalized",
            {"sources": len(sources), "priorities": sorted(per_priority), "keys": len(finalized)},
        )
        return self

    def _fail(self, source: ConfigSource, exc: Exception) -> NoReturn:
        err = new_error(Code.CONFIG_AGGREGATION, exc, "Error reading config", self.component)
        self._state = AggregatorState.FATAL
        log.fatal(
            "Error reading config",
            err,
            err.code,
            {"source": describe(source), "error_type": type(exc).__name__},
        )

    @property
    def state(self) -> AggregatorState:
        return self._state

    @property
    def finalized(self) -> Mapping[str, Any]:
        """Read-only view of the merged configuration."""
        return MappingProxyType(self._finalized)

    @property
    def per_priority_sources(self) -> Dict[int, ConfigMap]:
        return {p: dict(m) for p, m in self._per_priority.items()}

    def priorities(self) -> List[int]:
        return sorted(self._per_priority)

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        return self._finalized.get(key, default)

    def __getitem__(self, key: str) -> Any:
        return self._finalized[key]

    def __contains__(self, key: object) -> bool:
        return key in self._finalized

    def __iter__(self) -> Iterator[str]:
        return iter(self._finalized)

    def __len__(self) -> int:
        return len(self._finalized)

    def keys(self) -> List[str]:
        return list(self._finalized.keys())

    def values(self) -> ConfigMap:
        return dict(self._finalized)

    def provenance(self, key: str) -> Optional[ProvenanceRecord]:
        return self._provenance.get(key)

    def section(self, prefix: str) -> ConfigMap:
        """Return the keys under a dotted ``prefix`` with the prefix stripped.

        ``section("database")`` turns ``database.host`` into ``host``.
        """
        lead = prefix.rstrip(".") + "."
        return {k[len(lead):]: v for k, v in self._finalized.items() if k.startswith(lead)}


def initialize(*sources: ConfigSource) -> ConfigAggregator:
    """Build and initialize an aggregator for the application's startup routine."""
    return ConfigAggregator().initialize(*sources)
