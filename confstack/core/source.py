"""Source protocol for configuration sources."""

from __future__ import annotations

from typing import Any, Dict, Protocol, runtime_checkable


@runtime_checkable
class ConfigSource(Protocol):
    """Protocol every configuration source satisfies.

    Sources are read once per aggregation. Failures are raised as
    ``ConfstackError`` subclasses; a source that degrades gracefully returns
    an empty mapping instead.
    """

    def priority(self) -> int:
        """Merge key for this source. Higher values win on key collisions."""
        ...

    def read(self) -> Dict[str, Any]:
        """Read configuration values from the source.

        Returns:
            Dictionary of configuration key-value pairs.
        """
        ...


def describe(source: ConfigSource) -> str:
    """Human-readable label for a source, used in logs and provenance."""
    name = getattr(source, "name", None)
    if isinstance(name, str) and name:
        return name
    return type(source).__name__
