"""Merging per-priority mappings into one finalized configuration."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, Mapping, Optional, Tuple

from .types import ConfigMap, ProvenanceRecord


def merge_by_priority(
    per_priority: Mapping[int, ConfigMap],
    labels: Optional[Mapping[int, str]] = None,
) -> Tuple[ConfigMap, Dict[str, ProvenanceRecord]]:
    """Merge per-priority mappings into a single configuration.

    Priorities are visited in ascending order and each mapping is unioned
    into the result, so a key present at several priorities resolves to the
    value from the highest one.

    Args:
        per_priority: Mapping of priority to that slot's configuration.
        labels: Optional source label per priority, used for provenance.

    Returns:
        Tuple of (effective_config, provenance_map).
    """
    effective: ConfigMap = {}
    provenance: Dict[str, ProvenanceRecord] = {}
    loaded_at = datetime.now(timezone.utc)
    labels = labels or {}

    for priority in sorted(per_priority):
        label = labels.get(priority, "")
        for key, value in per_priority[priority].items():
            # higher priority wins
            effective[key] = value
            provenance[key] = ProvenanceRecord(
                key=key,
                priority=priority,
                source=label,
                timestamp_loaded=loaded_at,
            )

    return effective, provenance
