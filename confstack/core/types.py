"""Type definitions for the aggregation pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict

ConfigMap = Dict[str, Any]


class AggregatorState(str, Enum):
    UNINITIALIZED = "uninitialized"
    AGGREGATING = "aggregating"
    FINALIZED = "finalized"
    FATAL = "fatal"


@dataclass(frozen=True)
class ProvenanceRecord:
    """Record tracking where a finalized value came from.

    Attributes:
        key: Configuration key.
        priority: Priority slot that supplied the winning value.
        source: Label of the source registered at that priority.
        timestamp_loaded: When the aggregation ran.
    """

    key: str
    priority: int
    source: str
    timestamp_loaded: datetime
