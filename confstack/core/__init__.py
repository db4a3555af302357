from .aggregator import ConfigAggregator, initialize
from .filesystem import FileSystem, MemoryFileSystem, OsFileSystem
from .merge import merge_by_priority
from .source import ConfigSource
from .types import AggregatorState, ProvenanceRecord

__all__ = [
    "AggregatorState",
    "ConfigAggregator",
    "ConfigSource",
    "FileSystem",
    "MemoryFileSystem",
    "OsFileSystem",
    "ProvenanceRecord",
    "initialize",
    "merge_by_priority",
]
