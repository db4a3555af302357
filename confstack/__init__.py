"""confstack - prioritized configuration aggregation.

Resolve an application's runtime configuration from several prioritized
sources (files, environment, key/value stores) into one finalized snapshot.
"""

from .core.aggregator import ConfigAggregator, initialize
from .core.filesystem import FileSystem, MemoryFileSystem, OsFileSystem
from .core.source import ConfigSource
from .core.types import AggregatorState, ProvenanceRecord
from .errors import Code, ConfstackError, new_error
from .sources.environ import EnvironmentConfigSource
from .sources.file import FileConfigSource

__all__ = [
    "AggregatorState",
    "Code",
    "ConfigAggregator",
    "ConfigSource",
    "ConfstackError",
    "EnvironmentConfigSource",
    "FileConfigSource",
    "FileSystem",
    "MemoryFileSystem",
    "OsFileSystem",
    "ProvenanceRecord",
    "initialize",
    "new_error",
]
