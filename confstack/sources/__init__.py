"""Configuration source implementations.

File-backed sources (yaml, json, toml, ini, env) searched across candidate
directories, the process environment, and Redis.
"""

from .environ import EnvironmentConfigSource
from .file import FileConfigSource

# RedisConfigSource is imported from .redis_kv directly

__all__ = [
    "EnvironmentConfigSource",
    "FileConfigSource",
]
