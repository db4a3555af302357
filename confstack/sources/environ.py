"""Process environment configuration source."""

from __future__ import annotations

import os
from typing import Any, Dict, Mapping, Optional


class EnvironmentConfigSource:
    """Read prefixed environment variables as configuration.

    ``APP_DATABASE__HOST=db`` with prefix ``APP_`` becomes ``database.host``.

    Args:
        prefix: Only variables starting with this prefix are read.
        priority: Merge priority; higher wins.
        environ: Mapping to read from. Defaults to ``os.environ``.
        separator: Nesting separator translated to ``.``.
        lowercase: Lowercase the resulting keys.
    """

    def __init__(
        self,
        prefix: str,
        priority: int,
        *,
        environ: Optional[Mapping[str, str]] = None,
        separator: str = "__",
        lowercase: bool = True,
    ):
        self.prefix = prefix
        self._priority = priority
        self._environ = environ
        self.separator = separator
        self.lowercase = lowercase
        self.name = f"env:{prefix}*"

    def priority(self) -> int:
        return self._priority

    def read(self) -> Dict[str, Any]:
        environ = os.environ if self._environ is None else self._environ
        values: Dict[str, Any] = {}
        for key, value in environ.items():
            if not key.startswith(self.prefix):
                continue
            stripped = key[len(self.prefix):]
            if not stripped:
                continue
            if self.separator:
                stripped = stripped.replace(self.separator, ".")
            if self.lowercase:
                stripped = stripped.lower()
            values[stripped] = value
        return values
