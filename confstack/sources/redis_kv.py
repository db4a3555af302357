from __future__ import annotations

from typing import Any, Dict, Optional, Union

import redis

from .. import log
from ..errors import Code, SourceUnavailable


class RedisConfigSource:
    """Read-only configuration source over a Redis key space.

    Every key under ``prefix`` becomes a configuration key with the prefix
    stripped. Connection and command failures are fatal for a required
    source and degrade to an empty contribution otherwise; there is no retry.
    """

    def __init__(
        self,
        url_or_client: Union[str, "redis.Redis"],
        priority: int,
        *,
        prefix: str = "",
        required: bool = True,
        name: Optional[str] = None,
    ):
        if isinstance(url_or_client, str):
            self.client = redis.Redis.from_url(url_or_client, decode_responses=True)
            self.uri = url_or_client
        else:
            self.client = url_or_client
            self.uri = repr(url_or_client)
        self.prefix = prefix
        self.required = required
        self._priority = priority
        self.name = name or f"redis:{self.uri}"

    def _prefixed(self, key: str) -> str:
        return f"{self.prefix}{key}" if self.prefix else key

    def _unprefixed(self, key: str) -> str:
        if self.prefix and key.startswith(self.prefix):
            return key[len(self.prefix) :]
        return key

    def priority(self) -> int:
        return self._priority

    def read(self) -> Dict[str, Any]:
        try:
            keys = self.client.keys(self._prefixed("*"))
            kv: Dict[str, Any] = {}
            if keys:
                values = self.client.mget(keys)
                for k, v in zip(keys, values):
                    if v is not None:
                        kv[self._unprefixed(_text(k))] = _text(v)
            return kv
        except (redis.RedisError, UnicodeDecodeError) as exc:
            if self.required:
                raise SourceUnavailable(
                    f"Redis config source unavailable: {self.name}",
                    cause=exc,
                    component="config",
                ) from exc
            log.warn(
                "Failed to read optional redis config source",
                {"source": self.name, "error": str(exc), "code": Code.THIRD_PARTY.value},
            )
            return {}


def _text(value: Any) -> Any:
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return value
