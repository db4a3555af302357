"""Parsers turning file text into configuration mappings, keyed by file type."""

from __future__ import annotations

import configparser
import json
import os
import re
import tomllib
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

import yaml

Parser = Callable[[str], Dict[str, Any]]

_ENV_LINE = re.compile(r"^(?:export\s+)?([A-Za-z_][A-Za-z0-9_]*)\s*=\s*(.*)$")
_BRACED_VAR = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")
_SIMPLE_VAR = re.compile(r"\$([A-Za-z_][A-Za-z0-9_]*)")


def _require_mapping(data: Any, kind: str) -> Dict[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{kind} document must be a mapping, got {type(data).__name__}")
    return data


def parse_yaml(text: str) -> Dict[str, Any]:
    return _require_mapping(yaml.safe_load(text), "YAML")


def parse_json(text: str) -> Dict[str, Any]:
    if not text.strip():
        return {}
    return _require_mapping(json.loads(text), "JSON")


def parse_toml(text: str) -> Dict[str, Any]:
    return tomllib.loads(text)


def parse_ini(text: str) -> Dict[str, Any]:
    """Parse INI text into ``section.key`` entries."""
    parser = configparser.ConfigParser(interpolation=None)
    parser.read_string(text)
    flat: Dict[str, Any] = {}
    for section in parser.sections():
        for key, value in parser.items(section):
            flat[f"{section}.{key}"] = value
    return flat


def _expand(value: str, seen: Dict[str, str]) -> str:
    def lookup(match: "re.Match[str]") -> str:
        name = match.group(1)
        return os.environ.get(name, seen.get(name, ""))

    value = _BRACED_VAR.sub(lookup, value)
    return _SIMPLE_VAR.sub(lookup, value)


def _parse_env_line(line: str, seen: Dict[str, str]) -> Optional[Tuple[str, str]]:
    line = line.strip()
    if not line or line.startswith("#"):
        return None
    match = _ENV_LINE.match(line)
    if not match:
        return None
    key, value = match.groups()

    if value.startswith('"') and value.endswith('"') and len(value) >= 2:
        value = value[1:-1]
        value = (
            value.replace('\\"', '"')
            .replace("\\n", "\n")
            .replace("\\r", "\r")
            .replace("\\t", "\t")
        )
        return key, _expand(value, seen)
    if value.startswith("'") and value.endswith("'") and len(value) >= 2:
        # single quotes are literal
        return key, value[1:-1]
    return key, _expand(value, seen)


def parse_env(text: str) -> Dict[str, Any]:
    """Parse ``KEY=VALUE`` lines.

    Comments and blank lines are skipped, an ``export`` prefix is accepted,
    double-quoted values get escape handling, and ``$VAR``/``${VAR}`` expand
    from the process environment, then from keys defined earlier in the file.
    The process environment itself is never modified.
    """
    values: Dict[str, str] = {}
    for line in text.splitlines():
        parsed = _parse_env_line(line, values)
        if parsed:
            key, value = parsed
            values[key] = value
    return dict(values)


_PARSERS: Dict[str, Parser] = {
    "yaml": parse_yaml,
    "yml": parse_yaml,
    "json": parse_json,
    "toml": parse_toml,
    "ini": parse_ini,
    "env": parse_env,
}


def register_parser(file_type: str, parser: Parser) -> None:
    """Register (or replace) the parser used for ``file_type``."""
    _PARSERS[file_type.lower()] = parser


def get_parser(file_type: str) -> Optional[Parser]:
    return _PARSERS.get(file_type.lower())


def supported_types() -> List[str]:
    return sorted(_PARSERS)


def iter_hierarchical(
    data: Dict[str, Any],
    parent: str = "",
    depth: Optional[int] = None,
) -> Iterator[Tuple[str, Any]]:
    """Flatten nested dictionaries using dot-notation up to optional depth.

    - Lists are emitted as-is.
    - Empty dictionaries are emitted as leaves so the key is not lost.
    """
    if depth is not None and depth < 0:
        return

    for key, value in data.items():
        full_key = str(key) if not parent else f"{parent}.{key}"
        if isinstance(value, dict) and value and (depth is None or depth > 0):
            next_depth = None if depth is None else depth - 1
            yield from iter_hierarchical(value, full_key, next_depth)
        else:
            yield full_key, value


def flatten(data: Dict[str, Any], depth: Optional[int] = None) -> Dict[str, Any]:
    return {k: v for k, v in iter_hierarchical(data, depth=depth)}
