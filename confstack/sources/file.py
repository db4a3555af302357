"""File-backed configuration source searched across candidate directories."""

from __future__ import annotations

import configparser
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .. import log
from ..core.filesystem import FileSystem, OsFileSystem
from ..core.parsers import flatten as flatten_mapping, get_parser, supported_types
from ..errors import (
    Code,
    ConfigParseError,
    PathResolutionError,
    RequiredFileNotFound,
    UnsupportedFileType,
)

COMPONENT = "config"

# decode errors from utf-8, json and tomllib are ValueErrors
_PARSE_ERRORS = (OSError, ValueError, yaml.YAMLError, configparser.Error)


class FileConfigSource:
    """Configuration source for ``<name>.<file_type>`` under search paths.

    The first candidate directory holding the file wins. Candidate paths are
    made absolute at construction time; nothing else touches the filesystem
    until ``read()``.

    Args:
        search_paths: Candidate base directories, in lookup order. A list
            is normalized in place to absolute paths; any other sequence is
            replaced by a new list.
        required: Whether a missing or broken file is an error.
        name: Logical config name, the file stem.
        file_type: Extension and parser selector (``yaml``, ``json``, ...).
        priority: Merge priority; higher wins.
        fs: Filesystem capability. Defaults to the real OS filesystem.
        flatten: Flatten nested mappings to dotted keys.

    Raises:
        PathResolutionError: A required source has an unresolvable path.
        UnsupportedFileType: No parser is registered for ``file_type``.
    """

    def __init__(
        self,
        search_paths: Sequence[str],
        required: bool,
        name: str,
        file_type: str,
        priority: int,
        *,
        fs: Optional[FileSystem] = None,
        flatten: bool = True,
    ):
        self.search_paths: List[str] = search_paths  # type: ignore[assignment]
        self.required = required
        self.name = name
        self.file_type = file_type
        self._priority = priority
        self.fs: FileSystem = fs if fs is not None else OsFileSystem()
        self.flatten = flatten

        if get_parser(file_type) is None:
            raise UnsupportedFileType(
                f"Unsupported config file type {file_type!r}; expected one of {supported_types()}",
                component=COMPONENT,
            )
        self._resolve_paths()

    def _resolve_paths(self) -> None:
        resolved: List[str] = []
        for path in self.search_paths:
            try:
                resolved.append(self.fs.abspath(path))
            except (OSError, ValueError) as exc:
                if self.required:
                    raise PathResolutionError(
                        f"File Config Path Error: {path}",
                        path=path,
                        cause=exc,
                        component=COMPONENT,
                    ) from exc
                log.warn(
                    "Failed to resolve absolute path for optional config file",
                    {
                        "path": path,
                        "error": str(exc),
                        "file_name": self.name,
                        "file_type": self.file_type,
                        "code": Code.CONFIG_FILE.value,
                    },
                )
        if isinstance(self.search_paths, list):
            self.search_paths[:] = resolved
        else:
            self.search_paths = resolved

    @property
    def file_name(self) -> str:
        return f"{self.name}.{self.file_type}"

    def priority(self) -> int:
        return self._priority

    def candidates(self) -> List[str]:
        """Full file paths that ``read()`` will probe, in order."""
        return [self.fs.join(base, self.file_name) for base in self.search_paths]

    def locate(self) -> Optional[str]:
        for candidate in self.candidates():
            if self.fs.exists(candidate):
                return candidate
        return None

    def read(self) -> Dict[str, Any]:
        """Parse the first existing candidate file.

        Returns:
            The parsed mapping, or ``{}`` for an optional source whose file is
            absent or unreadable.

        Raises:
            RequiredFileNotFound: A required file exists in no candidate.
            ConfigParseError: A required file could not be read or parsed.
        """
        path = self.locate()
        if path is None:
            if self.required:
                raise RequiredFileNotFound(
                    f"Required config file not found: {self.file_name}",
                    file_name=self.file_name,
                    component=COMPONENT,
                )
            log.warn(
                "Optional config file not found",
                {
                    "file_name": self.file_name,
                    "file_type": self.file_type,
                    "search_paths": list(self.search_paths),
                    "code": Code.CONFIG_MISSING.value,
                },
            )
            return {}

        try:
            data = self._parse(path)
        except _PARSE_ERRORS as exc:
            return self._parse_failed(path, exc)

        if self.flatten:
            return flatten_mapping(data)
        return data

    def _parse(self, path: str) -> Dict[str, Any]:
        parser = get_parser(self.file_type)
        text = self.fs.read_bytes(path).decode("utf-8")
        return parser(text)

    def _parse_failed(self, path: str, exc: Exception) -> Dict[str, Any]:
        if self.required:
            raise ConfigParseError(
                f"Config file could not be parsed: {path}",
                cause=exc,
                component=COMPONENT,
            ) from exc
        log.warn(
            "Failed to read optional config file",
            {
                "path": path,
                "error": str(exc),
                "file_name": self.name,
                "file_type": self.file_type,
                "code": Code.CONFIG_FILE.value,
            },
        )
        return {}

    def __repr__(self) -> str:
        return (
            f"FileConfigSource(name={self.name!r}, file_type={self.file_type!r}, "
            f"priority={self._priority}, required={self.required})"
        )
