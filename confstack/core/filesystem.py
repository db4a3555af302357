"""Filesystem capability used by file-backed sources."""

from __future__ import annotations

import os
import posixpath
from pathlib import Path
from typing import Dict, Optional, Protocol, Union


class FileSystem(Protocol):
    """The three filesystem operations a file-backed source needs."""

    def abspath(self, path: str) -> str:
        """Resolve ``path`` to an absolute path.

        Raises:
            OSError: If the path cannot be resolved.
        """
        ...

    def exists(self, path: str) -> bool:
        ...

    def read_bytes(self, path: str) -> bytes:
        ...

    def join(self, *parts: str) -> str:
        ...


class OsFileSystem:
    """FileSystem backed by the operating system."""

    def abspath(self, path: str) -> str:
        # os.getcwd() raises when the working directory was removed
        if os.path.isabs(path):
            return os.path.normpath(path)
        return os.path.normpath(os.path.join(os.getcwd(), path))

    def exists(self, path: str) -> bool:
        return Path(path).is_file()

    def read_bytes(self, path: str) -> bytes:
        return Path(path).read_bytes()

    def join(self, *parts: str) -> str:
        return os.path.join(*parts)


class MemoryFileSystem:
    """In-memory POSIX-style FileSystem for deterministic tests.

    Args:
        files: Mapping of absolute path to file contents.
        cwd: Working directory used to resolve relative paths. ``None``
            models a process whose working directory is gone, so every
            relative path fails to resolve.
    """

    def __init__(
        self,
        files: Optional[Dict[str, Union[str, bytes]]] = None,
        cwd: Optional[str] = "/",
    ):
        self.cwd = cwd
        self._files: Dict[str, bytes] = {}
        for path, content in (files or {}).items():
            self.write(path, content)

    def write(self, path: str, content: Union[str, bytes]) -> None:
        data = content.encode("utf-8") if isinstance(content, str) else content
        self._files[posixpath.normpath(path)] = data

    def abspath(self, path: str) -> str:
        if posixpath.isabs(path):
            return posixpath.normpath(path)
        if self.cwd is None:
            raise FileNotFoundError(f"cannot resolve {path!r}: no working directory")
        return posixpath.normpath(posixpath.join(self.cwd, path))

    def exists(self, path: str) -> bool:
        return posixpath.normpath(path) in self._files

    def read_bytes(self, path: str) -> bytes:
        try:
            return self._files[posixpath.normpath(path)]
        except KeyError:
            raise FileNotFoundError(path) from None

    def join(self, *parts: str) -> str:
        return posixpath.join(*parts)
