"""Application identity consumed by the logging and startup routines."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from . import log
from .errors import Code, MissingAppName


class App(Protocol):
    def name(self) -> str:
        ...


@dataclass(frozen=True)
class StaticApp:
    """An ``App`` with a fixed identity."""

    app_name: str
    version: str = ""
    environment: str = ""

    def name(self) -> str:
        return self.app_name


def initialize(app: App) -> None:
    """Validate ``app`` and stamp its identity onto every log record.

    Raises:
        MissingAppName: If the application reports an empty name.
    """
    app_name = app.name()
    if not app_name:
        raise MissingAppName(
            "Application name is required", code=Code.CONFIG_MISSING, component="app"
        )
    log.initialize(
        log.LoggerConfig(
            app_name=app_name,
            app_version=getattr(app, "version", ""),
            environment=getattr(app, "environment", ""),
        )
    )
