"""Error codes and structured errors for confstack."""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional


class Code(str, Enum):
    """Standardized error codes grouped by number range."""

    # General (1000-1099)
    UNKNOWN = "1000"
    INTERNAL = "1001"
    CONFIGURATION = "1002"
    INITIALIZATION = "1003"

    # Validation (1400-1499)
    VALIDATION = "1400"
    INVALID_INPUT = "1401"
    INVALID_FORMAT = "1402"
    MISSING_FIELD = "1403"
    INVALID_STATE = "1404"

    # External services (1500-1599)
    EXTERNAL = "1500"
    THIRD_PARTY = "1502"

    # Resources (1700-1799)
    RESOURCE = "1700"
    NOT_FOUND = "1701"

    # Configuration (1800-1899)
    CONFIG = "1800"
    CONFIG_MISSING = "1801"
    CONFIG_INVALID = "1802"
    CONFIG_TYPE = "1803"
    CONFIG_FILE = "1804"
    CONFIG_ENVIRONMENT = "1805"
    CONFIG_OVERRIDE = "1806"
    CONFIG_DEPENDENCY = "1807"
    CONFIG_AGGREGATION = "1808"


CODE_DETAILS: Dict[Code, str] = {
    Code.UNKNOWN: "Unknown or unexpected error occurred",
    Code.INTERNAL: "Internal error",
    Code.CONFIGURATION: "System configuration error detected",
    Code.INITIALIZATION: "Application initialization failed",
    Code.VALIDATION: "Input validation failed",
    Code.INVALID_INPUT: "Invalid input data provided",
    Code.INVALID_FORMAT: "Data format is incorrect or unsupported",
    Code.MISSING_FIELD: "Required field is missing or empty",
    Code.INVALID_STATE: "Operation not allowed in current state",
    Code.EXTERNAL: "External service operation failed",
    Code.THIRD_PARTY: "Third-party service is unavailable",
    Code.RESOURCE: "Resource operation failed",
    Code.NOT_FOUND: "Requested resource could not be found",
    Code.CONFIG: "Configuration error detected",
    Code.CONFIG_MISSING: "Required configuration is missing",
    Code.CONFIG_INVALID: "Configuration value is invalid or out of range",
    Code.CONFIG_TYPE: "Configuration parameter has wrong data type",
    Code.CONFIG_FILE: "Configuration file could not be read or parsed",
    Code.CONFIG_ENVIRONMENT: "Environment configuration variable error",
    Code.CONFIG_OVERRIDE: "Conflicting configuration sources detected",
    Code.CONFIG_DEPENDENCY: "Missing configuration dependency",
    Code.CONFIG_AGGREGATION: "Configuration sources could not be aggregated",
}

_CATEGORIES: Dict[str, range] = {
    "general": range(1000, 1100),
    "validation": range(1400, 1500),
    "external": range(1500, 1600),
    "resource": range(1700, 1800),
    "config": range(1800, 1900),
}
_CATEGORY_ALIASES = {"configuration": "config"}


def get_code_description(code: object) -> str:
    """Return the human-readable description for ``code``."""
    try:
        return CODE_DETAILS[Code(code)]
    except (ValueError, KeyError):
        return "Unknown error code"


def is_valid_code(code: object) -> bool:
    try:
        return Code(code) in CODE_DETAILS
    except ValueError:
        return False


def codes_by_category(category: str) -> List[Code]:
    """Return the codes whose number falls in the range of ``category``.

    Unknown categories yield an empty list.
    """
    name = category.lower()
    name = _CATEGORY_ALIASES.get(name, name)
    numbers = _CATEGORIES.get(name)
    if numbers is None:
        return []
    return [code for code in Code if int(code.value) in numbers]


class ConfstackError(Exception):
    """Structured error carrying a code, the originating component and a cause.

    Attributes:
        code: Taxonomy code for the failure.
        message: Human-readable summary.
        cause: Underlying exception, if any. Also set as ``__cause__``.
        component: Name of the component that raised the error.
    """

    default_code: Code = Code.UNKNOWN

    def __init__(
        self,
        message: str,
        *,
        code: Optional[Code] = None,
        cause: Optional[BaseException] = None,
        component: str = "",
    ):
        super().__init__(message)
        self.code = code or self.default_code
        self.message = message
        self.cause = cause
        self.component = component
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        if self.cause is None:
            return self.message
        return f"{self.message}: {self.cause}"

    @property
    def description(self) -> str:
        return get_code_description(self.code)

    def root_cause(self) -> Optional[BaseException]:
        """Follow the ``__cause__`` chain down to the original exception."""
        err: Optional[BaseException] = self.cause
        while err is not None and err.__cause__ is not None:
            err = err.__cause__
        return err


class PathResolutionError(ConfstackError):
    """A candidate search path could not be made absolute."""

    default_code = Code.CONFIG_FILE

    def __init__(self, message: str, *, path: str = "", **kwargs):
        super().__init__(message, **kwargs)
        self.path = path


class RequiredFileNotFound(ConfstackError):
    default_code = Code.CONFIG_MISSING

    def __init__(self, message: str, *, file_name: str = "", **kwargs):
        super().__init__(message, **kwargs)
        self.file_name = file_name


class ConfigParseError(ConfstackError):
    default_code = Code.CONFIG_FILE


class UnsupportedFileType(ConfstackError):
    default_code = Code.CONFIG_INVALID


class SourceReadError(ConfstackError):
    """A registered source failed while the aggregator was reading it."""

    default_code = Code.CONFIG_AGGREGATION


class SourceUnavailable(ConfstackError):
    default_code = Code.THIRD_PARTY


class MissingAppName(ConfstackError):
    default_code = Code.CONFIG_MISSING


_KINDS: Dict[Code, type] = {
    Code.CONFIG_AGGREGATION: SourceReadError,
    Code.THIRD_PARTY: SourceUnavailable,
}


def new_error(
    code: Code,
    cause: Optional[BaseException],
    message: str,
    component: str,
) -> ConfstackError:
    """Build a structured error for ``code``.

    Codes with a dedicated kind (for example ``Code.CONFIG_AGGREGATION``)
    produce that subclass; every other code produces a plain
    ``ConfstackError``.
    """
    kind = _KINDS.get(code, ConfstackError)
    return kind(message, code=code, cause=cause, component=component)
