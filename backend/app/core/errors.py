"""Domain exceptions raised by the loader services.

API routes translate these into HTTP responses; the CLI prints them.
"""
from typing import Any


class LoaderError(Exception):
    """Base class for all loader errors."""


class ProfileExistsError(LoaderError):
    def __init__(self, name: str):
        super().__init__(f"A profile named '{name}' already exists")
        self.name = name


class ProfileNotFoundError(LoaderError):
    def __init__(self, name: str):
        super().__init__(f"No profile named '{name}'")
        self.name = name


class ProfileValidationError(LoaderError):
    """Raised when settings are saved while validation violations exist."""

    def __init__(self, violations: list[Any]):
        codes = ", ".join(v.code for v in violations)
        super().__init__(f"Settings are invalid: {codes}")
        self.violations = violations


class PathConflictError(LoaderError):
    """Two dotted paths in one mapped object overlap (one is a prefix of the other)."""

    def __init__(self, path: str, other: str):
        super().__init__(f"Path '{path}' conflicts with '{other}'")
        self.path = path
        self.other = other


class AlmaApiError(LoaderError):
    """A users API call failed.

    ``payload`` holds the decoded JSON error body when the server sent one.
    """

    def __init__(self, message: str, status_code: int | None = None, payload: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


class ArrayIndexError(LoaderError):
    """A ``Header[N]`` column addresses a list position above the allowed maximum."""

    def __init__(self, column: str, index: int, maximum: int):
        super().__init__(f"Column '{column}' index {index} exceeds the maximum of {maximum}")
        self.column = column
        self.index = index
        self.maximum = maximum
