"""Errors raised or yielded while reading the module registry."""

from typing import Optional


class ModuleError(Exception):
    """Base error for this package."""


class ModuleParseError(ModuleError):
    """Raised when a registry line cannot be parsed into a KernelModule."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field


class MissingFieldError(ModuleParseError):
    """A line has no value at the position of a required field."""

    def __init__(self, field: str):
        super().__init__(field, f"{field} not found")


class InvalidNumberError(ModuleParseError):
    """A numeric field is present but is not a non-negative 64-bit integer."""

    def __init__(self, field: str, value: str = ""):
        super().__init__(field, f"module {field} is not a number: {value!r}")
        self.value = value


class ModuleReadError(ModuleError):
    """Reading from the registry stream failed part way through."""

    def __init__(self, cause: Optional[BaseException]):
        super().__init__(f"Error reading module registry: {cause}")
        self.cause = cause
        self.__cause__ = cause
