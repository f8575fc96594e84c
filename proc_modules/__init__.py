"""
Proc Modules Package

Structured, lazy access to the kernel's loaded-module registry (/proc/modules).
Provides functionality to parse, filter, and format kernel module information.
"""

from .models import KernelModule
from .errors import (ModuleError, ModuleParseError, MissingFieldError,
                     InvalidNumberError, ModuleReadError)
from .parsers import ModuleParser, ModuleIter, all_modules, PROC_MODULES_PATH
from .formatters import JSONFormatter, CSVFormatter
from .filters import ModuleFilter, ModuleSorter, ModuleDisplay

__version__ = "1.0.0"

__all__ = [
    "KernelModule",
    "ModuleError",
    "ModuleParseError",
    "MissingFieldError",
    "InvalidNumberError",
    "ModuleReadError",
    "ModuleParser",
    "ModuleIter",
    "all_modules",
    "PROC_MODULES_PATH",
    "JSONFormatter",
    "CSVFormatter",
    "ModuleFilter",
    "ModuleSorter",
    "ModuleDisplay"
]
