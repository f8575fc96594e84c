"""
Data models for kernel modules.

This module contains the core data structure used to represent
one entry of the loaded-module registry.
"""

from dataclasses import dataclass, field
from typing import Tuple


@dataclass(frozen=True)
class KernelModule:
    """
    Represents a loaded kernel module as listed in /proc/modules.

    Attributes:
        name: Module name
        size: Module size in bytes, as reported by the kernel
        dependents: Names of the modules using this one, in registry order
    """

    name: str
    size: int
    dependents: Tuple[str, ...] = field(default_factory=tuple)

    def __str__(self) -> str:
        """Return string representation of the module."""
        deps_str = ", ".join(self.dependents) if self.dependents else "None"
        return (f"Module: {self.name}\n"
                f"  Size: {self.size} bytes\n"
                f"  Used by: {deps_str}\n")

    def to_dict(self) -> dict:
        """Convert module to dictionary representation."""
        return {
            'name': self.name,
            'size': self.size,
            'dependents': list(self.dependents)
        }
