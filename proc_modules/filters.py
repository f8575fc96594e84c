"""
Filtering and sorting functionality for kernel modules.

This module contains classes for filtering, sorting and displaying
kernel module collections.
"""

import fnmatch
from typing import List, Optional
from .models import KernelModule


class ModuleFilter:
    """Filter modules based on various criteria."""

    @staticmethod
    def filter_modules(modules: List[KernelModule],
                      name_pattern: Optional[str] = None,
                      min_size: Optional[int] = None,
                      max_size: Optional[int] = None,
                      used_by: Optional[str] = None) -> List[KernelModule]:
        """
        Filter modules based on various criteria.

        Args:
            modules: List of modules to filter
            name_pattern: Wildcard pattern for module names
            min_size: Minimum size in bytes
            max_size: Maximum size in bytes
            used_by: Keep only modules whose dependents include this name

        Returns:
            List of filtered modules
        """
        filtered = []

        for module in modules:
            if name_pattern and not fnmatch.fnmatch(module.name, name_pattern):
                continue
            if min_size is not None and module.size < min_size:
                continue
            if max_size is not None and module.size > max_size:
                continue
            if used_by and used_by not in module.dependents:
                continue

            filtered.append(module)

        return filtered


class ModuleSorter:
    """Sort modules by specified field."""

    SORT_FIELDS = ('name', 'size', 'dependents')

    @staticmethod
    def sort_modules(modules: List[KernelModule],
                    sort_by: str = 'name', reverse: bool = False) -> List[KernelModule]:
        """
        Sort modules by specified field.

        Args:
            modules: List of modules to sort
            sort_by: Field to sort by ('name', 'size', 'dependents')
            reverse: Reverse sort order

        Returns:
            Sorted list of modules
        """
        def sort_key(module):
            if sort_by == 'size':
                return (module.size, module.name.lower())
            elif sort_by == 'dependents':
                return (len(module.dependents), module.name.lower())
            return (module.name.lower(),)

        return sorted(modules, key=sort_key, reverse=reverse)


class ModuleDisplay:
    """Display modules on the console."""

    @staticmethod
    def format_size(size_bytes: int) -> str:
        """Convert bytes to human readable format."""
        for unit in ['B', 'KB', 'MB', 'GB']:
            if size_bytes < 1024.0:
                return f"{size_bytes:.1f} {unit}"
            size_bytes /= 1024.0
        return f"{size_bytes:.1f} TB"

    @staticmethod
    def display_modules(modules: List[KernelModule], show_details: bool = False,
                       quiet: bool = False):
        """
        Print the given modules.

        Args:
            modules: List of KernelModule objects
            show_details: If True, show a block per module instead of a table
            quiet: If True, suppress headers and only show module data
        """
        if not quiet:
            print(f"Loaded Kernel Modules ({len(modules)} total)\n")
            print("=" * 60)

        if not show_details:
            if not quiet:
                print(f"| {'Module Name':<25} | {'Size':<10} | {'Dependents':<10} | {'Used by':<40} |")
                print("|" + "-" * 27 + "|" + "-" * 12 + "|" + "-" * 12 + "|" + "-" * 42 + "|")

            for module in modules:
                size_str = ModuleDisplay.format_size(module.size)
                used_by = ",".join(module.dependents) or '-'
                print(f"| {module.name:<25} | {size_str:<10} | {len(module.dependents):<10} | {used_by:<40} |")
        else:
            for i, module in enumerate(modules, 1):
                print(f"{i}. {module}")
