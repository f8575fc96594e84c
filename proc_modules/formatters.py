"""
Output formatters for kernel module data.

This module contains classes for formatting kernel module information
into machine-readable output formats (JSON, CSV).
"""

import json
import csv
import io
from typing import List
from .models import KernelModule


class BaseFormatter:
    """Base class for all formatters."""

    def format(self, modules: List[KernelModule]) -> str:
        """
        Format modules into output string.

        Args:
            modules: List of loaded modules

        Returns:
            str: Formatted output
        """
        raise NotImplementedError


class JSONFormatter(BaseFormatter):
    """Formatter for JSON output."""

    def __init__(self, indent: int = 2):
        self.indent = indent

    def format(self, modules: List[KernelModule]) -> str:
        """Convert modules to JSON format."""
        data = {
            'count': len(modules),
            'modules': [module.to_dict() for module in modules]
        }
        return json.dumps(data, indent=self.indent)


class CSVFormatter(BaseFormatter):
    """Formatter for CSV output."""

    def format(self, modules: List[KernelModule]) -> str:
        """Convert modules to CSV format."""
        output = io.StringIO()
        writer = csv.writer(output)

        writer.writerow(['Name', 'Size', 'Dependents', 'Used By'])
        for module in modules:
            writer.writerow([
                module.name,
                module.size,
                len(module.dependents),
                ','.join(module.dependents)
            ])

        return output.getvalue()
