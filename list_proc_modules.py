#!/usr/bin/env python3
"""
Kernel Module Lister

This script parses /proc/modules (or a saved snapshot of it) to list all
currently loaded kernel modules with their size and the modules using them.
"""

import os
import sys
from typing import List

from proc_modules import (
    KernelModule, ModuleIter, ModuleParser, ModuleParseError, ModuleReadError,
    JSONFormatter, CSVFormatter, ModuleFilter, ModuleSorter, ModuleDisplay,
    PROC_MODULES_PATH, __version__
)


def read_modules_lenient(source: str, verbose: bool = False) -> List[KernelModule]:
    """
    Read all parsable modules from ``source``, warning about malformed lines.

    Raises:
        OSError: If the source cannot be opened
        ModuleReadError: If reading fails part way through
    """
    modules = []
    with ModuleIter(source) as reader:
        for lineno, item in enumerate(reader, 1):
            if isinstance(item, ModuleReadError):
                raise item
            if isinstance(item, ModuleParseError):
                print(f"Warning: {source}:{lineno}: skipping line: {item}", file=sys.stderr)
                continue
            modules.append(item)

    if verbose:
        print(f"Read {len(modules)} modules from {source}", file=sys.stderr)
    return modules


def main():
    """Main function to run the kernel module lister."""
    import argparse

    parser = argparse.ArgumentParser(
        description="List all loaded kernel modules by parsing /proc/modules",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python3 list_proc_modules.py                       # Simple list of loaded modules
  python3 list_proc_modules.py --detailed            # Detailed information
  python3 list_proc_modules.py --count               # Show only count
  python3 list_proc_modules.py --source modules.zst  # Read a saved snapshot
  python3 list_proc_modules.py --strict              # Fail on the first malformed line

  # Filtering examples
  python3 list_proc_modules.py --filter "snd*"       # Show only modules starting with 'snd'
  python3 list_proc_modules.py --min-size 50000      # Show modules >= 50KB
  python3 list_proc_modules.py --used-by snd_hda_intel  # Modules used by snd_hda_intel

  # Sorting examples
  python3 list_proc_modules.py --sort size --reverse # Largest first

  # Output format examples
  python3 list_proc_modules.py --json                # JSON output
  python3 list_proc_modules.py --csv -o modules.csv  # Save CSV to file
        """
    )

    parser.add_argument('--source', '-s', type=str, metavar='FILE',
                       default=os.environ.get('PROC_MODULES_PATH', PROC_MODULES_PATH),
                       help='Registry file to read, plain or .zst compressed '
                            '(default: $PROC_MODULES_PATH or /proc/modules)')
    parser.add_argument('--strict', action='store_true',
                       help='Stop with an error on the first malformed line')
    parser.add_argument('--detailed', '-d', action='store_true',
                       help='Show detailed information for each module')
    parser.add_argument('--count', '-c', action='store_true',
                       help='Show only the count of modules')

    # Filtering options
    parser.add_argument('--filter', '-f', type=str, metavar='PATTERN',
                       help='Filter modules by name pattern (supports wildcards)')
    parser.add_argument('--min-size', type=int, metavar='BYTES',
                       help='Show only modules with size >= specified bytes')
    parser.add_argument('--max-size', type=int, metavar='BYTES',
                       help='Show only modules with size <= specified bytes')
    parser.add_argument('--used-by', type=str, metavar='MODULE',
                       help='Show only modules used by the specified module')

    # Sorting options
    parser.add_argument('--sort', choices=ModuleSorter.SORT_FIELDS,
                       default='name', help='Sort modules by specified field (default: name)')
    parser.add_argument('--reverse', '-r', action='store_true',
                       help='Reverse sort order')

    # Output format options
    parser.add_argument('--json', action='store_true',
                       help='Output in JSON format')
    parser.add_argument('--csv', action='store_true',
                       help='Output in CSV format')
    parser.add_argument('--output', '-o', type=str, metavar='FILE',
                       help='Write output to specified file instead of stdout')
    parser.add_argument('--quiet', '-q', action='store_true',
                       help='Suppress headers and only show module data')

    # Information options
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}',
                       help='Show version information')
    parser.add_argument('--verbose', '-v', action='store_true',
                       help='Enable verbose output with additional debugging information')

    args = parser.parse_args()

    try:
        if args.verbose:
            print("Verbose mode enabled", file=sys.stderr)
            print(f"Arguments: {args}", file=sys.stderr)

        if args.strict:
            modules = ModuleParser.parse_proc_modules(args.source)
        else:
            modules = read_modules_lenient(args.source, args.verbose)

        if any([args.filter, args.min_size is not None, args.max_size is not None, args.used_by]):
            modules = ModuleFilter.filter_modules(
                modules,
                name_pattern=args.filter,
                min_size=args.min_size,
                max_size=args.max_size,
                used_by=args.used_by
            )

        modules = ModuleSorter.sort_modules(modules, args.sort, args.reverse)

        if args.count:
            print(f"Total loaded kernel modules: {len(modules)}")
            return

        if args.json:
            output_content = JSONFormatter().format(modules)
        elif args.csv:
            output_content = CSVFormatter().format(modules)
        else:
            # Standard display - capture output
            import io
            from contextlib import redirect_stdout
            f = io.StringIO()
            with redirect_stdout(f):
                ModuleDisplay.display_modules(modules, args.detailed, args.quiet)
            output_content = f.getvalue()

        if args.output:
            try:
                with open(args.output, 'w', encoding='utf-8') as f:
                    f.write(output_content)
                if args.verbose:
                    print(f"Output written to {args.output}", file=sys.stderr)
            except OSError as e:
                print(f"Error writing to file {args.output}: {e}", file=sys.stderr)
                sys.exit(1)
        else:
            print(output_content, end='' if output_content.endswith('\n') else '\n')

    except FileNotFoundError:
        print(f"Error: {args.source} not found. Are you running on a Linux system?", file=sys.stderr)
        sys.exit(1)
    except PermissionError:
        print(f"Error: Permission denied reading {args.source}", file=sys.stderr)
        sys.exit(1)
    except ModuleParseError as e:
        print(f"Error parsing {args.source}: {e}", file=sys.stderr)
        sys.exit(1)
    except (ModuleReadError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nOperation cancelled by user", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Unexpected error: {e}", file=sys.stderr)
        if args.verbose:
            import traceback
            traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
