#!/usr/bin/env python3
"""
Example usage of the proc_modules package.

This script demonstrates how to use the proc_modules package
to parse, filter, and format kernel module information.
"""

from proc_modules import (
    ModuleIter, ModuleParser, ModuleParseError, ModuleReadError,
    JSONFormatter, ModuleFilter, ModuleSorter, ModuleDisplay
)


def main():
    """Demonstrate the proc_modules package functionality."""

    print("=== Proc Modules Package Example ===\n")

    # 1. Parse a single line without touching the live registry
    print("1. Parsing a single line...")
    module = ModuleParser.parse_line(
        "snd_hda_codec 126976 4 snd_hda_codec_hdmi,snd_hda_codec_realtek, Live 0x0000000000000000")
    print(f"   {module.name}: {module.size} bytes, used by {list(module.dependents)}")

    # 2. Walk the registry lazily, one entry at a time
    print("\n2. Iterating over /proc/modules...")
    loaded = []
    with ModuleIter() as reader:
        for item in reader:
            if isinstance(item, (ModuleParseError, ModuleReadError)):
                print(f"   Skipping: {item}")
                continue
            loaded.append(item)
    print(f"   Found {len(loaded)} loaded modules")

    # 3. Filter and sort
    print("\n3. Sorting modules by size (largest first)...")
    sorted_modules = ModuleSorter.sort_modules(loaded, sort_by='size', reverse=True)
    print("   Top 5 largest modules:")
    for i, module in enumerate(sorted_modules[:5], 1):
        size_str = ModuleDisplay.format_size(module.size)
        print(f"   {i}. {module.name}: {size_str}")

    print("\n4. Filtering modules by name pattern (snd*)...")
    sound_modules = ModuleFilter.filter_modules(loaded, name_pattern="snd*")
    print(f"   Found {len(sound_modules)} sound modules")

    # 5. Full snapshot, failing on the first bad line
    print("\n5. Fetching the full snapshot...")
    snapshot = ModuleParser.parse_proc_modules()
    json_output = JSONFormatter().format(snapshot)
    print(f"   JSON output: {len(json_output)} characters")

    print("\n=== Example completed successfully! ===")


if __name__ == "__main__":
    main()
