"""
Parsers for kernel module information.

This module contains the line parser for /proc/modules entries and a lazy
reader that walks the registry (or a saved, optionally zstd-compressed,
snapshot of it) one line at a time.

Each /proc/modules line has the layout:

    module_name size ref_count used_by state address [annotations]

Only the name, the size and the used_by column are extracted.
"""

import io
import os
import re
from typing import BinaryIO, Iterable, List, Optional, Union

import zstandard as zstd

from .errors import (InvalidNumberError, MissingFieldError, ModuleError,
                     ModuleParseError, ModuleReadError)
from .models import KernelModule

PROC_MODULES_PATH = '/proc/modules'

# Sizes are reported as unsigned 64-bit values
MAX_MODULE_SIZE = 2 ** 64 - 1

# Optional leading plus sign, then ASCII digits only. int() alone would
# also take underscores, whitespace and non-ASCII digits.
_SIZE_RE = re.compile(r'\+?[0-9]+')

PathType = Union[str, "os.PathLike[str]"]


class ModuleParser:
    """Parser for loadable kernel modules from /proc/modules."""

    @staticmethod
    def parse_line(line: str) -> KernelModule:
        """
        Parse a single /proc/modules-like line.

        Fields are separated by exactly one space. The ref_count, state,
        address and any trailing annotations are ignored.

        Args:
            line: One registry line, with or without its line terminator

        Returns:
            KernelModule: The parsed module

        Raises:
            MissingFieldError: If the name, size or used_by column is absent
            InvalidNumberError: If the size is not an unsigned 64-bit integer
        """
        if line.endswith('\n'):
            line = line[:-1]
            if line.endswith('\r'):
                line = line[:-1]

        parts = line.split(' ')

        name = parts[0]
        if not name:
            raise MissingFieldError('name')

        if len(parts) < 2:
            raise MissingFieldError('size')
        size_str = parts[1]
        if not _SIZE_RE.fullmatch(size_str):
            raise InvalidNumberError('size', size_str)
        size = int(size_str)
        if size > MAX_MODULE_SIZE:
            raise InvalidNumberError('size', size_str)

        # Skip ref_count
        if len(parts) < 4:
            raise MissingFieldError('used_by')
        deps_str = parts[3]

        # Dependencies are comma-separated with a trailing comma, '-' if none
        if deps_str == '-':
            dependents = ()
        else:
            dependents = tuple(dep for dep in deps_str.split(',') if dep)

        return KernelModule(name, size, dependents)

    @staticmethod
    def parse_lines(lines: Iterable[str]) -> List[KernelModule]:
        """
        Parse every line of a /proc/modules-like source.

        Stops at the first malformed line; no modules are returned in that case.

        Raises:
            ModuleParseError: For the first line that fails to parse
        """
        return [ModuleParser.parse_line(line) for line in lines]

    @staticmethod
    def parse_proc_modules(path: PathType = PROC_MODULES_PATH) -> List[KernelModule]:
        """
        Collect all modules listed in the registry at ``path``.

        Returns:
            List[KernelModule]: Modules in registry order

        Raises:
            FileNotFoundError: If the registry doesn't exist
            PermissionError: If unable to open the registry
            ModuleReadError: If reading fails part way through
            ModuleParseError: For the first malformed line
        """
        return ModuleIter(path).collect()


class ZstdSnapshotReader(io.RawIOBase):
    """
    Raw stream decompressing a zstd-compressed registry snapshot.

    Unlike ``ZstdDecompressor().stream_reader``, running out of input in the
    middle of a frame is an error rather than a quiet end of stream, so a
    truncated snapshot never passes for a complete one. Concatenated frames
    are read back to back.
    """

    def __init__(self, compressed_file: BinaryIO,
                 read_size: int = zstd.DECOMPRESSION_RECOMMENDED_INPUT_SIZE):
        super().__init__()
        self._file = compressed_file
        self._read_size = read_size
        self._dctx = zstd.ZstdDecompressor()
        self._dobj = self._dctx.decompressobj()
        self._in_frame = False
        self._pending = b''

    def readable(self) -> bool:
        return True

    def readinto(self, b) -> int:
        while not self._pending:
            chunk = self._file.read(self._read_size)
            if not chunk:
                if self._in_frame:
                    raise zstd.ZstdError('truncated zstd frame: input ended before end of frame')
                return 0
            self._pending = self._decompress(chunk)

        size = min(len(b), len(self._pending))
        b[:size] = self._pending[:size]
        self._pending = self._pending[size:]
        return size

    def _decompress(self, chunk: bytes) -> bytes:
        output = []
        while chunk:
            self._in_frame = True
            output.append(self._dobj.decompress(chunk))
            if not self._dobj.eof:
                break
            # Frame finished; anything left over starts the next one
            self._in_frame = False
            chunk = self._dobj.unused_data
            self._dobj = self._dctx.decompressobj()
        return b''.join(output)

    def close(self):
        if not self.closed:
            self._file.close()
        super().close()


class ModuleIter:
    """
    Read module entries lazily from a /proc/modules-like byte stream.

    Iterating yields one item per line: a KernelModule, or the
    ModuleParseError for a malformed line. Malformed lines do not end the
    iteration. A failed read yields a single ModuleReadError, after which
    the reader is closed and exhausted. Each instance scans its source once;
    create a new one to scan again.

    Usage:
        with ModuleIter() as modules:
            for item in modules:
                ...
    """

    def __init__(self, path: PathType = PROC_MODULES_PATH,
                 stream: Optional[BinaryIO] = None):
        """
        Open the registry for reading.

        Args:
            path: Registry or snapshot path; ``.zst`` files are decompressed
                on the fly
            stream: Already-open binary stream to read instead of ``path``.
                The reader takes ownership and closes it when done.

        Raises:
            OSError: If ``path`` cannot be opened
        """
        self.path = path
        if stream is None:
            stream = self._open(path)
        self._stream = stream
        self._line = b''

    @classmethod
    def from_stream(cls, stream: BinaryIO, name: str = '<stream>') -> 'ModuleIter':
        """Create a reader over an already-open binary stream."""
        return cls(path=name, stream=stream)

    @staticmethod
    def _open(path: PathType) -> BinaryIO:
        if not os.fspath(path).endswith('.zst'):
            return open(path, 'rb')

        compressed_file = open(path, 'rb')
        try:
            reader = ZstdSnapshotReader(compressed_file)
        except Exception:
            compressed_file.close()
            raise
        return io.BufferedReader(reader)

    @property
    def closed(self) -> bool:
        return self._stream is None

    def close(self):
        """Release the underlying stream. Safe to call more than once."""
        if self._stream is not None:
            stream, self._stream = self._stream, None
            stream.close()

    def __enter__(self) -> 'ModuleIter':
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def __iter__(self) -> 'ModuleIter':
        return self

    def __next__(self) -> Union[KernelModule, ModuleError]:
        if self._stream is None:
            raise StopIteration

        try:
            self._line = self._stream.readline()
            line = self._line.decode('utf-8')
        except (OSError, UnicodeDecodeError, zstd.ZstdError) as e:
            self.close()
            return ModuleReadError(e)

        if not self._line:
            self.close()
            raise StopIteration

        try:
            return ModuleParser.parse_line(line)
        except ModuleParseError as e:
            return e

    def collect(self) -> List[KernelModule]:
        """
        Drain the reader into a list, closing it afterwards.

        Raises:
            ModuleReadError: If reading fails part way through
            ModuleParseError: For the first malformed line
        """
        modules = []
        with self:
            for item in self:
                if isinstance(item, ModuleError):
                    raise item
                modules.append(item)
        return modules

    def __repr__(self) -> str:
        state = 'closed' if self.closed else 'open'
        return f"ModuleIter(path='{self.path}', {state})"


def all_modules(path: PathType = PROC_MODULES_PATH) -> List[KernelModule]:
    """Return every module currently listed in the registry at ``path``."""
    return ModuleParser.parse_proc_modules(path)
