"""
Output destinations for dumped SQL text.
"""

import gzip
import logging
from pathlib import Path
from typing import Iterable, Optional, Protocol, TextIO

from .errors import WriteError


class Destination(Protocol):
    """Anything that can receive dumped lines."""

    def write_lines(self, lines: list[str]) -> None: ...

    def close(self) -> None: ...


class FileDestination:
    """Appends lines to a file, optionally gzip-compressed.

    The file is never truncated; an existing dump is extended.
    """

    def __init__(self, path: str | Path, compress: bool = False):
        self.path = Path(path)
        self.compress = compress
        if compress and self.path.suffix != '.gz':
            self.path = Path(str(self.path) + '.gz')
        self._handle: Optional[TextIO] = None

    def _open(self) -> TextIO:
        """Open output file with optional compression."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            if self.compress:
                return gzip.open(self.path, 'at', encoding='utf-8')
            return open(self.path, 'a', encoding='utf-8')
        except OSError as e:
            raise WriteError(f"Cannot open '{self.path}' for writing: {e}") from e

    def write_lines(self, lines: list[str]) -> None:
        if self._handle is None:
            self._handle = self._open()
        try:
            for line in lines:
                self._handle.write(f"{line}\n")
        except OSError as e:
            raise WriteError(f"Failed writing to '{self.path}': {e}") from e

    def close(self) -> None:
        """Flush and close the file."""
        if self._handle is None:
            return
        handle, self._handle = self._handle, None
        try:
            handle.flush()
            handle.close()
        except OSError as e:
            raise WriteError(f"Failed to flush '{self.path}': {e}") from e
        logging.debug(f"Closed output file {self.path}")


class MemoryDestination:
    """Collects the lines of the table currently being dumped."""

    def __init__(self):
        self.lines: list[str] = []

    def write_lines(self, lines: list[str]) -> None:
        self.lines.extend(lines)

    def reset(self) -> None:
        self.lines = []

    def take(self) -> list[str]:
        """Hand the collected lines to the caller and start empty."""
        lines, self.lines = self.lines, []
        return lines

    def close(self) -> None:
        pass


class OutputSink:
    """Fans every write out to all configured destinations."""

    def __init__(
        self,
        file: Optional[FileDestination] = None,
        memory: Optional[MemoryDestination] = None
    ):
        self.file = file
        self.memory = memory

    @classmethod
    def for_options(
        cls,
        output_file: Optional[str | Path],
        return_from_function: bool,
        compress: bool = False
    ) -> "OutputSink":
        return cls(
            file=FileDestination(output_file, compress=compress) if output_file else None,
            memory=MemoryDestination() if return_from_function else None
        )

    @property
    def destinations(self) -> list[Destination]:
        return [dest for dest in (self.file, self.memory) if dest is not None]

    def write(self, lines: str | Iterable[str], in_memory: bool = True) -> None:
        """Write lines to every destination; ``in_memory=False`` skips the memory one."""
        if isinstance(lines, str):
            lines = [lines]
        else:
            lines = list(lines)
        for destination in self.destinations:
            if destination is self.memory and not in_memory:
                continue
            destination.write_lines(lines)

    def start_table(self) -> None:
        """Begin collecting a new table's text in memory."""
        if self.memory is not None:
            self.memory.reset()

    def finish_table(self) -> Optional[str]:
        """Return the collected text of the current table, if kept in memory."""
        if self.memory is None:
            return None
        return '\n'.join(self.memory.take())

    def close(self) -> None:
        for destination in self.destinations:
            destination.close()
