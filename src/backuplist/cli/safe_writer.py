"""Safe output writing utilities for backuplist CLI.

Paths are written as raw bytes in the filesystem encoding, so file names that
are not valid UTF-8 reach the archiver unchanged. Writes are buffered and
flushed in blocks, and stop as soon as a broken pipe or interrupt is noticed.
"""

import errno
import os
import types
from pathlib import Path
from typing import List, Optional, Type, Union

from backuplist.cli.signal_handler import signal_handler

DEFAULT_BUFFER_SIZE = 64 * 1024


class SafeWriter:
    """Buffered, signal-aware writer for the path listing.

    The writer accepts either an already open file descriptor, typically stdout,
    or a path to a file that it opens and owns. Text is encoded with
    ``os.fsencode`` so undecodable file names round-trip.

    Attributes:
        file: Either a file path or file descriptor for output.
        fd: The actual file descriptor being written to.
        buffer_size: Number of bytes collected before they are written out.
    """

    def __init__(self, file: Union[int, Path, str], buffer_size: int = DEFAULT_BUFFER_SIZE):
        """Initialize the safe writer.

        Args:
            file: Either a file descriptor (int) or a path for writing output.
            buffer_size: Number of bytes to collect before writing. Zero writes every call immediately.

        Raises:
            TypeError: If file is neither a file descriptor nor a path.
        """
        self.file = file
        self.buffer_size = buffer_size
        self._pending: List[bytes] = []
        self._pending_size = 0
        self._closed = False

        if isinstance(file, int):
            self.fd = file
            self._file_obj = None
        elif isinstance(file, (str, os.PathLike)):
            self._file_obj = Path(file).open("wb")
            self.fd = self._file_obj.fileno()
        else:
            raise TypeError(f"Expected int, str, or PathLike, got {type(file).__name__}")

    def write(self, data: str) -> None:
        """Queue data for output, writing the buffer out once it is full.

        Raises:
            BrokenPipeError: If SIGPIPE or SIGINT was received or the pipe is broken.
            OSError: If an I/O error occurs during writing.
            ValueError: If attempting to write to a closed writer.
        """
        if self._closed:
            raise ValueError("Cannot write to closed SafeWriter")

        if signal_handler.interrupted():
            raise BrokenPipeError()

        encoded = os.fsencode(data)
        self._pending.append(encoded)
        self._pending_size += len(encoded)
        if self._pending_size >= self.buffer_size:
            self.flush()

    def flush(self) -> None:
        """Write out everything queued so far.

        Raises:
            BrokenPipeError: If the reading end of the pipe has gone away.
            OSError: If an I/O error occurs during writing.
        """
        if not self._pending:
            return
        data = b"".join(self._pending)
        self._pending = []
        self._pending_size = 0

        view = memoryview(data)
        while view:
            try:
                written = os.write(self.fd, view)
            except OSError as e:
                if e.errno == errno.EPIPE:
                    raise BrokenPipeError()
                raise
            view = view[written:]

    def close(self) -> None:
        """Flush pending output and close the file if this writer opened it.

        The writer is marked as closed even if flushing fails with a broken pipe.
        """
        if self._closed:
            return

        try:
            if not signal_handler.interrupted():
                self.flush()
        except BrokenPipeError:
            pass
        finally:
            self._pending = []
            self._closed = True
            if self._file_obj is not None:
                try:
                    self._file_obj.close()
                except OSError as e:
                    if e.errno != errno.EPIPE:
                        raise

    def __enter__(self) -> "SafeWriter":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[types.TracebackType],
    ) -> None:
        """Exit the context manager and close resources.

        If an exception is propagating, output still waiting in the buffer is
        discarded rather than written, and a failure while closing does not
        replace the original exception.
        """
        if exc_type is not None:
            self._pending = []
            self._pending_size = 0
        try:
            self.close()
        except OSError:
            if exc_type is None:
                raise
