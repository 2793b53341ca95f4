"""Readable byte streams fed by the output of another program."""

from __future__ import annotations

import io
import subprocess
from collections.abc import Sequence

_CLOSE_TIMEOUT = 5.0  # seconds to wait for the child before killing it


class ProcessStream(io.RawIOBase):
    """Raw stream over the combined stdout and stderr of a started program.

    The program is run with ``args`` as its arguments. Wrap the stream in
    :class:`io.BufferedReader` or :class:`io.TextIOWrapper` for line access.
    """

    def __init__(self, program: str, args: Sequence[str] = ()) -> None:
        super().__init__()
        self.program = program
        self.args = tuple(args)
        self._process = subprocess.Popen(
            [program, *self.args],
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            bufsize=0,
        )
        self._pipe = self._process.stdout

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:
        """Fill ``buffer`` with the next bytes; 0 means end of output."""
        if self.closed:
            raise ValueError("read from closed process stream")
        count = self._pipe.readinto(buffer)
        return count if count is not None else 0

    @property
    def returncode(self) -> int | None:
        """Exit status of the program once it has finished."""
        return self._process.poll()

    def close(self) -> None:
        """Close the pipe and reap the program."""
        if self.closed:
            return
        try:
            self._pipe.close()
            try:
                self._process.wait(timeout=_CLOSE_TIMEOUT)
            except subprocess.TimeoutExpired:
                self._process.kill()
                self._process.wait()
        finally:
            super().close()


class GzipStream(ProcessStream):
    """Decompressed contents of a gzip file, produced by the gzip program."""

    def __init__(self, path: str) -> None:
        super().__init__("gzip", ["-q", "-d", "-c", str(path)])