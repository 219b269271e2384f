"""Single keystroke input from the controlling terminal."""

import sys
import termios
import tty
from typing import Optional, TextIO


class TerminalError(Exception):
    """Terminal input error."""


class KeyReader:
    """Reads one keystroke at a time, without line buffering or echo.

    Use as a context manager. On a TTY the terminal attributes are saved on entry,
    switched to cbreak mode, and put back on exit however the block ends. Streams
    that are not terminals are read unchanged.
    """

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self.stream = stream if stream is not None else sys.stdin
        self.original_settings: Optional[list] = None

    def isatty(self) -> bool:
        try:
            return self.stream.isatty()
        except (AttributeError, ValueError):
            return False

    def start(self) -> None:
        """Enter per-keystroke mode."""
        if not self.isatty():
            return
        try:
            fd = self.stream.fileno()
            self.original_settings = termios.tcgetattr(fd)
            tty.setcbreak(fd)
        except (termios.error, OSError) as err:
            raise TerminalError(f"Failed to enable raw input mode: {err}") from err

    def stop(self) -> None:
        """Restore the saved terminal settings."""
        if self.original_settings is None:
            return
        try:
            termios.tcsetattr(self.stream.fileno(), termios.TCSADRAIN, self.original_settings)
        except (termios.error, OSError, ValueError):
            # Best effort on the way out
            pass
        self.original_settings = None

    def read_char(self) -> str:
        """Block until one character is available and return it.

        A byte that is not valid UTF-8 comes back as its Latin-1 character, so it
        is reported like any other unknown key.

        Raises:
            TerminalError: If a non-terminal stream is exhausted
        """
        while True:
            try:
                char = self.stream.read(1)
            except UnicodeDecodeError as err:
                return err.object[err.start : err.start + 1].decode("latin-1")
            if char:
                return char
            if not self.isatty():
                raise TerminalError("Input closed before a command was given")

    def __enter__(self) -> "KeyReader":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()
