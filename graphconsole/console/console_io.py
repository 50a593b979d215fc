"""
Console Output

Text sink for everything the console renders. Logging goes through the
logging module, never through this sink.
"""

import sys
from typing import Optional, TextIO

UNOPENED_REPOSITORY_MESSAGE = "please open a repository first"


class ConsoleIO:
    """Writes console output to a text stream (stdout by default)."""

    def __init__(self, out: Optional[TextIO] = None, err: Optional[TextIO] = None):
        self.out = out or sys.stdout
        self.err = err or sys.stderr

    def write(self, text: str) -> None:
        self.out.write(text)

    def writeln(self, text: str = "") -> None:
        self.out.write(text)
        self.out.write("\n")
        self.out.flush()

    def write_error(self, message: str) -> None:
        self.err.write(f"ERROR: {message}\n")
        self.err.flush()

    def write_unopened_error(self) -> None:
        self.write_error(UNOPENED_REPOSITORY_MESSAGE)
