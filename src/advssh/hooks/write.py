"""`write` hook driver: prints a rendered message."""
import sys
from typing import Optional, TextIO

from .base import DriverRunError, RunArgs, TemplatedDriver


class WriteDriver(TemplatedDriver):
    """Render the parameters and write them as one line to a stream.

    Example:
        write New connection to {{ host.name }}
    """

    kind = "write"

    def __init__(self, param: str, stream: Optional[TextIO] = None):
        super().__init__(param)
        self.stream = stream

    def run(self, args: RunArgs) -> None:
        line = self.render(args)
        stream = self.stream or sys.stdout
        try:
            stream.write(line + "\n")
            stream.flush()
        except (OSError, ValueError) as e:
            raise DriverRunError(f"write: {e}") from e
