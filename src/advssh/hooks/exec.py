"""`exec` hook driver: runs a shell command and waits for it."""
import logging
import subprocess

from .base import DriverRunError, RunArgs, TemplatedDriver

logger = logging.getLogger(__name__)


class ExecDriver(TemplatedDriver):
    """Run the rendered command through the shell, blocking until it exits.

    Example:
        exec notify-send "connected to {{ host.name }}"
    """

    kind = "exec"

    def run(self, args: RunArgs) -> None:
        command = self.render(args)
        logger.debug(f"exec hook: {command}")
        try:
            result = subprocess.run(command, shell=True)
        except OSError as e:
            raise DriverRunError(f"exec: cannot run {command!r}: {e}") from e

        if result.returncode != 0:
            raise DriverRunError(f"exec: {command!r} exited with status {result.returncode}")
