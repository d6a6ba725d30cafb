"""`daemon` hook driver: runs a command in the background."""
import logging
import subprocess
from typing import Optional

from .base import DriverRunError, RunArgs, TemplatedDriver

logger = logging.getLogger(__name__)


class DaemonDriver(TemplatedDriver):
    """Start the rendered command in the background.

    The process lives for as long as the driver: close() terminates it.

    Example:
        daemon ssh-agent-forwarder --host {{ host.host_name }}
    """

    kind = "daemon"

    def __init__(self, param: str):
        super().__init__(param)
        self.process: Optional[subprocess.Popen] = None

    def run(self, args: RunArgs) -> None:
        command = self.render(args)
        logger.debug(f"daemon hook: {command}")
        try:
            self.process = subprocess.Popen(command, shell=True)
        except OSError as e:
            raise DriverRunError(f"daemon: cannot start {command!r}: {e}") from e

    def close(self) -> None:
        if self.process is None:
            return
        process, self.process = self.process, None
        if process.poll() is None:
            logger.debug(f"Stopping daemon hook (pid {process.pid})")
            process.terminate()
        process.wait()
