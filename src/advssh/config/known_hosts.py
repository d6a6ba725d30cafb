"""Known-host cache.

Literal names that were once resolved through a host pattern or alias
glob are appended, one per line, to a plain text file. Loading the file
attaches each name to the host that owns the matching pattern, so the
staleness detector can tell a new dynamic target from one the generated
config was already built for.

Access to this file never fails the caller: a missing or unwritable
cache only costs an extra rebuild.
"""
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from ..utils.paths import expand_user
from .resolver import ResolveOptions, resolve

if TYPE_CHECKING:
    from .config import Config

logger = logging.getLogger(__name__)


class KnownHostCache:
    """Append-only cache of literal names matched by dynamic patterns."""

    def __init__(self, config: "Config"):
        self.config = config
        self.names: set[str] = set()

    @property
    def path(self) -> Path:
        return Path(expand_user(self.config.known_hosts_file))

    def __contains__(self, name: str) -> bool:
        return name in self.names

    def load(self) -> int:
        """
        Load the cache file and attach every name to its owning host.

        Returns:
            Number of names read
        """
        try:
            content = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.debug(f"No known hosts file at {self.path}")
            return 0
        except OSError as e:
            logger.warning(f"Cannot read known hosts file {self.path}: {e}")
            return 0

        count = 0
        for line in content.splitlines():
            name = line.strip()
            if not name:
                continue
            self._attach(name)
            count += 1

        logger.debug(f"Loaded {count} known hosts from {self.path}")
        return count

    def record(self, name: str) -> None:
        """Register `name` as known and append it to the cache file."""
        self._attach(name)

        path = self.path
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "a", encoding="utf-8") as f:
                f.write(f"{name}\n")
        except OSError as e:
            logger.error(f"Cannot append host {name!r} to {path} (performance degradation): {e}")
            return

        logger.debug(f"Recorded known host {name!r} in {path}")

    def _attach(self, name: str) -> None:
        self.names.add(name)
        host = resolve(
            self.config,
            name,
            ResolveOptions(allow_virtual=True, expand_defaults=False),
        )
        owner = self.config.hosts.get(host.pattern)
        if owner is not None:
            owner.add_known_host(name)
