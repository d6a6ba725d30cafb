"""Staleness detection for the generated ssh config.

The generated file is outdated when either:
- a target segment matches a host/alias glob for the first time
  (it is recorded in the known-host cache right away), or
- a loaded source file is newer than the generated file.
"""
import logging
import os
from typing import TYPE_CHECKING

from ..utils.paths import expand_user
from .known_hosts import KnownHostCache
from .matcher import matches
from .resolver import iter_host_patterns

if TYPE_CHECKING:
    from .config import Config

logger = logging.getLogger(__name__)


class StalenessDetector:
    """Decide whether the generated ssh config must be rebuilt."""

    def __init__(self, config: "Config", cache: KnownHostCache):
        self.config = config
        self.cache = cache

    def is_outdated(self, target: str) -> bool:
        """
        Check whether the generated config must be rebuilt before
        connecting to `target`.

        New dynamic segments are recorded in the known-host cache, so
        asking again for the same target reports it as up to date.
        """
        new_segments = self.new_dynamic_segments(target)
        if new_segments:
            for segment in new_segments:
                logger.debug(f"{segment!r} is new to a host pattern, rebuild needed")
                self.cache.record(segment)
            return True

        return self.is_ssh_config_outdated()

    def needs_rebuild_for_target(self, target: str) -> bool:
        """Check the dynamic-target trigger without recording anything."""
        return bool(self.new_dynamic_segments(target))

    def new_dynamic_segments(self, target: str) -> list[str]:
        """Return the segments of `target` first seen through a glob."""
        aliases: set[str] = set()
        for host in self.config.hosts.values():
            aliases.update(host.aliases)
            aliases.update(host.known_hosts)

        patterns = [pattern for pattern, _ in iter_host_patterns(self.config.hosts)]

        segments = []
        for segment in target.split("/"):
            if segment in self.config.hosts or segment in aliases or segment in self.cache:
                continue
            if segment in segments:
                continue
            for pattern in patterns:
                if matches(pattern, segment):
                    segments.append(segment)
                    break
        return segments

    def is_ssh_config_outdated(self) -> bool:
        """Check whether a loaded source file is newer than the generated file."""
        output_path = expand_user(self.config.ssh_config_path)
        try:
            output_mtime = os.stat(output_path).st_mtime
        except FileNotFoundError:
            logger.debug(f"{output_path} does not exist yet")
            return True
        except OSError as e:
            logger.warning(f"Cannot stat {output_path}: {e}")
            return True

        for source in self.config.included_file_list():
            try:
                source_mtime = os.stat(source).st_mtime
            except OSError as e:
                logger.warning(f"Cannot stat {source}: {e}")
                return True
            if source_mtime > output_mtime:
                logger.debug(f"{source} is newer than {output_path}")
                return True

        return False
