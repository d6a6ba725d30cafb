"""The Config object: hosts, templates and defaults of one invocation.

Usage:
    from advssh.config import open_config

    config = open_config("~/.ssh/assh.yml")
    host = config.get_host("web1")

    if config.is_outdated("web1"):
        config.save_ssh_config()
"""
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, TextIO

from ..settings import (
    DEFAULT_BINARY_PATH,
    DEFAULT_CONFIG_PATH,
    DEFAULT_KNOWN_HOSTS_PATH,
    DEFAULT_SSH_CONFIG_PATH,
)
from ..utils.logging_config import timed
from ..utils.paths import expand_user
from .generator import SSHConfigGenerator
from .known_hosts import KnownHostCache
from .loader import ConfigLoader
from .resolver import ResolveOptions, get_host_by_name, resolve
from .schema import Host
from .staleness import StalenessDetector

logger = logging.getLogger(__name__)


@dataclass
class Config:
    """All hosts, templates and defaults loaded from the source files."""
    hosts: dict[str, Host] = field(default_factory=dict)
    templates: dict[str, Host] = field(default_factory=dict)
    defaults: Host = field(default_factory=lambda: Host(is_default=True))
    includes: list[str] = field(default_factory=list)
    known_hosts_file: str = DEFAULT_KNOWN_HOSTS_PATH
    binary_path: str = DEFAULT_BINARY_PATH
    ssh_config_path: str = DEFAULT_SSH_CONFIG_PATH
    source_path: str = DEFAULT_CONFIG_PATH
    # absolute path -> fully loaded
    included_files: dict[str, bool] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.known_host_cache = KnownHostCache(self)

    # === Loading ===

    def load_file(self, filename: str) -> None:
        """Load a source file (and its includes) into this Config."""
        ConfigLoader(self).load_file(filename)

    def load_config(self, data: bytes | str) -> None:
        """Load a source document held in memory."""
        ConfigLoader(self).load_config(data)

    def load_known_hosts(self) -> int:
        return self.known_host_cache.load()

    def included_file_list(self) -> list[str]:
        """Source files that were fully loaded."""
        return sorted(path for path, loaded in self.included_files.items() if loaded)

    # === Lookups ===

    def resolve(self, name: str, options: ResolveOptions) -> Host:
        return resolve(self, name, options)

    def get_host(self, name: str) -> Host:
        """
        Return the fully computed host for `name` ("target" or "target/gateway").

        Raises:
            HostNotFoundError: No host, alias or pattern matches
        """
        return resolve(self, name, ResolveOptions(allow_virtual=False, expand_defaults=True))

    def get_host_safe(self, name: str) -> Host:
        """Like get_host(), but unknown names give a virtual host."""
        return resolve(self, name, ResolveOptions(allow_virtual=True, expand_defaults=True))

    def get_gateway_safe(self, name: str) -> Host:
        """Resolve a gateway; the name is never split on '/'."""
        return get_host_by_name(self, name, ResolveOptions(allow_virtual=True, expand_defaults=True))

    # === Known hosts and staleness ===

    def save_new_known_host(self, target: str) -> None:
        self.known_host_cache.record(target)

    def is_outdated(self, target: str) -> bool:
        """Check whether the generated ssh config must be rebuilt for `target`."""
        return StalenessDetector(self, self.known_host_cache).is_outdated(target)

    # === Output ===

    def write_ssh_config_to(self, writer: TextIO) -> None:
        SSHConfigGenerator(self.binary_path).render(self, writer)

    @timed("save_ssh_config", target="ssh_config")
    def save_ssh_config(self) -> Path:
        """
        Write the generated ssh config to `ssh_config_path`.

        Raises:
            OSError: The file cannot be written
        """
        if not self.ssh_config_path:
            raise ValueError("no ssh_config_path configured")

        path = Path(expand_user(self.ssh_config_path))
        logger.debug(f"Writing ssh config file to {path}")
        with open(path, "w", encoding="utf-8") as f:
            self.write_ssh_config_to(f)
        return path

    def to_dict(self) -> dict:
        return {
            "hosts": {name: host.to_dict() for name, host in sorted(self.hosts.items())},
            "templates": {name: host.to_dict() for name, host in sorted(self.templates.items())},
            "defaults": self.defaults.to_dict(),
            "includes": list(self.includes),
            "asshknownhostfile": self.known_hosts_file,
            "asshbinarypath": self.binary_path,
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)


@timed("open_config", target="config")
def open_config(
    path: str = DEFAULT_CONFIG_PATH,
    ssh_config_path: str = DEFAULT_SSH_CONFIG_PATH,
    known_hosts_path: Optional[str] = None,
    binary_path: Optional[str] = None,
    load_known_hosts: bool = True,
) -> Config:
    """
    Build a Config from a top-level source file.

    Args:
        path: Top-level source file (must exist)
        ssh_config_path: Where the generated ssh config lives
        known_hosts_path: Overrides the source's known hosts file
        binary_path: Overrides the source's binary path
        load_known_hosts: Also load the known-host cache

    Raises:
        OSError: The top-level file cannot be read
        ParseError: The top-level file is not a valid source document
    """
    config = Config(ssh_config_path=ssh_config_path, source_path=path)
    config.load_file(path)

    if binary_path:
        config.binary_path = binary_path

    if known_hosts_path:
        config.known_hosts_file = known_hosts_path
    if load_known_hosts:
        config.load_known_hosts()

    return config
