"""Runtime settings for advssh.

Environment variables:
- ADVSSH_CONFIG: Source configuration file (default: ~/.ssh/assh.yml)
- ADVSSH_SSH_CONFIG: Generated ssh config file (default: ~/.ssh/config)
- ADVSSH_KNOWN_HOSTS: Known-host cache file (default: from the source, or ~/.ssh/assh_known_hosts)
- ADVSSH_BINARY: Binary placed in generated ProxyCommand lines (default: from the source, or assh)
"""
import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_CONFIG_PATH = "~/.ssh/assh.yml"
DEFAULT_SSH_CONFIG_PATH = "~/.ssh/config"
DEFAULT_KNOWN_HOSTS_PATH = "~/.ssh/assh_known_hosts"
DEFAULT_BINARY_PATH = "assh"


@dataclass
class Settings:
    """Paths used by a single advssh invocation."""
    config_path: str = DEFAULT_CONFIG_PATH
    ssh_config_path: str = DEFAULT_SSH_CONFIG_PATH
    known_hosts_path: Optional[str] = None
    binary_path: Optional[str] = None

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables."""
        return cls(
            config_path=os.environ.get("ADVSSH_CONFIG", DEFAULT_CONFIG_PATH),
            ssh_config_path=os.environ.get("ADVSSH_SSH_CONFIG", DEFAULT_SSH_CONFIG_PATH),
            known_hosts_path=os.environ.get("ADVSSH_KNOWN_HOSTS") or None,
            binary_path=os.environ.get("ADVSSH_BINARY") or None,
        )
