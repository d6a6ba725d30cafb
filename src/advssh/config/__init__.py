"""advssh configuration engine.

Loads a YAML source describing hosts, templates and defaults, resolves
names through glob patterns and single-hop inheritance, and generates
the ssh config file when it is out of date.

Usage:
    from advssh.config import open_config

    config = open_config("~/.ssh/assh.yml", ssh_config_path="~/.ssh/config")
    if config.is_outdated("web1/bastion"):
        config.save_ssh_config()
"""

from .config import Config, open_config
from .generator import SSHConfigGenerator
from .known_hosts import KnownHostCache
from .loader import ConfigLoader
from .matcher import PatternError, is_pattern, matches
from .parser import ConfigParser, ParseError, ParsedConfig
from .resolver import (
    HostNotFoundError,
    ResolveOptions,
    compute_host,
    get_host_by_name,
    resolve,
)
from .schema import Host, HostHooks, SSH_KEYWORDS
from .staleness import StalenessDetector

__all__ = [
    # Main entry points
    "Config",
    "open_config",
    # Data model
    "Host",
    "HostHooks",
    "SSH_KEYWORDS",
    # Matching and resolution
    "matches",
    "is_pattern",
    "PatternError",
    "ResolveOptions",
    "HostNotFoundError",
    "compute_host",
    "get_host_by_name",
    "resolve",
    # Components (for advanced use)
    "ConfigParser",
    "ParseError",
    "ParsedConfig",
    "ConfigLoader",
    "KnownHostCache",
    "StalenessDetector",
    "SSHConfigGenerator",
]
