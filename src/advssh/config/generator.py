"""ssh config generator.

Renders a Config into a file ssh understands. Output is deterministic:
hosts are sorted by name and options follow the SSH_KEYWORDS order, so
two renders of the same Config only differ on the timestamp line.
"""
from datetime import datetime
from typing import TYPE_CHECKING, Optional, TextIO

from ..version import VERSION
from .resolver import compute_host
from .schema import SSH_KEYWORDS, Host

if TYPE_CHECKING:
    from .config import Config

HEADER = """\
# This file was automatically generated by advssh v{version}
# on {date}, based on {source}
#
# more info: https://github.com/noqqe/advanced-ssh-config"""

DATE_FORMAT = "%Y-%m-%d %H:%M:%S %z %Z"

HOOK_LABELS = (
    ("before_connect", "BeforeConnect"),
    ("on_connect", "OnConnect"),
    ("on_connect_error", "OnConnectError"),
    ("on_disconnect", "OnDisconnect"),
)


class SSHConfigGenerator:
    """Generate ssh_config text from a Config."""

    def __init__(self, binary_path: str = "assh"):
        self.binary_path = binary_path

    def render(self, config: "Config", writer: TextIO, now: Optional[datetime] = None) -> None:
        """
        Write the full ssh config to `writer`.

        Args:
            config: Loaded configuration
            writer: Text stream receiving the output
            now: Generation time (defaults to the current local time)
        """
        if now is None:
            now = datetime.now().astimezone()

        writer.write(HEADER.format(
            version=VERSION,
            date=now.strftime(DATE_FORMAT).rstrip(),
            source=config.source_path,
        ) + "\n\n")

        writer.write("# host-based configuration\n")
        for name in sorted(config.hosts):
            # Defaults stay out of host blocks, ssh applies "Host *" itself
            host = compute_host(config.hosts[name], config, name, full_compute=False)
            writer.write("\n".join(self.host_lines(host)) + "\n\n")

        writer.write("# global configuration\n")
        writer.write("\n".join(self.host_lines(config.defaults, header="*")) + "\n")

    def host_lines(self, host: Host, header: Optional[str] = None) -> list[str]:
        """Render a single `Host` block."""
        if header is None:
            header = " ".join([host.name] + host.aliases)
        lines = [f"Host {header}"]

        for comment in host.comment:
            lines.append(f"  # {comment}")

        for keyword in SSH_KEYWORDS:
            value = host.options.get(keyword)
            if not value:
                continue
            if isinstance(value, list):
                lines.extend(f"  {keyword} {item}" for item in value)
            else:
                lines.append(f"  {keyword} {value}")

        if host.resolve_nameservers:
            lines.append(f"  # ResolveNameservers: {', '.join(host.resolve_nameservers)}")
        if host.resolve_command:
            lines.append(f"  # ResolveCommand: {host.resolve_command}")
        if host.control_master_mkdir:
            lines.append(f"  # ControlMasterMkdir: {host.control_master_mkdir}")
        if host.inherits:
            lines.append(f"  # Inherits: {', '.join(host.inherits)}")
        if host.gateways:
            lines.append(f"  # Gateways: {', '.join(host.gateways)}")
        if host.known_hosts:
            lines.append(f"  # KnownHosts: {', '.join(host.known_hosts)}")
        for attr, label in HOOK_LABELS:
            expressions = getattr(host.hooks, attr)
            if expressions:
                lines.append(f"  # {label}: {', '.join(expressions)}")

        if not host.options.get("ProxyCommand"):
            lines.append(f"  ProxyCommand {self.binary_path} connect --port=%p %h")

        return lines
