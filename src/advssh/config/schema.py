"""Host data model shared by the resolver, the generator and the hooks."""
import copy
import os
from dataclasses import dataclass, field, fields
from typing import Any, Optional, Union

OptionValue = Union[str, list[str]]

# Canonical ssh_config keywords, in the order they are written out
SSH_KEYWORDS = (
    "HostName",
    "User",
    "Port",
    "AddressFamily",
    "BindAddress",
    "BindInterface",
    "ConnectTimeout",
    "ConnectionAttempts",
    "IdentityFile",
    "IdentitiesOnly",
    "IdentityAgent",
    "CertificateFile",
    "AddKeysToAgent",
    "ForwardAgent",
    "ForwardX11",
    "ForwardX11Timeout",
    "ForwardX11Trusted",
    "LocalForward",
    "RemoteForward",
    "DynamicForward",
    "ExitOnForwardFailure",
    "GatewayPorts",
    "ClearAllForwardings",
    "Compression",
    "Ciphers",
    "MACs",
    "KexAlgorithms",
    "HostKeyAlgorithms",
    "HostKeyAlias",
    "PubkeyAcceptedKeyTypes",
    "PreferredAuthentications",
    "PasswordAuthentication",
    "PubkeyAuthentication",
    "KbdInteractiveAuthentication",
    "ChallengeResponseAuthentication",
    "GSSAPIAuthentication",
    "GSSAPIDelegateCredentials",
    "HostbasedAuthentication",
    "NumberOfPasswordPrompts",
    "BatchMode",
    "CheckHostIP",
    "StrictHostKeyChecking",
    "UserKnownHostsFile",
    "GlobalKnownHostsFile",
    "HashKnownHosts",
    "UpdateHostKeys",
    "VerifyHostKeyDNS",
    "VisualHostKey",
    "ControlMaster",
    "ControlPath",
    "ControlPersist",
    "ServerAliveCountMax",
    "ServerAliveInterval",
    "TCPKeepAlive",
    "IPQoS",
    "EscapeChar",
    "LogLevel",
    "RequestTTY",
    "RemoteCommand",
    "LocalCommand",
    "PermitLocalCommand",
    "SendEnv",
    "SetEnv",
    "StreamLocalBindMask",
    "StreamLocalBindUnlink",
    "Tunnel",
    "TunnelDevice",
    "ProxyCommand",
    "ProxyJump",
    "ProxyUseFdpass",
    "CanonicalizeHostname",
    "CanonicalDomains",
    "CanonicalizeFallbackLocal",
    "CanonicalizeMaxDots",
    "RekeyLimit",
    "UseKeychain",
)

# Keywords ssh accepts several times; stored as lists
MULTI_VALUE_KEYWORDS = frozenset({
    "IdentityFile",
    "CertificateFile",
    "LocalForward",
    "RemoteForward",
    "DynamicForward",
    "SendEnv",
    "SetEnv",
})

# lowercase (and underscore-free) spelling -> canonical keyword
_KEYWORD_LOOKUP = {k.lower(): k for k in SSH_KEYWORDS}


def canonical_keyword(key: str) -> Optional[str]:
    """Map any spelling of an ssh keyword to its canonical form.

    Examples:
        "hostname" -> "HostName"
        "host_name" -> "HostName"
        "IdentityFile" -> "IdentityFile"
        "unknown" -> None
    """
    return _KEYWORD_LOOKUP.get(key.replace("_", "").replace("-", "").lower())


def normalize_option(keyword: str, value: Any) -> OptionValue:
    """Coerce a deserialized value into the shape stored on a Host."""
    if isinstance(value, (list, tuple)):
        items = [_scalar(v) for v in value if v is not None]
        if keyword in MULTI_VALUE_KEYWORDS:
            return items
        return ",".join(items)
    if value is None:
        return [] if keyword in MULTI_VALUE_KEYWORDS else ""
    if keyword in MULTI_VALUE_KEYWORDS:
        return [_scalar(value)]
    return _scalar(value)


def _scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "yes" if value else "no"
    return str(value)


@dataclass
class HostHooks:
    """Hook expressions triggered around a connection attempt."""
    before_connect: list[str] = field(default_factory=list)
    on_connect: list[str] = field(default_factory=list)
    on_connect_error: list[str] = field(default_factory=list)
    on_disconnect: list[str] = field(default_factory=list)

    def apply_defaults(self, defaults: "HostHooks") -> None:
        for f in fields(self):
            if not getattr(self, f.name):
                setattr(self, f.name, list(getattr(defaults, f.name)))

    def is_empty(self) -> bool:
        return not any(getattr(self, f.name) for f in fields(self))

    def to_dict(self) -> dict[str, list[str]]:
        return {f.name: list(getattr(self, f.name)) for f in fields(self) if getattr(self, f.name)}


@dataclass
class Host:
    """A host (or template, or the defaults section) of the source config.

    `options` carries the plain ssh_config keywords; the other public
    attributes are understood only by advssh. `pattern`, `name`,
    `input_name` and `known_hosts` are filled in while loading and
    resolving, never read from the source document.
    """
    options: dict[str, OptionValue] = field(default_factory=dict)
    aliases: list[str] = field(default_factory=list)
    inherits: list[str] = field(default_factory=list)
    gateways: list[str] = field(default_factory=list)
    resolve_nameservers: list[str] = field(default_factory=list)
    resolve_command: str = ""
    control_master_mkdir: str = ""
    comment: list[str] = field(default_factory=list)
    hooks: HostHooks = field(default_factory=HostHooks)

    # Internal fields
    pattern: str = ""
    name: str = ""
    input_name: str = ""
    known_hosts: list[str] = field(default_factory=list)
    is_template: bool = False
    is_default: bool = False

    @property
    def host_name(self) -> str:
        return self.options.get("HostName", "")

    @host_name.setter
    def host_name(self, value: str) -> None:
        self.options["HostName"] = value

    @property
    def port(self) -> str:
        return self.options.get("Port", "") or "22"

    @property
    def user(self) -> str:
        return self.options.get("User", "")

    def option(self, keyword: str) -> OptionValue:
        """Get an option by canonical keyword ("" or [] when unset)."""
        if keyword in self.options:
            return self.options[keyword]
        return [] if keyword in MULTI_VALUE_KEYWORDS else ""

    def add_known_host(self, target: str) -> None:
        if target not in self.known_hosts:
            self.known_hosts.append(target)

    def copy(self) -> "Host":
        return copy.deepcopy(self)

    def apply_defaults(self, defaults: "Host") -> None:
        """Fill attributes still at their zero value from `defaults`.

        Attributes already set on this host are never overwritten.
        Aliases, inherits and known hosts are never merged.
        """
        for keyword, value in defaults.options.items():
            if not self.options.get(keyword) and value:
                self.options[keyword] = copy.copy(value)

        if not self.gateways:
            self.gateways = list(defaults.gateways)
        if not self.resolve_nameservers:
            self.resolve_nameservers = list(defaults.resolve_nameservers)
        if not self.resolve_command:
            self.resolve_command = defaults.resolve_command
        if not self.control_master_mkdir:
            self.control_master_mkdir = defaults.control_master_mkdir
        if not self.comment:
            self.comment = list(defaults.comment)
        self.hooks.apply_defaults(defaults.hooks)

    def expand_string(self, text: str, gateway: str = "") -> str:
        """Expand connection-time tokens in `text`.

        %name -> name of the host in the config
        %n    -> the name originally asked for
        %h    -> HostName
        %p    -> Port (22 when unset)
        %r    -> User
        %g    -> gateway
        $VAR  -> environment variable
        """
        output = text
        output = output.replace("%name", self.name)
        output = output.replace("%n", self.input_name)
        output = output.replace("%h", self.host_name)
        output = output.replace("%p", self.port)
        output = output.replace("%r", self.user)
        output = output.replace("%g", gateway)
        return os.path.expandvars(output)

    def to_dict(self) -> dict:
        """JSON-friendly view of the host (empty attributes omitted)."""
        data: dict[str, Any] = {
            keyword: copy.copy(self.options[keyword])
            for keyword in SSH_KEYWORDS
            if self.options.get(keyword)
        }
        for key, value in (
            ("Aliases", self.aliases),
            ("Inherits", self.inherits),
            ("Gateways", self.gateways),
            ("ResolveNameservers", self.resolve_nameservers),
            ("ResolveCommand", self.resolve_command),
            ("ControlMasterMkdir", self.control_master_mkdir),
            ("Comment", self.comment),
        ):
            if value:
                data[key] = copy.copy(value)
        if not self.hooks.is_empty():
            data["Hooks"] = self.hooks.to_dict()
        return data
