"""Parser for the advssh source document.

Converts YAML input to Host objects. Keys are case-insensitive:
`HostName`, `hostname` and `host_name` all name the same attribute.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .schema import Host, HostHooks, canonical_keyword, normalize_option

logger = logging.getLogger(__name__)

HOOK_KEYS = {
    "beforeconnect": "before_connect",
    "onconnect": "on_connect",
    "onconnecterror": "on_connect_error",
    "ondisconnect": "on_disconnect",
}


class ParseError(Exception):
    """Error parsing an advssh source document."""
    pass


def _fold(key: Any) -> str:
    return str(key).replace("_", "").replace("-", "").lower()


def _string_or_list(value: Any) -> list[str]:
    """Accept a scalar or a list, always return a list of strings."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value if v is not None]
    return [str(value)]


class ConfigDocument(BaseModel):
    """Top-level shape of a source document."""
    model_config = ConfigDict(extra="ignore")

    hosts: dict[str, Optional[dict[str, Any]]] = {}
    templates: dict[str, Optional[dict[str, Any]]] = {}
    defaults: Optional[dict[str, Any]] = None
    includes: list[str] = []
    asshknownhostfile: str = ""
    asshbinarypath: str = ""

    @field_validator("hosts", "templates", mode="before")
    @classmethod
    def _stringify_keys(cls, value: Any) -> Any:
        if value is None:
            return {}
        if isinstance(value, dict):
            return {str(k): v for k, v in value.items()}
        return value

    @field_validator("includes", mode="before")
    @classmethod
    def _includes_string_or_list(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return _string_or_list(value)
        return value

    @field_validator("asshknownhostfile", "asshbinarypath", mode="before")
    @classmethod
    def _empty_path(cls, value: Any) -> Any:
        return "" if value is None else value


@dataclass
class ParsedConfig:
    """Result of parsing one source document."""
    hosts: dict[str, Host] = field(default_factory=dict)
    templates: dict[str, Host] = field(default_factory=dict)
    defaults: Optional[Host] = None
    includes: list[str] = field(default_factory=list)
    known_hosts_file: str = ""
    binary_path: str = ""


class ConfigParser:
    """Parse advssh source documents from YAML."""

    def parse(self, data: Union[bytes, str]) -> ParsedConfig:
        """
        Parse a YAML document into hosts, templates and settings.

        Args:
            data: Raw document content

        Returns:
            ParsedConfig object

        Raises:
            ParseError: If the document is not valid YAML or has a bad shape
        """
        try:
            raw = yaml.safe_load(data)
        except yaml.YAMLError as e:
            raise ParseError(f"Invalid YAML: {e}") from e

        if raw is None:
            return ParsedConfig()
        if not isinstance(raw, dict):
            raise ParseError(
                f"Top-level document must be a mapping, got {type(raw).__name__}"
            )

        try:
            document = ConfigDocument.model_validate({_fold(k): v for k, v in raw.items()})
        except ValidationError as e:
            raise ParseError(f"Invalid configuration: {e}") from e

        parsed = ParsedConfig(
            includes=list(document.includes),
            known_hosts_file=document.asshknownhostfile,
            binary_path=document.asshbinarypath,
        )

        for key, entry in document.hosts.items():
            host = self.parse_host(key, entry)
            host.pattern = key
            host.name = key
            parsed.hosts[key] = host

        for key, entry in document.templates.items():
            template = self.parse_host(key, entry)
            template.pattern = key
            template.name = key
            template.is_template = True
            parsed.templates[key] = template

        if document.defaults is not None:
            parsed.defaults = self.parse_host("defaults", document.defaults)
            parsed.defaults.is_default = True

        return parsed

    def parse_host(self, key: str, entry: Optional[dict[str, Any]]) -> Host:
        """Parse a single host, template or defaults section."""
        host = Host()
        if entry is None:
            return host

        for raw_key, value in entry.items():
            folded = _fold(raw_key)

            if folded == "aliases":
                host.aliases = _string_or_list(value)
            elif folded == "inherits":
                host.inherits = _string_or_list(value)
            elif folded == "gateways":
                host.gateways = _string_or_list(value)
            elif folded == "resolvenameservers":
                host.resolve_nameservers = _string_or_list(value)
            elif folded == "resolvecommand":
                host.resolve_command = "" if value is None else str(value)
            elif folded == "controlmastermkdir":
                host.control_master_mkdir = self._flag(value)
            elif folded == "comment":
                host.comment = _string_or_list(value)
            elif folded == "hooks":
                host.hooks = self._parse_hooks(key, value)
            else:
                keyword = canonical_keyword(str(raw_key))
                if keyword is None:
                    logger.warning(f"Host {key!r}: ignoring unknown key {raw_key!r}")
                    continue
                host.options[keyword] = normalize_option(keyword, value)

        return host

    def _parse_hooks(self, key: str, value: Any) -> HostHooks:
        hooks = HostHooks()
        if value is None:
            return hooks
        if not isinstance(value, dict):
            raise ParseError(f"Host {key!r}: hooks must be a mapping")

        for raw_key, expressions in value.items():
            attr = HOOK_KEYS.get(_fold(raw_key))
            if attr is None:
                logger.warning(f"Host {key!r}: ignoring unknown hook {raw_key!r}")
                continue
            setattr(hooks, attr, _string_or_list(expressions))
        return hooks

    @staticmethod
    def _flag(value: Any) -> str:
        if isinstance(value, bool):
            return "yes" if value else "no"
        return "" if value is None else str(value)
