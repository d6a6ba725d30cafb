"""Host resolution: pattern lookup, inheritance and defaults merge.

Inheritance is single-hop: each parent listed in `Inherits` is merged
into the host, but the parent's own `Inherits` are NOT followed. A
host inheriting from B, where B inherits from C, gets nothing from C.
"""
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator, Optional

from .matcher import PatternError, matches
from .schema import Host

if TYPE_CHECKING:
    from .config import Config

logger = logging.getLogger(__name__)


class HostNotFoundError(KeyError):
    """No host, alias or template matches the requested name."""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"no such host: {self.name}"


@dataclass(frozen=True)
class ResolveOptions:
    """Options for resolving a name into a Host."""
    allow_virtual: bool = False
    expand_defaults: bool = True
    allow_template_fallback: bool = False
    follow_inherits: bool = True


def iter_host_patterns(hosts: dict[str, Host]) -> Iterator[tuple[str, Host]]:
    """Yield (pattern, host) pairs in deterministic order.

    Host keys are visited in lexicographic order; for each host its key
    comes first, then its aliases in declaration order.
    """
    for key in sorted(hosts):
        host = hosts[key]
        yield key, host
        for alias in host.aliases:
            yield alias, host


def compute_host(
    raw: Optional[Host],
    config: "Config",
    name: str,
    full_compute: bool,
    follow_inherits: bool = True,
) -> Host:
    """
    Return a working copy of `raw` with inheritance (and optionally
    defaults and token expansion) applied.

    Args:
        raw: Host as loaded from the source, or None for a blank host
        config: Config holding hosts, templates and defaults
        name: Name the host is being resolved under
        full_compute: Also merge config.defaults and expand HostName
        follow_inherits: Merge the parents listed in `inherits`

    Returns:
        A new Host; `raw` is never modified
    """
    if raw is not None:
        computed = raw.copy()
    else:
        computed = Host(pattern=name)

    computed.name = name
    computed.input_name = name
    if not computed.pattern:
        computed.pattern = name

    # The host itself counts as visited
    visited = {name}

    for parent_name in (computed.inherits if follow_inherits else []):
        if parent_name in visited:
            logger.debug(f"Detected circular inheritance {name!r} -> {parent_name!r}, skipping")
            continue
        visited.add(parent_name)

        try:
            parent = resolve(
                config,
                parent_name,
                ResolveOptions(
                    allow_virtual=False,
                    expand_defaults=False,
                    allow_template_fallback=True,
                    follow_inherits=False,
                ),
            )
        except HostNotFoundError as e:
            logger.warning(f"Cannot inherit {name!r} from {parent_name!r}: {e}")
            continue
        computed.apply_defaults(parent)

    if full_compute:
        computed.apply_defaults(config.defaults)

        if not computed.host_name:
            computed.host_name = name

        # %h in HostName means "the name asked for"
        host_name = computed.host_name.replace("%h", "%n")

        # Skip expansion when the input already is an expanded HostName
        expanded_pattern = host_name.replace("%n", "*")
        if _matches_quietly(expanded_pattern, computed.input_name):
            computed.host_name = computed.input_name
        else:
            computed.host_name = computed.expand_string(host_name)

    return computed


def _matches_quietly(pattern: str, candidate: str) -> bool:
    try:
        return matches(pattern, candidate)
    except PatternError:
        return False


def get_host_by_name(config: "Config", name: str, options: ResolveOptions) -> Host:
    """
    Resolve a bare name (no '/') into a computed Host.

    Order: exact host key, host key/alias pattern, template pattern
    (if allowed), virtual host (if allowed).

    Raises:
        HostNotFoundError: Nothing matches and virtual hosts are not allowed
        PatternError: A host, alias or template key is a malformed glob
    """
    host = config.hosts.get(name)
    if host is not None:
        logger.debug(f"Direct host match: {name!r}")
        return compute_host(host, config, name, options.expand_defaults, options.follow_inherits)

    for pattern, host in iter_host_patterns(config.hosts):
        if matches(pattern, name):
            logger.debug(f"Pattern host match: {pattern!r} => {name!r}")
            return compute_host(host, config, name, options.expand_defaults, options.follow_inherits)

    if options.allow_template_fallback:
        for pattern in sorted(config.templates):
            if matches(pattern, name):
                logger.debug(f"Template match: {pattern!r} => {name!r}")
                return compute_host(
                    config.templates[pattern], config, name,
                    options.expand_defaults, options.follow_inherits,
                )

    if options.allow_virtual:
        virtual = Host(pattern=name)
        virtual.host_name = name
        return compute_host(virtual, config, name, options.expand_defaults, options.follow_inherits)

    raise HostNotFoundError(name)


def resolve(config: "Config", path: str, options: ResolveOptions) -> Host:
    """
    Resolve a name that may carry a gateway ("target/gateway").

    The part after the first '/' becomes the only gateway of the
    returned host. It may contain further '/' hops; those are left for
    the connection layer to chain.
    """
    name, sep, gateway = path.partition("/")
    host = get_host_by_name(config, name, options)
    if sep:
        host.gateways = [gateway]
    return host
