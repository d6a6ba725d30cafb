"""Hook driver registry and expression parsing."""
from .base import HookDriver, UnknownDriverError
from .daemon import DaemonDriver
from .exec import ExecDriver
from .write import WriteDriver

# Driver kind registry
DRIVER_TYPES: dict[str, type[HookDriver]] = {
    "write": WriteDriver,
    "exec": ExecDriver,
    "daemon": DaemonDriver,
}


def parse_expression(expression: str) -> tuple[str, str]:
    """Split a hook expression into (kind, parameters).

    Example:
        "exec echo {{ host.name }}" -> ("exec", "echo {{ host.name }}")
    """
    kind, _, param = expression.partition(" ")
    return kind, param


def create_driver(expression: str) -> HookDriver:
    """Factory function to create a driver from a hook expression.

    Raises:
        UnknownDriverError: The kind is not registered
        DriverConstructError: The parameters are malformed
    """
    kind, param = parse_expression(expression)
    if kind not in DRIVER_TYPES:
        raise UnknownDriverError(f"No such driver {kind!r}")
    return DRIVER_TYPES[kind](param)
