"""Hook drivers invoked around connection attempts.

A hook is an expression "<kind> <parameters>" where kind is one of the
registered drivers (write, exec, daemon).
"""
from .base import (
    HookDriver,
    HookError,
    UnknownDriverError,
    DriverConstructError,
    DriverRunError,
    RunArgs,
)
from .daemon import DaemonDriver
from .dispatcher import invoke_all, close_all
from .exec import ExecDriver
from .registry import DRIVER_TYPES, create_driver, parse_expression
from .write import WriteDriver

__all__ = [
    "HookDriver",
    "HookError",
    "UnknownDriverError",
    "DriverConstructError",
    "DriverRunError",
    "RunArgs",
    "WriteDriver",
    "ExecDriver",
    "DaemonDriver",
    "DRIVER_TYPES",
    "create_driver",
    "parse_expression",
    "invoke_all",
    "close_all",
]
