"""Run the hooks of a connection event.

Usage:
    drivers = []
    try:
        drivers = invoke_all(host.hooks.on_connect, {"host": host, "event": "on_connect"})
    except HookError as e:
        drivers = e.drivers
        logger.error(f"Hook failed: {e}")
    finally:
        for err in close_all(drivers):
            logger.warning(f"Cannot close hook: {err}")
"""
import logging
from typing import Iterable

from .base import HookDriver, HookError, DriverRunError, RunArgs
from .registry import create_driver

logger = logging.getLogger(__name__)


def invoke_all(hooks: Iterable[str], args: RunArgs) -> list[HookDriver]:
    """
    Instantiate one driver per hook expression, then run them in order.

    No driver runs unless every expression instantiates. The first run
    failure stops the remaining drivers; drivers that already ran keep
    their side effects.

    Returns:
        The instantiated drivers, to be released with close_all()

    Raises:
        HookError: Instantiation or run failure; `error.drivers` holds
            the drivers instantiated so far
    """
    drivers: list[HookDriver] = []
    for expression in hooks:
        try:
            drivers.append(create_driver(expression))
        except HookError as e:
            e.drivers = drivers
            raise

    for driver in drivers:
        logger.debug(f"Running hook {driver!r}")
        try:
            driver.run(args)
        except HookError as e:
            e.drivers = drivers
            raise
        except Exception as e:
            raise DriverRunError(f"{driver.kind}: {e}", drivers) from e

    return drivers


def close_all(drivers: Iterable[HookDriver]) -> list[Exception]:
    """Close every driver, collecting (not raising) the failures."""
    errors: list[Exception] = []
    for driver in drivers:
        try:
            driver.close()
        except Exception as e:
            logger.debug(f"Closing hook {driver!r} failed: {e}")
            errors.append(e)
    return errors
