#!/usr/bin/env python3
"""advssh command line.

Usage:
    advssh [--config PATH] [--ssh-config PATH] [-v] build
    advssh json
    advssh info <target>
    advssh wrapper <binary> [ssh options] <target> [args...]

Environment:
    ADVSSH_CONFIG, ADVSSH_SSH_CONFIG, ADVSSH_KNOWN_HOSTS, ADVSSH_BINARY
    ADVSSH_LOG_LEVEL, ADVSSH_LOG_FILE
"""
import argparse
import json
import logging
import os
import shutil
import sys
from typing import Optional

from .config import Config, HostNotFoundError, ParseError, PatternError, open_config
from .hooks import HookError, close_all, invoke_all
from .settings import Settings
from .utils.logging_config import setup_logging
from .version import VERSION

logger = logging.getLogger(__name__)

# ssh options the wrapper accepts before the target and passes through
SSH_BOOL_FLAGS = "1246AaCfGgKkMNnqsTtVvXxYy"
SSH_STRING_FLAGS = "BbcDEeFIiJLlmOoPpQRSWw"


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="advssh",
        description="Generate ~/.ssh/config from an advanced YAML description",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Regenerate ~/.ssh/config
    advssh build

    # Show how a target resolves
    advssh info web1/bastion

    # Rebuild if needed, then run ssh
    advssh wrapper ssh web1 uptime

    # ssh options may come before the target
    advssh wrapper ssh -A -p 2222 web1
""",
    )
    parser.add_argument(
        "--config",
        default=settings.config_path,
        help=f"Source configuration file (default: {settings.config_path})",
    )
    parser.add_argument(
        "--ssh-config",
        default=settings.ssh_config_path,
        help=f"Generated ssh config file (default: {settings.ssh_config_path})",
    )
    parser.add_argument(
        "--known-hosts",
        default=settings.known_hosts_path,
        help="Known-host cache file (default: from the configuration)",
    )
    parser.add_argument(
        "--binary",
        default=settings.binary_path,
        help="Binary used in generated ProxyCommand lines",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument("--version", action="version", version=f"advssh {VERSION}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("build", help="Write the generated ssh config")
    subparsers.add_parser("json", help="Print the loaded configuration as JSON")

    info = subparsers.add_parser("info", help="Print the computed host for a target")
    info.add_argument("target")

    wrapper = subparsers.add_parser(
        "wrapper",
        help="Rebuild the ssh config if outdated, then exec a binary",
    )
    wrapper.add_argument("binary", help="Binary to exec (ssh, scp, ...)")
    for flag in SSH_BOOL_FLAGS:
        wrapper.add_argument(f"-{flag}", dest=f"ssh_{flag}", action="store_true", help=argparse.SUPPRESS)
    for flag in SSH_STRING_FLAGS:
        wrapper.add_argument(f"-{flag}", dest=f"ssh_{flag}", action="append", help=argparse.SUPPRESS)
    wrapper.add_argument("target")
    wrapper.add_argument("args", nargs=argparse.REMAINDER)

    return parser


def load(args: argparse.Namespace, load_known_hosts: bool = False) -> Config:
    return open_config(
        args.config,
        ssh_config_path=args.ssh_config,
        known_hosts_path=args.known_hosts,
        binary_path=args.binary,
        load_known_hosts=load_known_hosts,
    )


def cmd_build(args: argparse.Namespace) -> int:
    config = load(args)
    path = config.save_ssh_config()
    logger.info(f"Wrote {path}")
    return 0


def cmd_json(args: argparse.Namespace) -> int:
    config = load(args)
    print(config.to_json())
    return 0


def cmd_info(args: argparse.Namespace) -> int:
    config = load(args)
    try:
        host = config.get_host(args.target)
    except HostNotFoundError as e:
        logger.error(str(e))
        return 1

    print(json.dumps({
        "name": host.name,
        "pattern": host.pattern,
        "input_name": host.input_name,
        "config": host.to_dict(),
    }, indent=2))
    return 0


def run_before_connect(config: Config, target: str) -> None:
    """Run BeforeConnect hooks; failures are logged, never fatal."""
    host = config.get_host_safe(target)
    if not host.hooks.before_connect:
        return

    drivers = []
    try:
        drivers = invoke_all(host.hooks.before_connect, {
            "host": host,
            "target": target,
            "event": "before_connect",
        })
    except HookError as e:
        drivers = e.drivers
        logger.error(f"BeforeConnect hook failed: {e}")
    finally:
        for err in close_all(drivers):
            logger.warning(f"Cannot close hook: {err}")


def ssh_options(args: argparse.Namespace) -> list[str]:
    """Rebuild the ssh options given before the target."""
    options = []
    for flag in SSH_BOOL_FLAGS:
        if getattr(args, f"ssh_{flag}"):
            options.append(f"-{flag}")
    for flag in SSH_STRING_FLAGS:
        for value in getattr(args, f"ssh_{flag}") or []:
            options.extend([f"-{flag}", value])
    return options


def cmd_wrapper(args: argparse.Namespace) -> int:
    binary = shutil.which(args.binary)
    if binary is None:
        logger.error(f"Cannot find {args.binary!r} in $PATH")
        return 1

    config = load(args, load_known_hosts=True)

    if config.is_outdated(args.target):
        logger.debug(f"The configuration file is outdated, rebuilding it before calling {args.binary}")
        config.save_ssh_config()

    run_before_connect(config, args.target)

    argv = [args.binary] + ssh_options(args) + [args.target] + list(args.args)
    logger.debug(f"Wrapper exec bin={binary} args={argv}")
    os.execv(binary, argv)
    return 0  # not reached


COMMANDS = {
    "build": cmd_build,
    "json": cmd_json,
    "info": cmd_info,
    "wrapper": cmd_wrapper,
}


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the advssh CLI."""
    settings = Settings.from_env()
    parser = build_parser(settings)
    args = parser.parse_args(argv)

    setup_logging(verbose=args.verbose)

    try:
        return COMMANDS[args.command](args)
    except (OSError, ParseError, PatternError, ValueError) as e:
        logger.error(f"{args.command} failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
