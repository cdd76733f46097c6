from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

from diagnostics.logging_setup import configure_logging
from mapper_bus.bus import Connector, open_connector

from . import errors
from .commands import mapper_get_service, mapper_subtree_remove, mapper_wait
from .conditions import parse_namespace_interface
from .config import BUS_KINDS, MapperConfig, load_config, with_overrides

logger = logging.getLogger(__name__)

COMMANDS = ("wait", "subtree-remove", "get-service")
_MISSING_ARG = {
    "wait": errors.MissingWaitArg,
    "subtree-remove": errors.MissingSubtreeRemoveArg,
    "get-service": errors.MissingGetServiceArg,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=errors.PROG,
        description="Wait on and query objects known to the D-Bus object mapper.",
        epilog=errors.USAGE,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--bus", choices=BUS_KINDS, help="Bus to connect to (default: system).")
    parser.add_argument(
        "--poll-interval",
        type=float,
        help="Seconds between checks of the listener race (default: 1.0).",
    )
    parser.add_argument("--config", type=Path, help="JSON config file.")
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log progress to stderr; repeat for debug output.",
    )
    parser.add_argument("command", nargs="?", help="wait | subtree-remove | get-service")
    parser.add_argument("argument", nargs="?", help="OBJECTPATH or NAMESPACE:INTERFACE")
    return parser


def _verbosity(count: int) -> Optional[str]:
    if count >= 2:
        return "DEBUG"
    if count == 1:
        return "INFO"
    return None


def _validate(command: Optional[str], argument: Optional[str]) -> str:
    if not command:
        raise errors.MissingCommand()
    if command not in COMMANDS:
        raise errors.InvalidCommand(command)
    if not argument:
        raise _MISSING_ARG[command]()
    if command == "subtree-remove":
        parse_namespace_interface(argument)
    return command


def _interface_names(services: Dict[str, List[str]]) -> List[str]:
    names: List[str] = []
    for _service, interfaces in sorted(services.items()):
        for interface in interfaces:
            if interface not in names:
                names.append(interface)
    return names


async def _dispatch(command: str, argument: str, config: MapperConfig, connect: Connector) -> int:
    if command == "wait":
        await mapper_wait(argument, connect, poll_interval=config.poll_interval)
        return 0
    if command == "subtree-remove":
        await mapper_subtree_remove(parse_namespace_interface(argument), connect)
        return 0
    services = await mapper_get_service(argument, connect)
    for interface in _interface_names(services):
        print(interface)
    return 0


def main(argv: List[str] | None = None, *, connect: Optional[Connector] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    config = with_overrides(
        load_config(args.config),
        bus=args.bus,
        poll_interval=args.poll_interval,
        log_level=_verbosity(args.verbose),
    )
    configure_logging(config.log_level, Path(config.log_path) if config.log_path else None)

    try:
        command = _validate(args.command, args.argument)
    except errors.MapperInputError as exc:
        if isinstance(exc, errors.MissingCommand):
            print("Missing Command Arg.", file=sys.stderr)
        print(exc, file=sys.stderr)
        return 1

    if connect is None:
        connect = open_connector(config.bus)
    try:
        return asyncio.run(_dispatch(command, args.argument, config, connect))
    except KeyboardInterrupt:
        logger.info("interrupted")
        return 130
    except Exception as exc:
        logger.debug("command %s failed", command, exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
