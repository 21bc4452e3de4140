"""Top-level command wiring."""

from __future__ import annotations

import argparse
import logging
import sys

from ..core import colors
from ..core.driver import DriverError
from ..core.env import EnvError
from ..core.linode_api import LinodeAPIError
from ..core.network import NoPublicAddressError
from ..core.ssh import SSHKeyError
from ..core.store import StoreError
from . import create as create_cmd
from . import inspect as inspect_cmd
from . import lifecycle as lifecycle_cmd
from ._common import common_parser

HANDLED_ERRORS = (
    DriverError,
    EnvError,
    LinodeAPIError,
    NoPublicAddressError,
    SSHKeyError,
    StoreError,
)


def register_machine_plugin(subparsers: argparse._SubParsersAction, config) -> None:
    """Register the `machine` command namespace for the main CLI."""
    machine_parser = subparsers.add_parser(
        "machine",
        help="Provision and manage a Linode docker host",
    )
    machine_parser.set_defaults(func=lambda args: machine_parser.print_help())
    machine_subparsers = machine_parser.add_subparsers(dest="machine_command")
    _register_subcommands(machine_subparsers, config)


def register_root_parser(parser: argparse.ArgumentParser, config) -> None:
    """Register subcommands when running as a standalone plugin."""
    parser.set_defaults(func=lambda args: parser.print_help())
    subparsers = parser.add_subparsers(dest="machine_command")
    _register_subcommands(subparsers, config)


def run(func, args) -> None:
    """Invoke a command, turning driver errors into a clean exit."""
    configure_logging(getattr(args, "debug", False))
    try:
        func(args)
    except HANDLED_ERRORS as exc:
        print(colors.error(f"Error: {exc}"), file=sys.stderr)
        sys.exit(1)


def configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _register_subcommands(subparsers: argparse._SubParsersAction, config) -> None:
    parent = common_parser()
    create_cmd.register(subparsers, config, parent)
    lifecycle_cmd.register(subparsers, config, parent)
    inspect_cmd.register(subparsers, config, parent)
