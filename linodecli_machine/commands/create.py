"""Implementation for `linode-cli machine create`."""

from __future__ import annotations

import argparse
import os
from typing import Dict

from ..core import colors
from ..core.driver import LinodeDriver
from ..core.env import load_env_file
from ..core.flags import CREATE_FLAGS, DriverOptions
from ._common import open_store


def register(subparsers: argparse._SubParsersAction, config, parent: argparse.ArgumentParser) -> None:
    parser = subparsers.add_parser("create", parents=[parent], help="Create a Linode machine")
    parser.add_argument("name", help="Machine name")
    for flag in CREATE_FLAGS:
        usage = f"{flag.usage} [${flag.env_var}]"
        if flag.default is not None:
            usage += f" (default: {flag.default})"
        parser.add_argument(f"--{flag.name}", dest=flag.dest, type=flag.kind, help=usage)
    parser.add_argument(
        "--env-file",
        help="Read option environment variables from a dotenv file",
    )
    parser.add_argument(
        "--skip-check",
        action="store_true",
        help="Skip checking that the region, type and image exist",
    )
    parser.set_defaults(func=lambda args: _cmd_create(args, config))


def _cmd_create(args, config) -> None:
    store = open_store(args)
    machine = store.new(args.name)
    driver = LinodeDriver(machine)
    driver.set_config_from_flags(DriverOptions(vars(args), environ=_resolve_environ(args, config)))

    if not args.skip_check:
        print(colors.info("Running pre-create checks..."))
        driver.pre_create_check()

    print(colors.info(f"Creating Linode machine {machine.machine_name}..."))
    try:
        driver.create()
    finally:
        # Keep whatever was allocated so `rm` can clean it up.
        if machine.instance_id is not None:
            store.save(machine)

    print(colors.success(f"✓ Machine {machine.machine_name} is running"))
    print(f"  Linode ID: {machine.instance_id}")
    print(f"  IP:        {machine.ip_address}")
    print(f"  URL:       {driver.get_url()}")
    print(f"  SSH:       ssh -i {driver.get_ssh_key_path()} -p {driver.get_ssh_port()} "
          f"{driver.get_ssh_username()}@{driver.get_ssh_hostname()}")


def _resolve_environ(args, config) -> Dict[str, str]:
    environ: Dict[str, str] = {}
    if getattr(args, "env_file", None):
        environ.update(load_env_file(args.env_file))
    environ.update(os.environ)

    # Fall back to the token linode-cli itself is configured with.
    token = getattr(config, "token", None)
    if token and not environ.get("LINODE_TOKEN"):
        environ["LINODE_TOKEN"] = token
    return environ
