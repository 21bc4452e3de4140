"""Read-only commands: status, ip, url, inspect, ls."""

from __future__ import annotations

import argparse
import sys
from typing import Sequence

import yaml

from ..core.linode_api import LinodeAPIError
from ._common import load_driver, open_store

SECRET_FIELDS = ("api_token", "root_password")


def register(subparsers: argparse._SubParsersAction, _config, parent: argparse.ArgumentParser) -> None:
    for command, help_text, handler in (
        ("status", "Show the state of a machine", _cmd_status),
        ("ip", "Show the IP address of a machine", _cmd_ip),
        ("url", "Show the docker URL of a machine", _cmd_url),
        ("inspect", "Show the stored record of a machine", _cmd_inspect),
    ):
        parser = subparsers.add_parser(command, parents=[parent], help=help_text)
        parser.add_argument("name", help="Machine name")
        parser.set_defaults(func=handler)

    ls_parser = subparsers.add_parser("ls", parents=[parent], help="List machines")
    ls_parser.add_argument(
        "--no-state",
        action="store_true",
        help="Do not query the Linode API for each machine's state",
    )
    ls_parser.set_defaults(func=_cmd_ls)


def _cmd_status(args) -> None:
    print(load_driver(args).get_state())


def _cmd_ip(args) -> None:
    print(load_driver(args).get_ip())


def _cmd_url(args) -> None:
    print(load_driver(args).get_url())


def _cmd_inspect(args) -> None:
    data = load_driver(args).config.to_dict()
    for key in SECRET_FIELDS:
        if data.get(key):
            data[key] = "********"
    sys.stdout.write(yaml.safe_dump(data, sort_keys=False))


def _cmd_ls(args) -> None:
    store = open_store(args)
    names = store.list_names()
    if not names:
        print("No machines found.")
        return

    rows = []
    for name in names:
        args.name = name
        driver = load_driver(args)
        machine = driver.config
        state = "-"
        if not args.no_state and machine.instance_id is not None:
            try:
                state = str(driver.get_state())
            except LinodeAPIError as exc:
                state = f"error ({exc.status or 'unknown'})"
        rows.append((name, machine.region, machine.instance_type, state, driver.get_url() if machine.ip_address else ""))

    _print_table(("NAME", "REGION", "TYPE", "STATE", "URL"), rows)


def _print_table(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
    widths = [len(h) for h in headers]
    for row in rows:
        widths = [max(widths[idx], len(str(value))) for idx, value in enumerate(row)]
    header_line = "  ".join(h.ljust(widths[idx]) for idx, h in enumerate(headers))
    print(header_line)
    print("  ".join("-" * width for width in widths))
    for row in rows:
        print("  ".join(str(value).ljust(widths[idx]) for idx, value in enumerate(row)))
