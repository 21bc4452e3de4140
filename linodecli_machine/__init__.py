"""`linode-cli machine` plugin entrypoint."""

from __future__ import annotations

import argparse

from .commands import base

PLUGIN_NAME = "machine"
PLUGIN_DESCRIPTION = "Provision and manage a single Linode as a docker host."
PLUGIN_AUTHOR = "Linode"
PLUGIN_VERSION = "0.1.0"


def call(args, context):
    """Entrypoint invoked by linode-cli when running `linode-cli machine`."""
    from linodecli.plugins import plugins as plugin_core

    parser = argparse.ArgumentParser(prog="linode-cli machine")
    plugin_core.inherit_plugin_args(parser)
    base.register_root_parser(parser, context)

    parsed_args = parser.parse_args(args)
    func = getattr(parsed_args, "func", None)
    if func is None:
        parser.print_help()
        return
    base.run(func, parsed_args)


def populate(subparsers, config):
    """Compatibility helper for the Core CLI to reuse command wiring."""
    base.register_machine_plugin(subparsers, config)
