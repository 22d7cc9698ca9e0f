#!/usr/bin/env python
"""
Functions that define console scripts
=====================================

Entry point of the ``hbtune`` command and registration of its subcommands.

"""
import logging

from hbtune.core.cli import brackets
from hbtune.core.cli.base import HyperbandArgsParser

log = logging.getLogger(__name__)

COMMANDS = [brackets]


def load_modules_parser(hbtune_parser):
    """Add the subparser of every command to ``hbtune_parser``"""
    for module in COMMANDS:
        module.add_subparser(hbtune_parser.get_subparsers())


def main(argv=None):
    """Entry point for `hbtune.core` functionality."""
    # Use `-h` option to show help
    hbtune_parser = HyperbandArgsParser()

    load_modules_parser(hbtune_parser)

    return hbtune_parser.execute(argv)


if __name__ == "__main__":
    returncode = main()
    if returncode > 0:
        raise SystemExit(returncode)
