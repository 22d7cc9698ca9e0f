"""
Base class and function utilities for cli
=========================================
"""
import argparse
import logging
import sys
import textwrap

import hbtune.core
from hbtune.core.io.config import ConfigurationError
from hbtune.core.utils.exceptions import HyperbandError

CLI_DOC_HEADER = "hbtune CLI to plan Hyperband budget allocation"


class HyperbandArgsParser:
    """Parser object handling the upper-level parsing of hbtune's arguments."""

    def __init__(self, description=CLI_DOC_HEADER):
        """Create the pre-command arguments"""
        self.description = description

        self.parser = argparse.ArgumentParser(
            prog="hbtune",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            description=textwrap.dedent(description),
        )

        self.parser.add_argument(
            "-V",
            "--version",
            action="version",
            version="hbtune " + hbtune.core.__version__,
        )

        self.parser.add_argument(
            "-v",
            "--verbose",
            action="count",
            default=0,
            help="logging levels of information about the process (-v: INFO. -vv: DEBUG)",
        )

        self.subparsers = self.parser.add_subparsers(dest="command")

    def get_subparsers(self):
        """Return the subparser object for this parser."""
        return self.subparsers

    def parse(self, argv):
        """Call argparse and generate a dictionary of arguments' value"""
        args = vars(self.parser.parse_args(argv))

        levels = {0: logging.WARNING, 1: logging.INFO, 2: logging.DEBUG}
        logging.basicConfig(
            format="%(asctime)-15s::%(levelname)s::%(name)s::%(message)s",
            level=levels.get(args["verbose"], logging.DEBUG),
        )

        if args["command"] is None:
            self.parser.parse_args(["--help"])

        function = args.pop("func", None)
        if function is None:
            self.parser.parse_args([args["command"], "--help"])

        return args, function

    def execute(self, argv):
        """Execute main function of the subparser"""
        args = {}
        try:
            args, function = self.parse(argv)
            returncode = function(args)
        except (HyperbandError, ConfigurationError) as e:
            print("Error:", e, file=sys.stderr)

            if args.get("verbose", 0) >= 2:
                raise e

            return 1

        except KeyboardInterrupt:
            print("hbtune is interrupted.")
            return 130

        return 0 if returncode is None else returncode
