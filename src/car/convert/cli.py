import argparse
import logging
import sys
from typing import List, Optional

from ..errors import CarError
from .commands import list_subparser, pack_subparser, unpack_subparser
from .utils import configure_logging

LOG = logging.getLogger(__name__)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="car")

    def no_command(_args: argparse.Namespace) -> None:
        parser.print_help()

    parser.set_defaults(command=no_command)
    parser.add_argument("-v", "--verbose", action="store_true")
    subparsers = parser.add_subparsers(dest="subparser_name")
    pack_subparser(subparsers)
    unpack_subparser(subparsers)
    list_subparser(subparsers)

    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        args.command(args)
    except (CarError, OSError) as e:
        LOG.error("%s failed: %s", args.subparser_name, e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
