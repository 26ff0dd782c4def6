"""Subcommands for packing, unpacking and listing archives."""
import logging
import sys
from argparse import Namespace, _SubParsersAction

from .archive import list_archive, pack_files, unpack_archive
from .utils import confirm_overwrite, dir_exists, ensure_suffix, path_exists

LOG = logging.getLogger(__name__)


def pack_command(args: Namespace) -> None:
    archive_path = ensure_suffix(args.archive)
    if not args.force and not confirm_overwrite(archive_path):
        LOG.info("Operation cancelled.")
        return
    pack_files(archive_path, args.files)
    LOG.info("Archive created: %s", archive_path)


def pack_subparser(subparsers: _SubParsersAction) -> None:
    parser = subparsers.add_parser("pack", description="Pack files into an archive.")
    parser.set_defaults(command=pack_command)
    parser.add_argument("archive", type=dir_exists)
    parser.add_argument("files", type=path_exists, nargs="+")
    parser.add_argument(
        "--force", action="store_true", help="Overwrite an existing archive"
    )


def unpack_command(args: Namespace) -> None:
    unpack_archive(
        args.archive,
        args.output_dir,
        check_magic=args.check_magic,
        sanitize=args.safe_names,
    )
    LOG.info("Archive extracted to: %s", args.output_dir)


def unpack_subparser(subparsers: _SubParsersAction) -> None:
    parser = subparsers.add_parser(
        "unpack", description="Unpack an archive into a directory."
    )
    parser.set_defaults(command=unpack_command)
    parser.add_argument("archive", type=path_exists)
    parser.add_argument("output_dir", type=path_exists)
    parser.add_argument(
        "--check-magic",
        action="store_true",
        help="Reject archives without the spreadsheet signature",
    )
    parser.add_argument(
        "--safe-names",
        action="store_true",
        help="Reject names that would be written outside the output directory",
    )


def list_command(args: Namespace) -> None:
    manifest = list_archive(args.archive, check_magic=args.check_magic)
    sys.stdout.write(manifest.model_dump_json(exclude_none=True, indent=2) + "\n")


def list_subparser(subparsers: _SubParsersAction) -> None:
    parser = subparsers.add_parser("list", description="List the files in an archive.")
    parser.set_defaults(command=list_command)
    parser.add_argument("archive", type=path_exists)
    parser.add_argument(
        "--check-magic",
        action="store_true",
        help="Reject archives without the spreadsheet signature",
    )
