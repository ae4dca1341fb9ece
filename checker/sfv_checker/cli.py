from __future__ import annotations
import argparse
import datetime as _dt
from pathlib import Path

from .errors import FatalRunError, EXIT_OK
from .generate import GeneratePipeline, prepare_target
from .progress import log
from .sfv import SFVWriter
from .verify import VerifyPipeline


def confirm_overwrite(path: Path) -> bool:
    try:
        ans = input(f"{path} already exists. Overwrite the existing file (yes/no)? ").strip().lower()
    except EOFError:
        # stdin closed or not interactive
        return False
    return ans in ("y", "yes")


def created_stamp() -> str:
    return _dt.datetime.now(_dt.timezone.utc).isoformat(timespec="seconds")


def _cmd_verify(args: argparse.Namespace) -> int:
    VerifyPipeline(follow_links=not args.no_follow_links).verify_all(args.manifests)
    # mismatches are reported, never signalled through the exit status
    return EXIT_OK


def _cmd_generate(args: argparse.Namespace) -> int:
    target = prepare_target(args.manifest)
    if target.exists() and not args.yes:
        if not confirm_overwrite(target):
            print("Leaving the existing file untouched.")
            return EXIT_OK

    description = (args.description or "").removeprefix(":")
    header = SFVWriter.header(created_stamp(), description)
    GeneratePipeline(follow_links=not args.no_follow_links).generate(target, args.sources, header)
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="sfv-checker", description="Verify and create SFV checksum files")
    sub = p.add_subparsers(dest="cmd", required=True)

    v = sub.add_parser("verify", help="Check files against one or more SFV files")
    v.add_argument("-l", "--no-follow-links", action="store_true",
                   help="Do not follow symbolic links")
    v.add_argument("manifests", nargs="+", metavar="sfv", help="SFV file to verify")
    v.set_defaults(func=_cmd_verify)

    g = sub.add_parser("generate", help="Create an SFV file from files and directories")
    g.add_argument("manifest", metavar="sfv",
                   help="SFV file to create; entries are relative to its directory")
    g.add_argument("-d", "--description", type=str, help="Description line (-d:text)")
    g.add_argument("-l", "--no-follow-links", action="store_true",
                   help="Do not follow symbolic links")
    g.add_argument("-y", "--yes", action="store_true", help="Overwrite without asking")
    g.add_argument("sources", nargs="+", metavar="source",
                   help="File, directory (walked recursively) or glob such as dir/*.bin")
    g.set_defaults(func=_cmd_generate)

    return p


def run_cli(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return args.func(args)
    except FatalRunError as e:
        log(str(e))
        return e.exit_code
