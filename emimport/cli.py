"""CLI entrypoint for the emimport descriptor scanner."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Sequence, Tuple

from .config import ConfigError, EmImportConfig, load_config
from .emitter import InvariantViolation
from .frontend.base import FrontendError
from .frontend.clang import ClangFrontend
from .logging import configure_logging, get_logger
from .markers import MarkerError
from .models import MemberPolicy
from .scanner import Scanner, open_output

_LOGGER = get_logger("cli")

_EPILOG = """\
Compiler arguments can follow a literal `--`, for example:

  emimport -o imports.txt src/widget.cpp -- -std=c++17 -Iinclude

or come from a compilation database:

  emimport -p build src/widget.cpp
"""


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="emimport",
        description="Emit import descriptors for declarations annotated with EM_IMPORT markers.",
        epilog=_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "sources",
        nargs="+",
        type=Path,
        help="C or C++ translation units to scan.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Output file (defaults to standard output).",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write log records to this file.",
    )
    parser.add_argument(
        "-p",
        "--build-path",
        type=Path,
        default=None,
        help="Directory containing compile_commands.json.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=Path("."),
        help="Path to .emimport.yml or the directory holding it.",
    )
    parser.add_argument(
        "--extra-arg",
        dest="extra_args",
        action="append",
        default=[],
        help="Additional compiler argument, e.g. --extra-arg=-DFOO (repeatable).",
    )
    parser.add_argument(
        "--members",
        choices=[policy.value for policy in MemberPolicy],
        default=None,
        help="Export only marked members of a marked class, or all of its methods.",
    )
    parser.add_argument(
        "--libclang",
        type=Path,
        default=None,
        help="Explicit path to the libclang shared library.",
    )
    parser.add_argument(
        "--skip-function-bodies",
        action="store_true",
        default=None,
        help="Do not parse function bodies (local declarations are not scanned).",
    )
    return parser


def _split_compiler_args(argv: Sequence[str]) -> Tuple[List[str], List[str]]:
    args = list(argv)
    if "--" in args:
        index = args.index("--")
        return args[:index], args[index + 1 :]
    return args, []


def _merge(config: EmImportConfig, args: argparse.Namespace, compiler_args: List[str]) -> EmImportConfig:
    config.output = args.output or config.output
    config.log_file = args.log_file or config.log_file
    config.build_path = args.build_path or config.build_path
    config.library_file = args.libclang or config.library_file
    config.clang_args = [*config.clang_args, *args.extra_args, *compiler_args]
    if args.skip_function_bodies is not None:
        config.skip_function_bodies = args.skip_function_bodies
    if args.members is not None:
        config.members = MemberPolicy(args.members)
    return config


def main(argv: List[str] | None = None) -> None:
    """CLI entrypoint for emimport."""
    parser = _build_parser()
    own_args, compiler_args = _split_compiler_args(sys.argv[1:] if argv is None else argv)
    args = parser.parse_args(own_args)

    try:
        config = _merge(load_config(args.config), args, compiler_args)
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    configure_logging(verbose=bool(args.verbose), log_file=config.log_file)

    frontend = ClangFrontend(
        args=config.clang_args,
        build_path=config.build_path,
        library_file=config.library_file,
        skip_function_bodies=config.skip_function_bodies,
    )
    scanner = Scanner(frontend, member_policy=config.members)

    try:
        with open_output(config.output) as sink:
            report = scanner.scan(args.sources, sink)
    except InvariantViolation as exc:
        parser.exit(2, f"emimport: internal error: {exc}\n")
    except (FrontendError, MarkerError, OSError) as exc:
        parser.exit(1, f"emimport failed: {exc}\nRun with --verbose for more details.\n")

    _LOGGER.info("Wrote %d descriptor(s) from %d file(s)", report.total, len(report.descriptors))


if __name__ == "__main__":
    main(sys.argv[1:])
