"""Command line entry point for xcmigrate."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Optional, Sequence

from rich.console import Console
from rich.markup import escape

from .chain import model_dir
from .config import RunConfig
from .engine import MigrationEngine
from .exceptions import ConfigError
from .fingerprint import FingerprintScheme
from .presenter import ReportPresenter

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="xcmigrate",
        description="Check that every version of a Core Data model migrates safely",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  xcmigrate -d MyApp -m Model
  xcmigrate --config xcmigrate.yaml --verbose
  xcmigrate -d MyApp --report migrations.json
        """
    )
    parser.add_argument("-c", "--config", help="YAML file with run settings")
    # None defaults let values from --config survive when a flag is omitted
    parser.add_argument("-d", "--dir", dest="directory",
                        help="The dir where the .xcdatamodeld is located (default: .)")
    parser.add_argument("-m", "--model",
                        help="The name of the model without extension (default: Model)")
    parser.add_argument("--solved", dest="solved_file",
                        help="Solved file (default: <dir>/<model>.solved)")
    parser.add_argument(
        "--fingerprint-scheme",
        choices=[s.value for s in FingerprintScheme],
        help="Key layout for changed attributes (default: legacy)"
    )
    parser.add_argument("-r", "--report", help="Write the full result as JSON to this file")
    parser.add_argument("-v", "--verbose", action="store_true", default=None,
                        help="Show more info")
    parser.add_argument("--debug", action="store_true", default=None,
                        help="Show debug info")
    return parser


def setup_logging(config: RunConfig) -> None:
    """Configure logging for the CLI."""
    if config.debug:
        level = logging.DEBUG
    elif config.verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def build_config(args: argparse.Namespace) -> RunConfig:
    base = RunConfig.from_yaml(args.config) if args.config else RunConfig()
    return base.merged(
        directory=args.directory,
        model=args.model,
        solved_file=args.solved_file,
        fingerprint_scheme=args.fingerprint_scheme,
        verbose=args.verbose,
        debug=args.debug,
    )


def main(argv: Optional[Sequence[str]] = None, console: Optional[Console] = None) -> int:
    args = create_parser().parse_args(argv)
    console = console or Console()

    try:
        config = build_config(args)
    except ConfigError as e:
        console.print(f"[bold red]{escape(e.message)}[/bold red]")
        return EXIT_FAILURE

    setup_logging(config)

    if config.verbose:
        console.print("[bold]Running xcmigrate[/bold]")
        console.print(f"dir: [bold]{escape(config.directory)}[/bold]")
        console.print(f"model: [bold]{escape(config.model)}[/bold].xcdatamodeld")
        console.print(f"bundle: {escape(str(model_dir(config)))}")

    result = MigrationEngine(config).run()

    if config.verbose and hasattr(result, "versions"):
        console.print("versions: " + ", ".join(str(n) for n in result.versions))

    if args.report:
        with open(args.report, 'w') as f:
            json.dump(result.to_dict(), indent=2, fp=f)

    return ReportPresenter(console, verbose=config.verbose).render(result)


if __name__ == "__main__":
    sys.exit(main())
