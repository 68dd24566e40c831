"""Command-line entry point: ``ionic-create [name] [options]``.

Non-interactive: every option has a default, and a saved preset can be
loaded with ``--config`` and written with ``--save-config``.

Usage::

    ionic-create my-app --types checkjs --capacitor
    python -m ionic_create my-app --packagemanager pnpm --prettier false
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Any, Sequence

from pydantic import ValidationError

from . import __version__
from .config import ProjectSpec, Settings
from .errors import FileSystemError, ProjectValidationError, ScaffoldError, report_error
from .logger import get_logger
from .package_manager import SUPPORTED_PACKAGE_MANAGERS
from .pipeline import scaffold_project
from .reporter import print_completion_message
from .utils import console, print_banner, print_section
from .validation import parse_bool

TOGGLES: dict[str, str] = {
    "eslint": "Add ESLint for code linting",
    "prettier": "Add Prettier for code formatting",
    "playwright": "Add Playwright for browser testing",
    "vitest": "Add Vitest for unit testing",
    "ionicons": "Include Ionic icon library",
    "capacitor": "Install dependencies for Capacitor",
}


def _bool_arg(value: str) -> bool:
    try:
        return parse_bool(value)
    except ProjectValidationError as exc:
        raise argparse.ArgumentTypeError(exc.message) from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ionic-create",
        description="Create a SvelteKit project with Ionic UI components",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  ionic-create my-app\n"
            "  ionic-create my-app --types checkjs --capacitor\n"
            "  ionic-create --config preset.json\n"
        ),
    )
    parser.add_argument("name", nargs="?", default=None, help="Name of the directory for the project")
    parser.add_argument("--path", default=None, help="Location to install, name is appended")
    parser.add_argument(
        "--types",
        default=None,
        help="Add type checking: typescript, checkjs, or false",
    )
    for toggle, description in TOGGLES.items():
        parser.add_argument(
            f"--{toggle}",
            nargs="?",
            const=True,
            default=None,
            type=_bool_arg,
            metavar="BOOLEAN",
            help=description,
        )
    parser.add_argument(
        "--packagemanager",
        choices=SUPPORTED_PACKAGE_MANAGERS,
        default=None,
        help="Package manager to use (detected when omitted)",
    )
    parser.add_argument("--config", type=Path, default=None, help="Load options from a saved configuration")
    parser.add_argument("--save-config", type=Path, default=None, help="Save the final options to FILE")
    parser.add_argument("--verbose", action="store_true", help="Show detailed output for troubleshooting")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def spec_from_args(args: argparse.Namespace) -> ProjectSpec:
    """Merge defaults, an optional preset, and explicit flags into a ``ProjectSpec``."""
    base: dict[str, Any] = {}
    if args.config is not None:
        try:
            base = ProjectSpec.load(args.config).model_dump()
        except OSError as exc:
            raise FileSystemError(f"Unable to read configuration: {args.config}", args.config) from exc
        except ValidationError as exc:
            raise ProjectValidationError(f"Invalid configuration file: {args.config}") from exc

    overrides: dict[str, Any] = {
        "name": args.name,
        "path": args.path,
        "types": args.types,
        "package_manager": args.packagemanager,
        "verbose": args.verbose or None,
    }
    overrides.update({toggle: getattr(args, toggle) for toggle in TOGGLES})

    try:
        explicit = {key: value for key, value in overrides.items() if value is not None}
        return ProjectSpec(**{**base, **explicit})
    except ValidationError as exc:
        problems = "\n".join(f"  - {'.'.join(map(str, e['loc']))}: {e['msg']}" for e in exc.errors())
        raise ProjectValidationError(f"Invalid options:\n{problems}") from exc


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI and return the process exit code."""
    args = build_parser().parse_args(argv)
    print_banner(__version__)

    try:
        spec = spec_from_args(args)
        settings = Settings.from_env()
        if args.save_config is not None:
            try:
                spec.save(args.save_config)
            except OSError as exc:
                raise FileSystemError(
                    f"Unable to save configuration: {args.save_config}", args.save_config
                ) from exc
            console.print(f"[dim]Configuration saved to {args.save_config}[/dim]")
        logger = get_logger(spec.verbose)
        logger.debug("Final options: %s", spec.model_dump_json())
        print_section(f"Creating {spec.name}")
        ctx = asyncio.run(scaffold_project(spec, logger, settings))
    except ScaffoldError as exc:
        report_error(exc)
        return 1

    print_completion_message(
        spec,
        ctx.package_manager,
        capacitor=ctx.data.get("capacitor"),
        settings=settings,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
