"""Package manager invocation (npm, pnpm, yarn).

Every call takes an explicit working directory; the process-wide current
directory is never changed.  A non-zero exit becomes a
``PackageManagerError`` carrying the command line and captured stderr.
"""

from __future__ import annotations

import os
from collections.abc import Sequence
from pathlib import Path

from .errors import PackageManagerError
from .utils import run_command

# Argument prefixes per package manager.  ``run`` is empty for yarn, which
# runs scripts as ``yarn <script>``.
PM_COMMANDS: dict[str, dict[str, list[str]]] = {
    "npm": {
        "install": ["install"],
        "add": ["install"],
        "add_dev": ["install", "--save-dev"],
        "remove": ["uninstall"],
        "run": ["run"],
        "dlx": ["exec", "--yes", "--"],
    },
    "pnpm": {
        "install": ["install"],
        "add": ["add"],
        "add_dev": ["add", "-D"],
        "remove": ["remove"],
        "run": ["run"],
        "dlx": ["dlx"],
    },
    "yarn": {
        "install": ["install"],
        "add": ["add"],
        "add_dev": ["add", "-D"],
        "remove": ["remove"],
        "run": [],
        "dlx": ["dlx"],
    },
}

SUPPORTED_PACKAGE_MANAGERS = tuple(PM_COMMANDS)

_LOCK_FILES: tuple[tuple[str, str], ...] = (
    ("yarn.lock", "yarn"),
    ("pnpm-lock.yaml", "pnpm"),
    ("package-lock.json", "npm"),
)


def detect_package_manager(cwd: str | Path | None = None) -> str:
    """Work out which package manager the user prefers.

    Checks, in order, the ``npm_config_user_agent`` set when running under a
    package manager, lock files in *cwd*, and finally falls back to ``npm``.
    """
    user_agent = os.environ.get("npm_config_user_agent", "")
    if user_agent:
        for name in ("yarn", "pnpm", "npm"):
            if name in user_agent:
                return name

    base = Path(cwd) if cwd else Path.cwd()
    for lock_file, name in _LOCK_FILES:
        if (base / lock_file).exists():
            return name

    return "npm"


def _commands(package_manager: str) -> dict[str, list[str]]:
    return PM_COMMANDS.get(package_manager, PM_COMMANDS["npm"])


async def execute(
    package_manager: str,
    args: Sequence[str],
    cwd: str | Path,
    verbose: bool = False,
) -> str:
    """Run ``<package_manager> <args>`` in *cwd* and return its stdout.

    With *verbose* the child's output streams straight to the terminal.

    Raises:
        PackageManagerError: On a non-zero exit or a missing executable.
    """
    cmd = [package_manager, *args]
    command_line = " ".join(cmd)
    try:
        returncode, stdout, stderr = await run_command(cmd, cwd=cwd, capture=not verbose)
    except OSError as exc:
        raise PackageManagerError(
            f"Failed to execute package manager command: {command_line}",
            command_line,
            str(exc),
        ) from exc

    if returncode != 0:
        raise PackageManagerError(
            f"Failed to execute package manager command: {command_line}",
            command_line,
            stderr,
        )
    return stdout


async def install_dependencies(
    dependencies: Sequence[str],
    cwd: str | Path,
    package_manager: str = "npm",
    dev: bool = False,
    verbose: bool = False,
) -> str:
    """Add *dependencies* to the project in *cwd*."""
    pm = _commands(package_manager)
    args = [*(pm["add_dev"] if dev else pm["add"]), *dependencies]
    return await execute(package_manager, args, cwd, verbose)


async def remove_dependencies(
    dependencies: Sequence[str],
    cwd: str | Path,
    package_manager: str = "npm",
    verbose: bool = False,
) -> str:
    """Remove *dependencies* from the project in *cwd*."""
    args = [*_commands(package_manager)["remove"], *dependencies]
    return await execute(package_manager, args, cwd, verbose)


async def run_script(
    script: str,
    cwd: str | Path,
    package_manager: str = "npm",
    verbose: bool = False,
) -> str:
    """Run a ``package.json`` script."""
    args = [*_commands(package_manager)["run"], script]
    return await execute(package_manager, args, cwd, verbose)


async def dlx(
    package: str,
    args: Sequence[str],
    cwd: str | Path,
    package_manager: str = "npm",
    verbose: bool = False,
) -> str:
    """Fetch and run a package binary once (``npx``-style)."""
    full_args = [*_commands(package_manager)["dlx"], package, *args]
    return await execute(package_manager, full_args, cwd, verbose)
