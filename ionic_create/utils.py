"""Shared helpers for ionic-create.

Subprocess execution for the package manager, file-system helpers that
raise ``FileSystemError`` instead of bare ``OSError``, the shared Rich
console, and LAN address discovery for the Capacitor dev server URL.
"""

from __future__ import annotations

import asyncio
import os
import re
import socket
from collections.abc import Sequence
from pathlib import Path
from typing import NamedTuple

from rich.console import Console
from rich.panel import Panel
from rich.rule import Rule

from .errors import FileSystemError

console = Console()

# ---------------------------------------------------------------------------
# Subprocesses
# ---------------------------------------------------------------------------


class CommandResult(NamedTuple):
    returncode: int
    stdout: str
    stderr: str


async def run_command(
    cmd: Sequence[str],
    cwd: str | Path | None = None,
    timeout: float | None = None,
    capture: bool = True,
    env: dict[str, str] | None = None,
) -> CommandResult:
    """Run *cmd* without a shell and wait for it to exit.

    Args:
        cmd: Program and arguments.
        cwd: Working directory of the child; the parent's never changes.
        timeout: Seconds before the child is killed.  ``None`` waits forever,
            which is what dependency installs need.
        capture: Collect stdout/stderr.  When ``False`` the child writes to
            the terminal directly and both strings come back empty.
        env: Variables layered over ``os.environ`` for the child only.

    Raises:
        OSError: If the executable cannot be started.
    """
    pipe = asyncio.subprocess.PIPE if capture else None
    process = await asyncio.create_subprocess_exec(
        *cmd,
        stdout=pipe,
        stderr=pipe,
        cwd=str(cwd) if cwd else None,
        env=dict(os.environ, **env) if env else None,
    )

    try:
        out, err = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        return CommandResult(-1, "", f"Command timed out after {timeout}s: {' '.join(cmd)}")

    def _decode(data: bytes | None) -> str:
        return (data or b"").decode("utf-8", errors="replace").strip()

    return CommandResult(process.returncode or 0, _decode(out), _decode(err))


# ---------------------------------------------------------------------------
# Names
# ---------------------------------------------------------------------------


def project_directory_name(name: str) -> str:
    """Turn a project name into the directory it is created in.

    Runs of whitespace become a single hyphen and the result is lowercased.

    Examples::

        project_directory_name("My App") -> "my-app"
        project_directory_name("demo-app") -> "demo-app"
    """
    return re.sub(r"\s+", "-", name.strip()).lower()


# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------


def ensure_dir(path: str | Path) -> Path:
    """``mkdir -p`` *path* and return it resolved.

    Raises:
        FileSystemError: If the directory cannot be created.
    """
    target = Path(path)
    try:
        target.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise FileSystemError(f"Failed to create directory: {target}", target) from exc
    return target.resolve()


def write_text(path: str | Path, content: str) -> Path:
    """Write *content* to *path*, creating parent directories first."""
    target = Path(path)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise FileSystemError(f"Failed to write file: {target}", target) from exc
    return target


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


def format_duration(seconds: float) -> str:
    """Stage timing for the progress lines.

    Examples::

        format_duration(3.74)  -> "3.7s"
        format_duration(65.2)  -> "1m 5s"
        format_duration(-1)    -> "0.0s"
    """
    if seconds < 60:
        return f"{max(seconds, 0.0):.1f}s"
    minutes, secs = divmod(int(seconds), 60)
    return f"{minutes}m {secs}s"


def print_banner(version: str) -> None:
    console.print(
        Panel(
            "[bold white]Ionic SvelteKit Project Creator[/bold white]\n"
            f"[dim]v{version}[/dim]\n\n"
            "This CLI will help you create a new SvelteKit project\n"
            "with Ionic UI components for web and mobile apps.",
            border_style="bright_blue",
        )
    )


def print_section(title: str) -> None:
    """Print a full-width rule with *title*."""
    console.print()
    console.print(Rule(f"[bold bright_blue] {title} [/bold bright_blue]", style="bright_blue"))
    console.print()


# ---------------------------------------------------------------------------
# Network
# ---------------------------------------------------------------------------


def local_ip_address() -> str:
    """Return the LAN address of this machine, or ``127.0.0.1``.

    Connecting a UDP socket sends nothing; it only makes the OS pick the
    outbound interface, whose address is then read back.
    """
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        sock.connect(("10.255.255.255", 1))
        return sock.getsockname()[0]
    except OSError:
        return "127.0.0.1"
    finally:
        sock.close()
