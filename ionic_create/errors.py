"""Error taxonomy, rollback tagging, and the top-level error reporter.

Every failure raised by the scaffolder is a ``ScaffoldError``.  The
``project_path`` attribute is part of the error from construction: when a
critical pipeline stage fails, the cleanup handler fills it in so that the
reporter knows which partially created directory to remove.
"""

from __future__ import annotations

import shutil
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from rich.console import Console

ISSUES_URL = "https://github.com/ionic-sveltekit/create/issues"


class ScaffoldError(Exception):
    """Base class for every failure surfaced to the user."""

    kind = "unexpected"
    hint: tuple[str, ...] = ()

    def __init__(self, message: str, *, project_path: str | Path | None = None) -> None:
        self.message = message
        self.project_path = Path(project_path) if project_path else None
        super().__init__(message)


class ProjectValidationError(ScaffoldError):
    """Raised for a bad project name, option value, or non-empty target directory."""

    kind = "validation"
    hint = ("Please check your input and try again.",)


class FileSystemError(ScaffoldError):
    """Raised when creating, reading, writing, copying or deleting fails."""

    kind = "filesystem"
    hint = (
        "Check file permissions",
        "Use a different path with --path option",
        "Make sure the directory is empty or doesn't exist",
    )

    def __init__(
        self,
        message: str,
        path: str | Path | None = None,
        *,
        project_path: str | Path | None = None,
    ) -> None:
        self.path = Path(path) if path else None
        super().__init__(message, project_path=project_path)


class TemplateNotFoundError(FileSystemError):
    """The bundled template package could not be located."""

    kind = "template"
    hint = (
        "Reinstall ionic-create so its bundled templates are present",
        "Or point IONIC_CREATE_TEMPLATE_DIR at a template directory",
    )


class SourceNotFoundError(FileSystemError):
    """A path requested from the template package does not exist."""

    kind = "template"
    hint = TemplateNotFoundError.hint


class PackageManagerError(ScaffoldError):
    """A package manager subprocess exited with a non-zero status."""

    kind = "package_manager"
    hint = (
        "Check your internet connection",
        "Run with --verbose flag for more details",
        "Try a different package manager with --packagemanager option",
    )

    def __init__(
        self,
        message: str,
        command: str = "",
        stderr: str = "",
        *,
        project_path: str | Path | None = None,
    ) -> None:
        self.command = command
        self.stderr = stderr
        super().__init__(message, project_path=project_path)


# ---------------------------------------------------------------------------
# Rollback
# ---------------------------------------------------------------------------


def create_cleanup_handler(
    project_path: str | Path | None,
) -> Callable[[BaseException], ScaffoldError]:
    """Return a function that tags a propagating failure with *project_path*.

    ``ScaffoldError`` instances are tagged in place and returned as-is.  Any
    other exception is wrapped in a ``ScaffoldError`` whose ``__cause__`` is
    the original, so callers can ``raise handler(exc) from exc`` uniformly.
    Passing ``None`` (the directory pre-existed) returns errors untagged.
    """
    path = Path(project_path) if project_path else None

    def _tag(error: BaseException) -> ScaffoldError:
        if not isinstance(error, ScaffoldError):
            wrapped = ScaffoldError(str(error) or type(error).__name__)
            wrapped.__cause__ = error
            error = wrapped
        if path is not None:
            error.project_path = path
        return error

    return _tag


@dataclass
class RollbackResult:
    """Outcome of removing a partially created project."""

    attempted: bool = False
    removed: bool = False
    error: str = ""


def rollback(project_path: Path | None) -> RollbackResult:
    """Delete *project_path* recursively if it exists.  Never retries."""
    if project_path is None or not project_path.exists():
        return RollbackResult()
    try:
        shutil.rmtree(project_path)
    except OSError as exc:
        return RollbackResult(attempted=True, removed=False, error=str(exc))
    return RollbackResult(attempted=True, removed=True)


def report_error(error: BaseException, console: Console | None = None) -> RollbackResult:
    """Print a diagnostic for *error* and roll back its project directory.

    Output contains the message, a kind-specific remediation hint and, when
    the error carries a project path, the rollback outcome.
    """
    out = console or Console(stderr=True)
    message = getattr(error, "message", None) or str(error)
    out.print(f"\n[bold red]✗ Error:[/bold red] {message}")

    if isinstance(error, PackageManagerError):
        out.print("\n[yellow]Package manager error details:[/yellow]")
        out.print(f"[dim]  Command: {error.command}[/dim]")
        if error.stderr:
            out.print(f"[dim]  Error output: {error.stderr}[/dim]")
    elif isinstance(error, FileSystemError):
        out.print("\n[yellow]File system error details:[/yellow]")
        out.print(f"[dim]  Path: {error.path}[/dim]")

    hint = getattr(error, "hint", ())
    if len(hint) == 1:
        out.print(f"\n[yellow]{hint[0]}[/yellow]")
    elif hint:
        out.print("\n[yellow]Try the following:[/yellow]")
        for index, line in enumerate(hint, start=1):
            out.print(f"[yellow]  {index}. {line}[/yellow]")

    result = rollback(getattr(error, "project_path", None))
    if result.attempted:
        if result.removed:
            out.print(
                f"\n[yellow]Cleaned up partially created project at "
                f"{error.project_path}[/yellow]"  # type: ignore[union-attr]
            )
        else:
            out.print(f"\n[red]Failed to clean up directory: {result.error}[/red]")

    out.print("\n[yellow]If the problem persists, please report this issue at:[/yellow]")
    out.print(f"[cyan]{ISSUES_URL}[/cyan]")
    return result
