"""Input validation run before any pipeline stage touches the filesystem.

Project names follow the npm rules for new packages: the generated
``package.json`` uses the project name, so anything npm would refuse is
rejected up front.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

from .errors import ProjectValidationError

MAX_NAME_LENGTH = 214

BLACKLISTED_NAMES = frozenset({"node_modules", "favicon.ico"})

NODE_BUILTINS = frozenset({
    "assert", "async_hooks", "buffer", "child_process", "cluster", "console",
    "constants", "crypto", "dgram", "diagnostics_channel", "dns", "domain",
    "events", "fs", "http", "http2", "https", "inspector", "module", "net",
    "os", "path", "perf_hooks", "process", "punycode", "querystring",
    "readline", "repl", "stream", "string_decoder", "sys", "timers", "tls",
    "trace_events", "tty", "url", "util", "v8", "vm", "wasi", "worker_threads",
    "zlib",
})

# Characters left alone by JavaScript's encodeURIComponent.
_URL_SAFE = re.compile(r"^[A-Za-z0-9\-_.!~*'()]+$")
_SCOPED = re.compile(r"^@([^/]+)/(.+)$")
_SPECIAL_CHARS = re.compile(r"[~'!()*]")

TYPES_OPTIONS = ("typescript", "checkjs")


def project_name_problems(name: str) -> list[str]:
    """Return every reason *name* is not a valid new npm package name."""
    problems: list[str] = []

    if not name:
        return ["name length must be greater than zero"]

    if name.startswith("."):
        problems.append("name cannot start with a period")
    if name.startswith("_"):
        problems.append("name cannot start with an underscore")
    if name.strip() != name:
        problems.append("name cannot contain leading or trailing spaces")
    if name.lower() in BLACKLISTED_NAMES:
        problems.append(f"{name} is a blacklisted name")
    if name in NODE_BUILTINS:
        problems.append(f"{name} is a core module name")
    if len(name) > MAX_NAME_LENGTH:
        problems.append(f"name can no longer contain more than {MAX_NAME_LENGTH} characters")
    if name.lower() != name:
        problems.append("name can no longer contain capital letters")
    if _SPECIAL_CHARS.search(name.split("/")[-1]):
        problems.append('name can no longer contain special characters ("~\'!()*")')

    if not _URL_SAFE.match(name):
        scoped = _SCOPED.match(name)
        if not (
            scoped
            and _URL_SAFE.match(scoped.group(1))
            and _URL_SAFE.match(scoped.group(2))
        ):
            problems.append("name can only contain URL-friendly characters")

    return problems


def validate_project_name(name: str) -> bool:
    """Raise ``ProjectValidationError`` unless *name* is a valid package name."""
    problems = project_name_problems(name)
    if problems:
        details = "\n".join(f"  - {problem}" for problem in problems)
        raise ProjectValidationError(f'Invalid project name: "{name}"\n{details}')
    return True


def validate_directory(dir_path: str | Path) -> bool:
    """Ensure *dir_path* does not exist or holds only hidden entries."""
    path = Path(dir_path)
    if path.exists():
        if not path.is_dir():
            raise ProjectValidationError(f'Path exists and is not a directory: "{path}"')
        visible = [entry.name for entry in path.iterdir() if not entry.name.startswith(".")]
        if visible:
            raise ProjectValidationError(
                f'Directory is not empty: "{path}"\n'
                "Please choose an empty directory or create a new one."
            )
    return True


def validate_writable_directory(dir_path: str | Path) -> bool:
    """Create *dir_path* if needed and prove a file can be written in it."""
    path = Path(dir_path)
    marker = path / ".write-test"
    try:
        path.mkdir(parents=True, exist_ok=True)
        marker.write_text("test", encoding="utf-8")
        marker.unlink()
    except OSError as exc:
        raise ProjectValidationError(
            f'Cannot write to directory: "{path}"\n'
            "Please check permissions or choose a different directory."
        ) from exc
    return True


def parse_bool(value: Any) -> bool:
    """Interpret a command-line boolean (``yes``/``no``, ``1``/``0`` ...)."""
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in ("true", "yes", "y", "1"):
        return True
    if text in ("false", "no", "n", "0"):
        return False
    raise ProjectValidationError(
        f'Invalid boolean value: "{value}"\nPlease use true/false, yes/no, y/n, or 1/0.'
    )


def validate_types_option(value: Any) -> str | None:
    """Normalise the language mode; ``False``/``"false"``/``"none"`` mean plain JS."""
    if value is None or value is False:
        return None
    text = str(value).strip().lower()
    if text in ("false", "none", "no", ""):
        return None
    if text in TYPES_OPTIONS:
        return text
    raise ProjectValidationError(
        f'Invalid TypeScript option: "{value}"\n'
        "Please use 'typescript', 'checkjs', or false."
    )
