"""Locate the bundled template package on disk."""

from __future__ import annotations

import sys
from importlib import resources
from pathlib import Path

from ..config import Settings
from ..errors import TemplateNotFoundError

DEFAULT_TEMPLATE = "example"
TEMPLATES_PACKAGE = "ionic_create.templates"
GLOBAL_DATA_DIR = Path("share") / "ionic-create" / "templates"


def candidate_roots(name: str = DEFAULT_TEMPLATE, settings: Settings | None = None) -> list[Path]:
    """Every location *name* may live in, in lookup order."""
    candidates: list[Path] = []

    if settings is not None and settings.template_dir is not None:
        candidates.append(Path(settings.template_dir).expanduser())

    try:
        traversable = resources.files(TEMPLATES_PACKAGE) / name
        candidates.append(Path(str(traversable)))
    except (ModuleNotFoundError, TypeError):
        pass

    candidates.append(Path(__file__).resolve().parent.parent / "templates" / name)
    candidates.append(Path(sys.prefix) / GLOBAL_DATA_DIR / name)
    return candidates


def resolve_template_root(name: str = DEFAULT_TEMPLATE, settings: Settings | None = None) -> Path:
    """Return the absolute root directory of template package *name*.

    Lookup order: an explicit ``Settings.template_dir`` override, the
    ``ionic_create.templates`` package via ``importlib.resources``, the
    directory next to this installed module, then the global data directory
    under ``sys.prefix``.

    Raises:
        TemplateNotFoundError: If none of the candidates is a directory.
    """
    candidates = candidate_roots(name, settings)
    for candidate in candidates:
        if candidate.is_dir():
            return candidate.resolve()

    raise TemplateNotFoundError(
        f"Could not find the '{name}' template package. Make sure ionic-create is installed.",
        candidates[-1],
    )
