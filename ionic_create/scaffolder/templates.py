"""Jinja2 rendering for the generated ``.env`` and ``README.md``.

These two files depend on the chosen options (package manager, Capacitor,
tooling add-ons) in ways that plain ``{{ key }}`` substitution cannot
express, so they are rendered from partials in ``scaffolder/partials/``
rather than copied from the template package.
"""

from __future__ import annotations

import asyncio
import re
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from ..utils import write_text

PARTIALS_DIR = Path(__file__).parent / "partials"

# Partial name -> file written at the project root.
PROJECT_PARTIALS: dict[str, str] = {
    "env.j2": ".env",
    "README.md.j2": "README.md",
}


def title_case(value: str) -> str:
    """``demo-app`` / ``demo_app`` -> ``Demo App``."""
    return " ".join(word.capitalize() for word in re.split(r"[-_\s]+", value) if word)


class TemplateRenderer:
    """Renders the option-dependent partials for a new project.

    Undefined variables are errors: a partial referring to a key the
    pipeline did not supply fails loudly instead of writing a blank.
    """

    def __init__(self, partials_dir: str | Path | None = None) -> None:
        self.partials_dir = Path(partials_dir) if partials_dir else PARTIALS_DIR
        self.env = Environment(
            loader=FileSystemLoader(str(self.partials_dir)),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["title_case"] = title_case

    def render(self, partial: str, context: dict[str, Any]) -> str:
        return self.env.get_template(partial).render(**context)

    async def render_to_file(self, partial: str, destination: str | Path, context: dict[str, Any]) -> Path:
        """Render *partial* and write it to *destination*.

        Raises:
            FileSystemError: If the file cannot be written.
        """
        return await asyncio.to_thread(write_text, destination, self.render(partial, context))

    async def render_project_files(self, project_path: str | Path, context: dict[str, Any]) -> list[Path]:
        """Render every entry of ``PROJECT_PARTIALS`` into *project_path*."""
        root = Path(project_path)
        return [
            await self.render_to_file(partial, root / filename, context)
            for partial, filename in PROJECT_PARTIALS.items()
        ]
