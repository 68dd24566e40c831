"""Copy parts of the template package into a project.

Directories are copied verbatim first (binary assets included) and then,
when processing is requested, every copied file is revisited: ``.ts``
sources are stripped and renamed to ``.js``, ``.svelte`` components are
stripped in place, and ``{{ key }}`` placeholders are substituted last.
Files that are not UTF-8 text are left exactly as copied.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path

from ..config import Settings
from ..errors import FileSystemError, ScaffoldError, SourceNotFoundError
from .resolver import DEFAULT_TEMPLATE, resolve_template_root
from .strip_types import strip_types, typed_to_untyped_name
from .substitution import find_placeholders, substitute
from .svelte import strip_svelte_types

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TemplateEntry:
    """One file found under a materialized directory."""

    relative_path: Path
    content: str | bytes

    @property
    def processable(self) -> bool:
        return isinstance(self.content, str)


@dataclass
class MaterializeOptions:
    """What to do with copied files.

    Attributes:
        process_templates: Revisit copied files at all.
        strip_types: Remove TypeScript from ``.ts`` and ``.svelte`` files.
        variables: ``{{ key }}`` substitutions applied after stripping.
        dest_path: Destination relative to the project root; defaults to
            the source subpath.
    """

    process_templates: bool = False
    strip_types: bool = False
    variables: Mapping[str, object] = field(default_factory=dict)
    dest_path: str | None = None


def iter_entries(root: Path) -> Iterator[TemplateEntry]:
    """Yield every file under *root* in sorted order, decoded when possible."""
    for path in sorted(p for p in root.rglob("*") if p.is_file()):
        raw = path.read_bytes()
        try:
            content: str | bytes = raw.decode("utf-8")
        except UnicodeDecodeError:
            content = raw
        yield TemplateEntry(path.relative_to(root), content)


def transform_file(
    relative_path: Path,
    content: str,
    strip: bool,
    variables: Mapping[str, object] | None,
) -> tuple[Path, str]:
    """Return the new relative path and content for one text file."""
    if strip and relative_path.suffix == ".ts" and not relative_path.name.endswith(".d.ts"):
        content = strip_types(content)
        relative_path = relative_path.with_name(typed_to_untyped_name(relative_path.name))
    elif strip and relative_path.suffix == ".svelte":
        content = strip_svelte_types(content)

    if variables:
        content = fill_placeholders(relative_path, content, variables)
    return relative_path, content


def fill_placeholders(relative_path: Path, content: str, variables: Mapping[str, object]) -> str:
    """Substitute *variables*; keys left without a value are logged at debug level."""
    content = substitute(content, variables)
    unresolved = find_placeholders(content)
    if unresolved:
        logger.debug("Unresolved placeholders in %s: %s", relative_path, ", ".join(unresolved))
    return content


class TemplateMaterializer:
    """Materializes template package paths into a destination project."""

    def __init__(
        self,
        template_root: str | Path | None = None,
        template: str = DEFAULT_TEMPLATE,
        settings: Settings | None = None,
    ) -> None:
        self._template_root = Path(template_root) if template_root else None
        self.template = template
        self.settings = settings

    @property
    def template_root(self) -> Path:
        if self._template_root is None:
            self._template_root = resolve_template_root(self.template, self.settings)
        return self._template_root

    def materialize(
        self,
        source_subpath: str,
        destination_root: str | Path,
        options: MaterializeOptions | None = None,
    ) -> Path:
        """Copy ``<template root>/<source_subpath>`` under *destination_root*.

        Returns:
            The destination path.

        Raises:
            SourceNotFoundError: If the source does not exist.
            FileSystemError: For any other filesystem failure.
        """
        options = options or MaterializeOptions()
        try:
            source = self.template_root / source_subpath
            if not source.exists():
                raise SourceNotFoundError(f"Template source not found: {source}", source)

            destination = Path(destination_root) / (options.dest_path or source_subpath)
            if source.is_dir():
                self._copy_directory(source, destination, options)
            else:
                self._copy_file(source, destination, options)
            return destination
        except ScaffoldError:
            raise
        except OSError as exc:
            failed = exc.filename or destination_root
            raise FileSystemError(f"Failed to copy from example package: {exc}", failed) from exc

    def _copy_directory(self, source: Path, destination: Path, options: MaterializeOptions) -> None:
        logger.debug("Copying %s -> %s", source, destination)
        shutil.copytree(source, destination, dirs_exist_ok=True)

        if not options.process_templates:
            return
        if not options.strip_types and not options.variables:
            return

        for entry in iter_entries(destination):
            if not entry.processable:
                logger.debug("Skipping binary file %s", entry.relative_path)
                continue
            new_relative, new_content = transform_file(
                entry.relative_path, entry.content, options.strip_types, options.variables
            )
            if new_relative == entry.relative_path and new_content == entry.content:
                continue

            target = destination / new_relative
            target.write_text(new_content, encoding="utf-8")
            if new_relative != entry.relative_path:
                (destination / entry.relative_path).unlink()
                logger.debug("Renamed %s -> %s", entry.relative_path, new_relative)

    def _copy_file(self, source: Path, destination: Path, options: MaterializeOptions) -> None:
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(source, destination)

        if not (options.process_templates and options.variables):
            return
        try:
            content = destination.read_text(encoding="utf-8")
        except UnicodeDecodeError:
            return
        processed = fill_placeholders(Path(destination.name), content, options.variables)
        if processed != content:
            destination.write_text(processed, encoding="utf-8")


def update_text_file(path: str | Path, old: str, new: str) -> bool:
    """Replace the first occurrence of *old* with *new* in a text file.

    Returns ``True`` when the file changed.

    Raises:
        FileSystemError: If the file cannot be read or written.
    """
    file_path = Path(path)
    try:
        content = file_path.read_text(encoding="utf-8")
        if old not in content:
            return False
        file_path.write_text(content.replace(old, new, 1), encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise FileSystemError(f"Failed to update file: {file_path}", file_path) from exc
    return True
