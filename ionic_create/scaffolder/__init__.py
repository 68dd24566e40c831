"""ionic-create scaffolder -- turns the bundled template package into project files.

Quick usage::

    from ionic_create.scaffolder import MaterializeOptions, TemplateMaterializer

    materializer = TemplateMaterializer()
    materializer.materialize(
        "src/routes",
        "/tmp/my-app",
        MaterializeOptions(
            process_templates=True,
            strip_types=True,
            variables={"projectName": "my-app"},
        ),
    )
"""

from ionic_create.scaffolder.materializer import (
    MaterializeOptions,
    TemplateEntry,
    TemplateMaterializer,
    update_text_file,
)
from ionic_create.scaffolder.resolver import resolve_template_root
from ionic_create.scaffolder.strip_types import strip_types
from ionic_create.scaffolder.substitution import substitute
from ionic_create.scaffolder.svelte import strip_svelte_types
from ionic_create.scaffolder.templates import TemplateRenderer

__all__ = [
    "MaterializeOptions",
    "TemplateEntry",
    "TemplateMaterializer",
    "TemplateRenderer",
    "resolve_template_root",
    "strip_svelte_types",
    "strip_types",
    "substitute",
    "update_text_file",
]
