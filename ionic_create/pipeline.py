"""Project creation pipeline.

Builds the concrete stage tree for one ``ProjectSpec`` and runs it:

1. Creating base SvelteKit project -- ``sv create`` (and ``sv add``).
2. Setting up project structure -- directories and template files.
3. Installing dependencies -- dev, production, and removals.
4. Finalizing project -- optional formatting; never fails the run.

Usage::

    project_path = await create_project(ProjectSpec(name="my-app"), get_logger())
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any

from rich.console import Console

from .config import ProjectSpec, Settings
from .errors import FileSystemError, PackageManagerError, create_cleanup_handler
from .logger import get_logger
from .package_manager import (
    PM_COMMANDS,
    detect_package_manager,
    dlx,
    install_dependencies,
    remove_dependencies,
    run_script,
)
from .scaffolder.materializer import MaterializeOptions, TemplateMaterializer, update_text_file
from .scaffolder.templates import TemplateRenderer
from .stages import ExecutionContext, TaskPipeline, TaskStage
from .utils import ensure_dir, local_ip_address, write_text
from .validation import validate_directory, validate_project_name, validate_writable_directory

IONIC_CORE = "@ionic/core@8.2.2"

TSCONFIG_ANCHOR = '"compilerOptions": {'
TSCONFIG_PATCH = """"compilerOptions": {
    "verbatimModuleSyntax": true,
    "typeRoots": [
      "./node_modules/ionic-svelte"
    ],
    "types": [
      "ionic-svelte"
    ],"""

DEV_SCRIPT = '"dev": "vite dev"'
DEV_SCRIPT_HOST = '"dev": "vite dev --host"'


def sv_types_args(spec: ProjectSpec) -> list[str]:
    """``sv create`` flags for the language mode."""
    if spec.types == "typescript":
        return ["--types", "ts"]
    if spec.types == "checkjs":
        return ["--types", "jsdoc"]
    return ["--no-types"]


def dev_dependencies(spec: ProjectSpec) -> list[str]:
    deps = ["@sveltejs/adapter-static"]
    if spec.capacitor:
        deps.append("@capacitor/cli")
    return deps


def prod_dependencies(spec: ProjectSpec) -> list[str]:
    deps = [IONIC_CORE, "ionic-svelte"]
    if spec.capacitor:
        deps.append("@capacitor/core")
    if spec.ionicons:
        deps.append("ionicons")
    return deps


def capacitor_variables(spec: ProjectSpec, settings: Settings) -> dict[str, str]:
    return {
        "appId": spec.name + settings.app_id_suffix,
        "appName": spec.name,
        "serverUrl": f"http://{local_ip_address()}:{settings.dev_server_port}/",
    }


def capacitor_json(variables: dict[str, str]) -> str:
    """``capacitor.config.json`` for untyped projects.

    The dev server entry is stored as ``_server`` so a production build does
    not point at the LAN address; renaming it to ``server`` enables HMR.
    """
    config = {
        "webDir": "build",
        "appId": variables["appId"],
        "appName": variables["appName"],
        "_server": {"url": variables["serverUrl"], "cleartext": True},
    }
    return json.dumps(config, indent=2)


def partial_context(spec: ProjectSpec, package_manager: str, capacitor: dict[str, str]) -> dict[str, Any]:
    commands = PM_COMMANDS.get(package_manager, PM_COMMANDS["npm"])
    return {
        "name": spec.name,
        "package_manager": package_manager,
        "run": " ".join([package_manager, *commands["run"]]),
        "add": " ".join(commands["add"]),
        "add_ons": spec.add_ons,
        "capacitor": spec.capacitor,
        "app_id": capacitor.get("appId", ""),
        "server_url": capacitor.get("serverUrl", ""),
    }


# ---------------------------------------------------------------------------
# Stage tree
# ---------------------------------------------------------------------------


class ProjectStages:
    """Executors for every stage of one project creation run."""

    def __init__(
        self,
        spec: ProjectSpec,
        settings: Settings,
        logger: logging.Logger,
        materializer: TemplateMaterializer | None = None,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        self.spec = spec
        self.settings = settings
        self.logger = logger
        self.materializer = materializer or TemplateMaterializer(settings=settings)
        self.renderer = renderer or TemplateRenderer()

    def build(self) -> list[TaskStage]:
        return [
            TaskStage("Creating base SvelteKit project", self.create_base_project),
            TaskStage(
                "Setting up project structure",
                children=[
                    TaskStage("Creating directories", self.create_directories),
                    TaskStage("Copying template files", self.copy_template_files),
                ],
            ),
            TaskStage(
                "Installing dependencies",
                children=[
                    TaskStage("Installing development dependencies", self.install_dev_dependencies),
                    TaskStage("Installing production dependencies", self.install_prod_dependencies),
                    TaskStage("Removing unused dependencies", self.remove_unused_dependencies),
                ],
            ),
            TaskStage("Finalizing project", self.finalize),
        ]

    # -- 1. base project -----------------------------------------------------

    async def create_base_project(self, ctx: ExecutionContext) -> None:
        spec = self.spec
        ctx.package_manager = (
            spec.package_manager
            or self.settings.package_manager
            or detect_package_manager(ctx.project_path.parent)
        )
        self.logger.debug("Using package manager %s", ctx.package_manager)

        await asyncio.to_thread(ensure_dir, ctx.project_path)
        await dlx(
            "sv",
            [
                "create",
                str(ctx.project_path),
                "--template",
                "minimal",
                *sv_types_args(spec),
                "--no-add-ons",
                "--no-install",
            ],
            cwd=ctx.project_path.parent,
            package_manager=ctx.package_manager,
            verbose=spec.verbose,
        )

        if spec.add_ons:
            await dlx(
                "sv",
                ["add", *spec.add_ons, "--no-install"],
                cwd=ctx.project_path,
                package_manager=ctx.package_manager,
                verbose=spec.verbose,
            )

    # -- 2. project structure --------------------------------------------------

    async def create_directories(self, ctx: ExecutionContext) -> None:
        directories = [Path("src") / "lib" / "components", Path("src") / "theme"]
        if self.spec.capacitor:
            directories.append(Path("capacitor"))
        for directory in directories:
            await asyncio.to_thread(ensure_dir, ctx.project_path / directory)

    async def copy_template_files(self, ctx: ExecutionContext) -> None:
        spec = self.spec
        root = ctx.project_path
        strip = not spec.use_typescript
        copy = self.materializer.materialize

        await asyncio.to_thread(copy, "src/theme", root)
        await asyncio.to_thread(
            copy, "src/lib", root, MaterializeOptions(process_templates=True, strip_types=strip)
        )
        await asyncio.to_thread(copy, "static", root)
        await asyncio.to_thread(
            copy,
            "src/routes",
            root,
            MaterializeOptions(
                process_templates=True,
                strip_types=strip,
                variables={"projectName": spec.name, "useTypescript": spec.use_typescript},
            ),
        )
        await asyncio.to_thread(copy, "svelte.config.js", root)

        capacitor = capacitor_variables(spec, self.settings) if spec.capacitor else {}
        await self.renderer.render_project_files(
            root, partial_context(spec, ctx.package_manager, capacitor)
        )

        if spec.use_typescript:
            await self._patch(root / "tsconfig.json", TSCONFIG_ANCHOR, TSCONFIG_PATCH)

        if spec.capacitor:
            await self._patch(root / "package.json", DEV_SCRIPT, DEV_SCRIPT_HOST)
            if spec.use_typescript:
                await asyncio.to_thread(
                    copy,
                    "capacitor.config.ts",
                    root,
                    MaterializeOptions(process_templates=True, variables=capacitor),
                )
            else:
                await asyncio.to_thread(
                    write_text, root / "capacitor.config.json", capacitor_json(capacitor)
                )
            ctx.data["capacitor"] = capacitor

    async def _patch(self, path: Path, old: str, new: str) -> None:
        """In-place edit that only warns when the file is missing or unwritable."""
        try:
            changed = await asyncio.to_thread(update_text_file, path, old, new)
        except FileSystemError as exc:
            self.logger.warning("Unable to update %s - %s", path.name, exc.message)
            return
        if not changed:
            self.logger.debug("%s already up to date", path.name)

    # -- 3. dependencies -----------------------------------------------------

    async def install_dev_dependencies(self, ctx: ExecutionContext) -> None:
        await install_dependencies(
            dev_dependencies(self.spec),
            ctx.project_path,
            package_manager=ctx.package_manager,
            dev=True,
            verbose=self.spec.verbose,
        )

    async def install_prod_dependencies(self, ctx: ExecutionContext) -> None:
        await install_dependencies(
            prod_dependencies(self.spec),
            ctx.project_path,
            package_manager=ctx.package_manager,
            verbose=self.spec.verbose,
        )

    async def remove_unused_dependencies(self, ctx: ExecutionContext) -> None:
        await remove_dependencies(
            ["@sveltejs/adapter-auto"],
            ctx.project_path,
            package_manager=ctx.package_manager,
            verbose=self.spec.verbose,
        )

    # -- 4. finalize -----------------------------------------------------------

    async def finalize(self, ctx: ExecutionContext) -> None:
        if not self.spec.prettier:
            return
        try:
            await run_script(
                "format",
                ctx.project_path,
                package_manager=ctx.package_manager,
                verbose=self.spec.verbose,
            )
        except PackageManagerError as exc:
            self.logger.warning("Failed to run Prettier - %s", exc.message)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


async def scaffold_project(
    spec: ProjectSpec,
    logger: logging.Logger | None = None,
    settings: Settings | None = None,
    console: Console | None = None,
    materializer: TemplateMaterializer | None = None,
) -> ExecutionContext:
    """Create the project described by *spec* and return the finished run context.

    The context carries what the run resolved: the package manager and,
    for Capacitor projects, the values written into the Capacitor config
    (``ctx.data["capacitor"]``).

    Validation happens before anything is written.  If a later stage fails,
    the error is tagged with the project path (when this run created the
    directory) so :func:`ionic_create.errors.report_error` can remove it.

    Raises:
        ProjectValidationError: Bad name or non-empty destination.
        FileSystemError: A filesystem step failed.
        PackageManagerError: A package manager command failed.
    """
    settings = settings or Settings.from_env()
    logger = logger or get_logger(spec.verbose)

    validate_project_name(spec.name)
    project_path = spec.project_path
    validate_directory(project_path)
    validate_writable_directory(project_path.parent)

    created_here = not project_path.exists()
    cleanup = create_cleanup_handler(project_path if created_here else None)

    stages = ProjectStages(spec, settings, logger, materializer=materializer).build()
    ctx = ExecutionContext(project_path=project_path)
    logger.debug("Creating %s in %s", spec.name, project_path)

    try:
        await TaskPipeline(stages, console=console).run(ctx)
    except Exception as exc:
        tagged = cleanup(exc)
        if tagged is exc:
            raise
        raise tagged from exc

    return ctx


async def create_project(
    spec: ProjectSpec,
    logger: logging.Logger | None = None,
    settings: Settings | None = None,
    console: Console | None = None,
    materializer: TemplateMaterializer | None = None,
) -> Path:
    """Create the project described by *spec* and return its absolute path."""
    ctx = await scaffold_project(spec, logger, settings, console=console, materializer=materializer)
    return ctx.project_path
