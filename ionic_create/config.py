"""ionic-create configuration.

Typed models for the project being created (``ProjectSpec``) and for the
tool itself (``Settings``).  Both use Pydantic v2 so they are validated at
construction time and can be saved to / loaded from JSON presets.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .utils import project_directory_name
from .validation import validate_types_option

PackageManagerName = Literal["npm", "pnpm", "yarn"]

ADD_ON_TOGGLES: tuple[str, ...] = ("eslint", "prettier", "playwright", "vitest")


class ProjectSpec(BaseModel):
    """Everything needed to create one project.

    Built once from CLI flags (or a saved preset) and frozen afterwards; the
    package manager detected at runtime lives in the pipeline's execution
    context, not here.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(default="ionic-sveltekit-project")
    path: Path = Field(default=Path("."), description="Parent directory; the name is appended")
    types: Optional[Literal["typescript", "checkjs"]] = Field(default="typescript")

    eslint: bool = Field(default=True, description="Add ESLint for code linting")
    prettier: bool = Field(default=True, description="Add Prettier for code formatting")
    playwright: bool = Field(default=False, description="Add Playwright for browser testing")
    vitest: bool = Field(default=False, description="Add Vitest for unit testing")
    ionicons: bool = Field(default=True, description="Include Ionic icon library")
    capacitor: bool = Field(default=False, description="Install dependencies for Capacitor")

    package_manager: Optional[PackageManagerName] = Field(default=None)
    verbose: bool = Field(default=False)

    @field_validator("types", mode="before")
    @classmethod
    def _normalise_types(cls, value: Any) -> str | None:
        return validate_types_option(value)

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def directory_name(self) -> str:
        return project_directory_name(self.name)

    @property
    def project_path(self) -> Path:
        """Absolute directory the project is created in."""
        return Path(self.path).expanduser().resolve() / self.directory_name

    @property
    def use_typescript(self) -> bool:
        return self.types == "typescript"

    @property
    def add_ons(self) -> list[str]:
        """``sv add`` add-on names for the enabled tooling toggles."""
        return [toggle for toggle in ADD_ON_TOGGLES if getattr(self, toggle)]

    # ------------------------------------------------------------------
    # Presets
    # ------------------------------------------------------------------

    @classmethod
    def defaults(cls, **overrides: Any) -> "ProjectSpec":
        """Default options with *overrides* (``None`` values ignored) applied."""
        return cls(**{key: value for key, value in overrides.items() if value is not None})

    def save(self, path: Path) -> Path:
        """Persist this spec as a reusable JSON preset."""
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "ProjectSpec":
        """Load a preset written by :meth:`save`."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)


class Settings(BaseModel):
    """Tool-level settings, independent of the project being created."""

    template_dir: Optional[Path] = Field(
        default=None, description="Use this template package instead of the bundled one"
    )
    package_manager: Optional[PackageManagerName] = Field(default=None)
    dev_server_port: int = Field(default=5173, ge=1, le=65535)
    app_id_suffix: str = Field(default=".ionic.io")

    @classmethod
    def from_env(cls) -> "Settings":
        """Build ``Settings`` from environment variables.

        Recognised variables (all optional):
            IONIC_CREATE_TEMPLATE_DIR, IONIC_CREATE_PACKAGE_MANAGER,
            IONIC_CREATE_DEV_PORT, IONIC_CREATE_APP_ID_SUFFIX.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("IONIC_CREATE_TEMPLATE_DIR"):
            kwargs["template_dir"] = Path(os.environ["IONIC_CREATE_TEMPLATE_DIR"])
        if os.environ.get("IONIC_CREATE_PACKAGE_MANAGER"):
            kwargs["package_manager"] = os.environ["IONIC_CREATE_PACKAGE_MANAGER"]
        if os.environ.get("IONIC_CREATE_DEV_PORT"):
            kwargs["dev_server_port"] = int(os.environ["IONIC_CREATE_DEV_PORT"])
        if os.environ.get("IONIC_CREATE_APP_ID_SUFFIX"):
            kwargs["app_id_suffix"] = os.environ["IONIC_CREATE_APP_ID_SUFFIX"]
        return cls(**kwargs)
