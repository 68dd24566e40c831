"""Shared pytest fixtures for the ionic-create test suite.

Provides reusable fixtures for:
- Small on-disk template packages
- A quiet Rich console and a mock logger
- A fake package manager that stands in for ``sv`` / ``npm`` subprocesses
"""

from __future__ import annotations

import io
import json
import logging
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
from rich.console import Console

from ionic_create.config import ProjectSpec, Settings


# ---------------------------------------------------------------------------
# Template packages
# ---------------------------------------------------------------------------

PNG_BYTES = (
    b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01"
    b"\x08\x06\x00\x00\x00\x1f\x15\xc4\x89\x00\x00\x00\rIDATx\xdac\xfc\xff"
    b"\x9f\xa1\x1e\x00\x07\x82\x02\x7f=\xc8H\xef\x00\x00\x00\x00IEND\xaeB`\x82"
)


@pytest.fixture
def png_bytes() -> bytes:
    return PNG_BYTES


@pytest.fixture
def template_root(tmp_path: Path) -> Path:
    """A miniature template package with typed, markup, plain and binary files."""
    root = tmp_path / "templates" / "example"
    routes = root / "src" / "routes"
    routes.mkdir(parents=True)
    (routes / "+layout.ts").write_text(
        "import type { LayoutLoad } from './$types';\n"
        "\n"
        "export const ssr = false;\n"
        "\n"
        "export const load: LayoutLoad = () => ({ title: '{{ projectName }}' });\n",
        encoding="utf-8",
    )
    (routes / "+page.svelte").write_text(
        '<script lang="ts">\n'
        "\tlet count: number = 0;\n"
        "</script>\n"
        "\n"
        "<h1>{{ projectName }}</h1>\n"
        "<button onclick={(e: MouseEvent) => count++}>{count}</button>\n",
        encoding="utf-8",
    )
    (routes / "notes.md").write_text("Typed: {{ useTypescript }}\n", encoding="utf-8")
    (routes / "types.d.ts").write_text("declare const VERSION: string;\n", encoding="utf-8")

    static = root / "static"
    static.mkdir()
    (static / "favicon.png").write_bytes(PNG_BYTES)
    (static / "robots.txt").write_text("User-agent: *\n", encoding="utf-8")

    (root / "capacitor.config.ts").write_text(
        "const config = { appId: '{{ appId }}', appName: '{{ appName }}' };\n",
        encoding="utf-8",
    )
    return root


# ---------------------------------------------------------------------------
# Output sinks
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_console() -> Console:
    """Rich console that renders into a buffer (read it via ``.file.getvalue()``)."""
    return Console(file=io.StringIO(), force_terminal=False, width=120)


@pytest.fixture
def mock_logger() -> MagicMock:
    """A logger double so tests can assert on warnings."""
    return MagicMock(spec=logging.Logger)


# ---------------------------------------------------------------------------
# Fake package manager
# ---------------------------------------------------------------------------

PACKAGE_JSON = {
    "name": "demo-app",
    "version": "0.0.1",
    "type": "module",
    "scripts": {"dev": "vite dev", "build": "vite build", "format": "prettier --write ."},
    "devDependencies": {"@sveltejs/adapter-auto": "^3.0.0", "@sveltejs/kit": "^2.0.0"},
}

TSCONFIG = '{\n\t"extends": "./.svelte-kit/tsconfig.json",\n\t"compilerOptions": {\n\t\t"strict": true\n\t}\n}\n'


class FakePackageManager:
    """Records commands and emulates ``sv create`` on disk.

    Any command whose joined text contains ``fail_on`` exits with status 1
    and ``stderr``.
    """

    def __init__(self, fail_on: str | None = None, stderr: str = "npm ERR! network timeout") -> None:
        self.fail_on = fail_on
        self.stderr = stderr
        self.calls: list[tuple[list[str], Path | None]] = []

    async def __call__(self, cmd: list[str], cwd: Any = None, **kwargs: Any) -> tuple[int, str, str]:
        self.calls.append((list(cmd), Path(cwd) if cwd else None))
        line = " ".join(cmd)
        if self.fail_on and self.fail_on in line:
            return 1, "", self.stderr
        if "sv" in cmd and "create" in cmd:
            self._create(cmd)
        return 0, "", ""

    def _create(self, cmd: list[str]) -> None:
        target = Path(cmd[cmd.index("create") + 1])
        (target / "src" / "routes").mkdir(parents=True, exist_ok=True)
        (target / "src" / "routes" / "+page.svelte").write_text(
            "<h1>Welcome to SvelteKit</h1>\n", encoding="utf-8"
        )
        (target / "package.json").write_text(json.dumps(PACKAGE_JSON, indent=2), encoding="utf-8")
        if "ts" in cmd:
            (target / "tsconfig.json").write_text(TSCONFIG, encoding="utf-8")

    def commands(self) -> list[str]:
        return [" ".join(cmd) for cmd, _ in self.calls]


@pytest.fixture
def fake_pm():
    """Patch the package manager's subprocess runner with a ``FakePackageManager``.

    Usage:
        def test_something(fake_pm):
            ...
            assert "npm install --save-dev @sveltejs/adapter-static" in fake_pm.commands()
    """
    fake = FakePackageManager()
    with patch("ionic_create.package_manager.run_command", new=fake):
        yield fake


@pytest.fixture
def fixed_ip():
    """Pin the LAN address used for the Capacitor dev server URL."""
    with patch("ionic_create.pipeline.local_ip_address", return_value="192.168.1.10"):
        yield "192.168.1.10"


# ---------------------------------------------------------------------------
# Specs & settings
# ---------------------------------------------------------------------------


@pytest.fixture
def settings() -> Settings:
    """Settings with the package manager pinned to npm."""
    return Settings(package_manager="npm")


@pytest.fixture
def make_spec(tmp_path: Path):
    """Factory for ``ProjectSpec`` instances rooted in ``tmp_path``."""

    def factory(**overrides: Any) -> ProjectSpec:
        values: dict[str, Any] = {"name": "demo-app", "path": tmp_path, "prettier": False}
        values.update(overrides)
        return ProjectSpec(**values)

    return factory
