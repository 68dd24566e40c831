"""Integration tests for project creation against the bundled template package.

The package manager is replaced by ``FakePackageManager`` (see conftest), so
no network access or Node.js toolchain is required; everything else (stage
tree, materializer, type stripping, Jinja2 partials, rollback) runs for real.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from ionic_create.cli import main
from ionic_create.pipeline import create_project
from ionic_create.scaffolder.resolver import resolve_template_root


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _text_files(root: Path) -> dict[str, str]:
    """Every UTF-8 file under *root*, keyed by POSIX relative path."""
    files: dict[str, str] = {}
    for path in root.rglob("*"):
        if not path.is_file():
            continue
        try:
            files[path.relative_to(root).as_posix()] = path.read_text(encoding="utf-8")
        except UnicodeDecodeError:
            continue
    return files


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------

@pytest.mark.integration
class TestCreateProject:
    """Full runs of ``create_project`` with a fake package manager."""

    async def test_checkjs_project_has_no_typescript(
        self, make_spec, settings, fake_pm, mock_logger, quiet_console
    ):
        project = await create_project(
            make_spec(types="checkjs"), mock_logger, settings, console=quiet_console
        )
        files = _text_files(project / "src")

        assert not [name for name in files if name.endswith(".ts")]
        assert "routes/+layout.js" in files
        assert "lib/components/tabs.js" in files
        assert "lib/utilities/helper.js" in files
        for name, content in files.items():
            assert "{{" not in content, name
            assert "import type" not in content, name
            if name.endswith(".svelte"):
                assert 'lang="ts"' not in content, name

        page = files["routes/+page.svelte"]
        assert "<title>demo-app</title>" in page
        assert "Created with TypeScript: false" in page
        assert "let selected = $state('home');" in page
        assert "export const ssr = false;" in files["routes/+layout.js"]

        assert not (project / "capacitor.config.ts").exists()
        assert not (project / "capacitor.config.json").exists()
        assert not (project / "tsconfig.json").exists()
        mock_logger.warning.assert_not_called()

    async def test_assets_are_copied_verbatim(
        self, make_spec, settings, fake_pm, mock_logger, quiet_console
    ):
        project = await create_project(
            make_spec(types="checkjs"), mock_logger, settings, console=quiet_console
        )
        template = resolve_template_root()

        for relative in ("static/favicon.png", "static/manifest.json", "svelte.config.js", "src/theme/variables.css"):
            assert (project / relative).read_bytes() == (template / relative).read_bytes(), relative

    async def test_typescript_capacitor_project(
        self, make_spec, settings, fake_pm, fixed_ip, mock_logger, quiet_console
    ):
        project = await create_project(
            make_spec(capacitor=True, prettier=True), mock_logger, settings, console=quiet_console
        )

        assert (project / "src" / "routes" / "+layout.ts").is_file()
        assert '<script lang="ts">' in (project / "src" / "routes" / "+page.svelte").read_text(encoding="utf-8")

        config = (project / "capacitor.config.ts").read_text(encoding="utf-8")
        assert "appId: 'demo-app.ionic.io'" in config
        assert "appName: 'demo-app'" in config
        assert f"http://{fixed_ip}:5173/" in config

        readme = (project / "README.md").read_text(encoding="utf-8")
        assert readme.startswith("# Demo App")
        assert "- prettier" in readme
        assert "## Capacitor" in readme

        commands = fake_pm.commands()
        assert "npm exec --yes -- sv add eslint prettier --no-install" in commands
        assert "npm install --save-dev @sveltejs/adapter-static @capacitor/cli" in commands
        assert commands[-1] == "npm run format"

        output = quiet_console.file.getvalue()
        for title in ("Creating base SvelteKit project", "Copying template files", "Finalizing project"):
            assert f"✓ {title}" in output

    def test_failure_rolls_back_through_cli(self, fake_pm, fixed_ip, tmp_path: Path, monkeypatch):
        monkeypatch.delenv("IONIC_CREATE_TEMPLATE_DIR", raising=False)
        fake_pm.fail_on = "ionic-svelte"

        code = main(["demo-app", "--path", str(tmp_path), "--packagemanager", "npm"])

        assert code == 1
        assert not (tmp_path / "demo-app").exists()

    def test_cli_success(self, fake_pm, fixed_ip, tmp_path: Path, monkeypatch):
        monkeypatch.delenv("IONIC_CREATE_TEMPLATE_DIR", raising=False)

        code = main(
            ["demo-app", "--path", str(tmp_path), "--packagemanager", "pnpm", "--capacitor", "--prettier", "false"]
        )

        assert code == 0
        project = tmp_path / "demo-app"
        assert (project / "capacitor.config.ts").is_file()
        assert fake_pm.commands()[0].startswith("pnpm dlx sv create")

