"""Unit tests for the completion message (ionic_create.reporter)."""

from __future__ import annotations

import io

import pytest
from rich.console import Console

from ionic_create.reporter import RESOURCES, next_steps, print_completion_message


@pytest.fixture
def wide_console() -> Console:
    return Console(file=io.StringIO(), force_terminal=False, width=300)


CAPACITOR = {"appId": "demo-app.ionic.io", "appName": "demo-app", "serverUrl": "http://192.168.1.10:5173/"}


class TestNextSteps:
    @pytest.mark.unit
    def test_web_project(self, make_spec):
        assert next_steps(make_spec(), "npm") == ["cd demo-app", "npm run dev -- --open"]

    @pytest.mark.unit
    def test_yarn_has_no_run_prefix(self, make_spec):
        assert next_steps(make_spec(), "yarn")[-1] == "yarn dev -- --open"

    @pytest.mark.unit
    def test_capacitor_steps(self, make_spec):
        steps = next_steps(make_spec(name="My App", capacitor=True), "pnpm")

        assert steps[0] == "cd my-app"
        assert "pnpm run build to fill the build directory" in steps
        assert steps.index("npx cap add android and/or ios") < steps.index(
            "npx cap sync to sync the build into the target folder"
        )
        assert steps[-1] == "pnpm run dev -- --open"


class TestCompletionMessage:
    @pytest.mark.unit
    def test_typescript_web_project(self, make_spec, wide_console):
        print_completion_message(make_spec(), "npm", console=wide_console)
        text = wide_console.file.getvalue()

        assert "Your project is ready!" in text
        assert "✓ TypeScript" in text
        assert "✓ ESLint" in text
        assert "✓ Prettier" not in text
        assert "✓ Ionicons" in text
        assert "Capacitor" not in text
        assert "1: cd demo-app" in text
        assert "2: npm run dev -- --open" in text
        assert RESOURCES["pwa"] in text

    @pytest.mark.unit
    def test_checkjs_capacitor_project(self, make_spec, wide_console):
        spec = make_spec(types="checkjs", capacitor=True, vitest=True)
        print_completion_message(spec, "npm", capacitor=CAPACITOR, console=wide_console)
        text = wide_console.file.getvalue()

        assert "✓ Type-checked JavaScript" in text
        assert "✓ Vitest" in text
        assert "see: capacitor.config.json" in text
        assert "Package name demo-app.ionic.io" in text
        assert "Vite dev server url http://192.168.1.10:5173/" in text
        assert "Rename _server to server in capacitor.config.json" in text

    @pytest.mark.unit
    def test_typescript_capacitor_hmr_hint(self, make_spec, wide_console):
        print_completion_message(make_spec(capacitor=True), "npm", capacitor=CAPACITOR, console=wide_console)
        text = wide_console.file.getvalue()

        assert "see: capacitor.config.ts" in text
        assert "-hmr" in text

    @pytest.mark.unit
    def test_capacitor_values_default_from_settings(self, make_spec, wide_console):
        print_completion_message(make_spec(capacitor=True), "npm", console=wide_console)
        text = wide_console.file.getvalue()

        assert "App name demo-app" in text
        assert "Package name demo-app.ionic.io" in text
        assert "Vite dev server url" not in text
