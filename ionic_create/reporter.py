"""Completion message printed after a successful run."""

from __future__ import annotations

from rich.console import Console

from .config import ProjectSpec, Settings
from .errors import ISSUES_URL
from .package_manager import PM_COMMANDS

RESOURCES: dict[str, str] = {
    "typescript": "https://www.typescriptlang.org/tsconfig#checkJs",
    "eslint": "https://sveltejs.github.io/eslint-plugin-svelte/",
    "prettier": "https://prettier.io/docs/en/options.html",
    "playwright": "https://playwright.dev",
    "vitest": "https://vitest.dev",
    "capacitor": "https://capacitorjs.com/docs/getting-started",
    "ionicons": "https://ionic.io/ionicons",
    "pwa": "https://github.com/vite-pwa/sveltekit",
}

_TOOLING_LABELS = (
    ("eslint", "ESLint"),
    ("prettier", "Prettier"),
    ("playwright", "Playwright"),
    ("vitest", "Vitest"),
)


def next_steps(spec: ProjectSpec, package_manager: str = "npm") -> list[str]:
    """Shell commands to run after creation, in order."""
    run = " ".join([package_manager, *PM_COMMANDS.get(package_manager, PM_COMMANDS["npm"])["run"]])
    steps = [f"cd {spec.directory_name}"]
    if spec.capacitor:
        steps += [
            "npm i @capacitor/android and/or @capacitor/ios",
            "npx cap add android and/or ios",
            f"{run} build to fill the build directory",
            "npx cap sync to sync the build into the target folder",
            "npx cap open android or ios to open the project and mark as trusted",
        ]
    steps.append(f"{run} dev -- --open")
    return steps


def print_completion_message(
    spec: ProjectSpec,
    package_manager: str = "npm",
    capacitor: dict[str, str] | None = None,
    settings: Settings | None = None,
    console: Console | None = None,
) -> None:
    """Summarise the enabled features and the next steps."""
    out = console or Console()
    settings = settings or Settings()

    out.print("\n[bold green]Your project is ready![/bold green]")

    if spec.types == "typescript":
        out.print("[bold]✓ TypeScript[/bold]")
        out.print('  Inside Svelte components, use [dim]<script lang="ts">[/dim]')
        out.print(f"  [cyan]{RESOURCES['typescript']}[/cyan]")
    elif spec.types == "checkjs":
        out.print("[bold]✓ Type-checked JavaScript[/bold]")
        out.print(f"  [cyan]{RESOURCES['typescript']}[/cyan]")

    for toggle, label in _TOOLING_LABELS:
        if getattr(spec, toggle):
            out.print(f"[bold]✓ {label}[/bold]")
            out.print(f"  [cyan]{RESOURCES[toggle]}[/cyan]")

    if spec.capacitor:
        out.print("[bold]✓ Capacitor[/bold]")
        out.print(f"  [cyan]{RESOURCES['capacitor']}[/cyan]")
        out.print(
            "[bold]  Please note - the project is configured with HMR - remove the server "
            "entry in the Capacitor config for the final build[/bold]"
        )

    if spec.ionicons:
        out.print("[bold]✓ Ionicons[/bold]")
        out.print(f"  [cyan]{RESOURCES['ionicons']}[/cyan]")

    if spec.capacitor:
        values = capacitor or {}
        config_file = "capacitor.config.ts" if spec.use_typescript else "capacitor.config.json"
        out.print(f"\nCapacitor configuration - see: [bold cyan]{config_file}[/bold cyan]")
        out.print(f"  App name [bold cyan]{values.get('appName', spec.name)}[/bold cyan]")
        out.print(
            f"  Package name [bold cyan]"
            f"{values.get('appId', spec.name + settings.app_id_suffix)}[/bold cyan]"
        )
        if values.get("serverUrl"):
            out.print(f"  Vite dev server url [bold cyan]{values['serverUrl']}[/bold cyan]")

    out.print("\nNext steps:")
    for index, step in enumerate(next_steps(spec, package_manager), start=1):
        out.print(f"  {index}: [bold cyan]{step}[/bold cyan]")
    out.print("\nTo close the dev server, hit [bold cyan]Ctrl-C[/bold cyan]")

    if spec.capacitor and not spec.use_typescript:
        out.print(
            "\nWant HMR in Capacitor dev mode? Rename [bold cyan]_server[/bold cyan] to "
            "[bold cyan]server[/bold cyan] in [bold cyan]capacitor.config.json[/bold cyan]"
        )
    elif spec.capacitor:
        out.print(
            "\nUse the [bold cyan]-hmr[/bold cyan] flag after your "
            "[bold cyan]npx cap run/open/sync[/bold cyan] commands to use HMR together with "
            "[bold cyan]npm run dev[/bold cyan]"
        )

    out.print(
        "\nHint: Make your app offline and near native by turning it into a progressive "
        f"web app - see [cyan]{RESOURCES['pwa']}[/cyan]"
    )
    out.print(
        f"\n[dim]Need some help or found an issue with this installer? "
        f"Visit us on Github {ISSUES_URL.rsplit('/issues', 1)[0]}[/dim]"
    )
