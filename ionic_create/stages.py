"""Staged task pipeline.

A tree of named stages executed depth-first in declaration order.  Stages
run one at a time: every ``await`` finishes (children included) before the
next sibling starts, because later stages depend on what earlier ones left
on disk.  The first failing executor aborts the whole run; non-critical
stages are expected to catch their own errors and log a warning instead.
"""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from rich.console import Console

from .utils import console as default_console
from .utils import format_duration

Executor = Callable[["ExecutionContext"], Awaitable[Optional[list["TaskStage"]]]]


class StageStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class ExecutionContext:
    """State shared by the stages of one run.

    Attributes:
        project_path: Absolute root of the project being created.  Every
            subprocess and file operation is based on it; the process
            working directory is never changed.
        package_manager: Resolved by the first stage and read by later ones.
        completed: Titles of completed stages, in completion order.
        data: Free-form values passed between stages.
    """

    project_path: Path
    package_manager: str = "npm"
    completed: list[str] = field(default_factory=list)
    data: dict[str, Any] = field(default_factory=dict)


@dataclass
class TaskStage:
    """One named unit of work, optionally with child stages.

    The executor may return further stages; they run as children right
    after it, ahead of any statically declared ``children``.
    """

    title: str
    executor: Optional[Executor] = None
    children: list["TaskStage"] = field(default_factory=list)
    enabled: Optional[Callable[[ExecutionContext], bool]] = None
    status: StageStatus = StageStatus.PENDING
    duration: float = 0.0

    def is_enabled(self, ctx: ExecutionContext) -> bool:
        return self.enabled is None or bool(self.enabled(ctx))


class TaskPipeline:
    """Runs a list of ``TaskStage`` trees against one ``ExecutionContext``."""

    def __init__(self, stages: list[TaskStage], console: Console | None = None) -> None:
        self.stages = stages
        self.console = console or default_console

    async def run(self, ctx: ExecutionContext) -> ExecutionContext:
        """Execute every stage in order.

        Raises:
            Whatever a stage's executor raised; no later stage is started.
        """
        for stage in self.stages:
            await self._run_stage(stage, ctx, depth=0)
        return ctx

    async def _run_stage(self, stage: TaskStage, ctx: ExecutionContext, depth: int) -> None:
        if stage.status is not StageStatus.PENDING:
            raise RuntimeError(f"Stage '{stage.title}' has already run")

        indent = "  " * depth
        if not stage.is_enabled(ctx):
            stage.status = StageStatus.SKIPPED
            self.console.print(f"{indent}[dim]- {stage.title} (skipped)[/dim]")
            return

        stage.status = StageStatus.RUNNING
        self.console.print(f"{indent}[cyan]>[/cyan] {stage.title}")
        start = time.monotonic()
        try:
            dynamic = await stage.executor(ctx) if stage.executor is not None else None
            for child in [*(dynamic or []), *stage.children]:
                await self._run_stage(child, ctx, depth + 1)
        except BaseException:
            stage.duration = time.monotonic() - start
            stage.status = StageStatus.FAILED
            self.console.print(
                f"{indent}[bold red]✗[/bold red] {stage.title} "
                f"[dim]({format_duration(stage.duration)})[/dim]"
            )
            raise

        stage.duration = time.monotonic() - start
        stage.status = StageStatus.COMPLETED
        ctx.completed.append(stage.title)
        self.console.print(
            f"{indent}[green]✓[/green] {stage.title} "
            f"[dim]({format_duration(stage.duration)})[/dim]"
        )
