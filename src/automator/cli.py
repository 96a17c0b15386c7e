from __future__ import annotations

import asyncio
import importlib
import json
import logging
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from automator.config.loader import load_plan
from automator.config.schema import PlanSpec
from automator.core.task import Task
from automator.facade import Automator, default_automator
from automator.report.render_md import render_markdown
from automator.report.summarize import build_summary
from automator.util.errors import AutomatorError, PlanError

app = typer.Typer(help="Collaboratory task automator")
console = Console()
logger = logging.getLogger("automator")

_STATUS_STYLE = {
    "idle": "dim",
    "progress": "yellow",
    "success": "green",
    "error": "red",
}

PluginOption = Annotated[
    list[str] | None,
    typer.Option("--plugin", "-p", help="Module registering handlers; may be repeated."),
]
LogLevelOption = Annotated[str, typer.Option("--log-level")]


def _configure_logging(level: str) -> None:
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        console.print(f"[red]Invalid log level:[/red] {level}")
        raise typer.Exit(2)
    logging.basicConfig(
        level=numeric,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_plugins(modules: list[str] | None, automator: Automator) -> None:
    for module_name in modules or []:
        try:
            module = importlib.import_module(module_name)
        except ImportError as exc:
            console.print(f"[red]Failed to load plugin:[/red] {module_name}: {exc}")
            raise typer.Exit(2) from exc
        register = getattr(module, "register", None)
        if callable(register):
            register(automator)
        logger.debug("plugin loaded: %s", module_name)


def _exit_code_for_task(root: Task) -> int:
    return 0 if root.state == "success" else 3


def _build_or_exit(plan_path: Path, automator: Automator) -> tuple[PlanSpec, Task]:
    try:
        plan = load_plan(plan_path)
    except PlanError as exc:
        console.print(f"[red]Plan validation error:[/red] {exc}")
        raise typer.Exit(2) from exc
    try:
        root = automator.task(plan.task, plan.descriptor, plan.context)
    except AutomatorError as exc:
        console.print(f"[red]{exc.type}:[/red] {exc}")
        raise typer.Exit(2) from exc
    return plan, root


def _describe(descriptor: dict[str, Any]) -> str:
    fields = [f"{key}={value!r}" for key, value in descriptor.items() if key != "after"]
    return ", ".join(fields)


def _add_branch(tree: Tree, task: Task) -> None:
    label = f"[bold]{task.name}[/bold]"
    detail = _describe(dict(task.descriptor))
    if detail:
        label = f"{label} ({escape(detail)})"
    branch = tree.add(label)
    for subtask in task.subtasks:
        _add_branch(branch, subtask)


def _render_tree(root: Task) -> Tree:
    tree = Tree("Task Tree")
    _add_branch(tree, root)
    return tree


async def _run_root(root: Task) -> None:
    try:
        await root.run()
    except AutomatorError as exc:
        logger.error("run failed: %s: %s", exc.type, exc)


def _write_report(root: Task, report_path: Path) -> None:
    summary = build_summary(root.snapshot())
    report_path.parent.mkdir(parents=True, exist_ok=True)
    report_path.write_text(render_markdown(summary) + "\n", encoding="utf-8")


@app.command()
def run(
    plan_path: Annotated[Path, typer.Argument(exists=True)],
    plugin: PluginOption = None,
    as_json: Annotated[bool, typer.Option("--json")] = False,
    report: Annotated[Path | None, typer.Option("--report")] = None,
    log_level: LogLevelOption = "WARNING",
) -> None:
    _configure_logging(log_level)
    _load_plugins(plugin, default_automator)
    _, root = _build_or_exit(plan_path, default_automator)

    asyncio.run(_run_root(root))

    if report is not None:
        try:
            _write_report(root, report)
        except OSError as exc:
            console.print(f"[yellow]Warning:[/yellow] failed to write report: {exc}")

    if as_json:
        typer.echo(json.dumps(root.snapshot().to_dict(), ensure_ascii=False, indent=2))
        raise typer.Exit(_exit_code_for_task(root))

    summary = build_summary(root.snapshot())
    table = Table(title=f"Run: {root.name}")
    table.add_column("task")
    table.add_column("status")
    table.add_column("duration_sec", justify="right")
    table.add_column("error")
    for row in summary["tasks"]:
        status = str(row["status"])
        style = _STATUS_STYLE[status]
        error = "" if row["error_type"] is None else f"{row['error_type']}: {row['error_message']}"
        table.add_row(
            "  " * int(row["depth"]) + escape(str(row["name"])),
            f"[{style}]{status}[/{style}]",
            "-" if row["duration_sec"] is None else str(row["duration_sec"]),
            escape(error),
        )
    console.print(table)
    console.print(f"state: [bold]{root.state}[/bold]")
    if report is not None:
        console.print(f"report: {report}")
    raise typer.Exit(_exit_code_for_task(root))


@app.command()
def validate(
    plan_path: Annotated[Path, typer.Argument(exists=True)],
    plugin: PluginOption = None,
    log_level: LogLevelOption = "WARNING",
) -> None:
    _configure_logging(log_level)
    _load_plugins(plugin, default_automator)
    _, root = _build_or_exit(plan_path, default_automator)
    console.print(_render_tree(root))
    console.print(f"tasks: [bold]{sum(1 for _ in root.walk())}[/bold]")


@app.command("handlers")
def list_handlers(
    plugin: PluginOption = None,
    log_level: LogLevelOption = "WARNING",
) -> None:
    _configure_logging(log_level)
    _load_plugins(plugin, default_automator)
    names = default_automator.handlers.names()
    if not names:
        console.print("(no handlers registered)")
        return
    for name in names:
        console.print(name)


if __name__ == "__main__":
    app()
