from __future__ import annotations

from typing import Any


def _or_dash(value: object) -> str:
    return "-" if value is None else str(value)


def render_markdown(summary: dict[str, Any]) -> str:
    run = summary["run"]
    tasks = summary["tasks"]
    problems = summary["problems"]

    lines: list[str] = []
    lines.append("# Automation Report")
    lines.append("")
    lines.append("## Run Overview")
    lines.append("")
    lines.append(f"- root task: `{run['task']}`")
    lines.append(f"- status: **{run['status']}**")
    lines.append(f"- started: {_or_dash(run['started_at'])}")
    lines.append(f"- ended: {_or_dash(run['ended_at'])}")
    lines.append(f"- tasks: {run['total']}")
    for status, count in run["counts"].items():
        lines.append(f"  - {status}: {count}")
    lines.append("")
    lines.append("## Task Results")
    lines.append("")
    lines.append("| path | status | duration_sec |")
    lines.append("|---|---|---:|")
    for row in tasks:
        lines.append(f"| `{row['path']}` | {row['status']} | {_or_dash(row['duration_sec'])} |")
    lines.append("")
    lines.append("## Failures")
    lines.append("")
    if problems:
        for row in problems:
            lines.append(f"### {row['path']} ({row['error_type']})")
            lines.append("```")
            lines.append(str(row["error_message"] or "(no message)"))
            lines.append("```")
            lines.append("")
    else:
        lines.append("No failed tasks.")
        lines.append("")
    return "\n".join(lines)
