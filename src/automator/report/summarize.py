from __future__ import annotations

from collections import Counter

from automator.state.model import TaskSnapshot


def _flatten(
    snapshot: TaskSnapshot, path: str, depth: int, rows: list[dict[str, object]]
) -> None:
    error = snapshot.error or {}
    rows.append(
        {
            "path": path,
            "name": snapshot.name,
            "depth": depth,
            "status": snapshot.status,
            "duration_sec": snapshot.duration_sec,
            "error_type": error.get("type"),
            "error_message": error.get("message"),
        }
    )
    for idx, sub in enumerate(snapshot.subtasks):
        _flatten(sub, f"{path}.{idx}:{sub.name}", depth + 1, rows)


def build_summary(root: TaskSnapshot) -> dict[str, object]:
    task_rows: list[dict[str, object]] = []
    _flatten(root, root.name, 0, task_rows)
    problem_rows = [row for row in task_rows if row["status"] == "error"]
    counts = Counter(str(row["status"]) for row in task_rows)

    return {
        "run": {
            "task": root.name,
            "status": root.status,
            "started_at": root.started_at,
            "ended_at": root.ended_at,
            "duration_sec": root.duration_sec,
            "total": len(task_rows),
            "counts": dict(sorted(counts.items())),
        },
        "tasks": task_rows,
        "problems": problem_rows,
    }
