from __future__ import annotations

from automator.state.model import TaskSnapshot


def test_task_snapshot_to_dict_drops_after_and_renders_unknown_values() -> None:
    class Opaque:
        def __repr__(self) -> str:
            return "<opaque>"

    snapshot = TaskSnapshot(
        name="collab",
        status="success",
        descriptor={"title": "x", "after": [{"nav": {}}]},
        result={"id": 1, "owner": Opaque(), "tags": ("a", "b")},
        subtasks=[TaskSnapshot(name="nav", status="idle", descriptor={})],
    )

    payload = snapshot.to_dict()

    assert payload["descriptor"] == {"title": "x"}
    assert payload["result"] == {"id": 1, "owner": "<opaque>", "tags": ["a", "b"]}
    assert payload["subtasks"][0]["status"] == "idle"
    assert snapshot.settled is True
    assert snapshot.subtasks[0].settled is False
