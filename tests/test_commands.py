# tests/test_commands.py

from __future__ import annotations

import json
from pathlib import Path

from taskdeck.cli.commands import CommandRegistry, registry

from .fakes import Emitted


def test_command_registry_routes_2_and_3_params(state) -> None:
    reg = CommandRegistry()
    called = {"h2": 0, "h3": 0}

    def h2(state, args):
        called["h2"] += 1
        return "h2"

    def h3(state, args, emit):
        called["h3"] += 1
        if emit is not None:
            emit("note")
        return "h3"

    reg.register("a", h2, "a")
    reg.register("b", h3, "b", aliases=["bee"])

    emitted = Emitted()
    assert reg.handle(state, "/a x") == "h2"
    assert reg.handle(state, "/bee y", emit=emitted) == "h3"
    assert called == {"h2": 1, "h3": 1}
    assert emitted.lines == ["note"]


def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert reg.handle(state, "hello") is None
    assert "Unknown command" in (reg.handle(state, "/nope") or "")
    assert "Empty command" in (reg.handle(state, "/") or "")


def test_add_with_options(state) -> None:
    reply = registry.handle(state, '/add Write the report category=work due=2026-03-11T12:00:00Z desc="Q1 numbers"')

    [task] = state.store.active_tasks
    assert task.title == "Write the report"
    assert task.category == "work"
    assert task.description == "Q1 numbers"
    assert task.priority == 25
    assert reply is not None and reply.startswith("Added: [1] (p=25)")


def test_task_errors_become_replies(state) -> None:
    assert registry.handle(state, "/add") == "Error: Task title cannot be empty"
    assert registry.handle(state, "/done 9999") == "Error: Task with id 9999 not found"
    assert registry.handle(state, "/done abc") == "Error: Invalid id: abc"
    assert registry.handle(state, "/export xml") == "Error: Unsupported export format"


def test_done_and_notes(state) -> None:
    registry.handle(state, "/add Buy milk")
    assert registry.handle(state, "/done 1") == 'Completed: "Buy milk"'

    notes = registry.handle(state, "/notes") or ""
    assert 'Task "Buy milk" completed!' in notes

    registry.handle(state, "/read all")
    assert registry.handle(state, "/notes") == "No unread notifications."


def test_update_tags_and_search(state) -> None:
    registry.handle(state, "/add Buy milk")
    registry.handle(state, "/update 1 tags=home,weekend category=urgent")

    task = state.store.get_task(1)
    assert task is not None
    assert task.tags == ["home", "weekend"]
    assert task.priority == 10
    assert "[1]" in (registry.handle(state, "/search HOME") or "")


def test_subtask_commands(state) -> None:
    registry.handle(state, "/add Plan trip")
    assert registry.handle(state, "/sub 1 book flights") == "Subtask added: 1-1 book flights"
    assert registry.handle(state, "/subdone 1 1-1") == "Subtask completed: 1-1"
    assert registry.handle(state, "/subrm 1 1-1") == "Subtask 1-1 removed."
    assert "subtasks" not in (registry.handle(state, "/list") or "")


def test_stats_command(state) -> None:
    registry.handle(state, "/add A category=work")
    out = registry.handle(state, "/stats") or ""
    assert "Completion rate: 0.00%" in out
    assert "work: active 1, completed 0" in out


def test_export_and_import_files(state, tmp_path: Path) -> None:
    registry.handle(state, "/add Buy milk")
    target = tmp_path / "out" / "tasks.json"

    reply = registry.handle(state, f"/export json {target}")
    assert reply == f"Exported json to {target}"
    data = json.loads(target.read_text("utf-8"))
    assert data["tasks"][0]["title"] == "Buy milk"

    registry.handle(state, "/rm 1")
    emitted = Emitted()
    reply = registry.handle(state, f"/import {target}", emit=emitted)
    assert reply == "Imported. Active tasks: 1."
    assert emitted.lines == [f"Importing {target}..."]


def test_import_missing_file_reports_failure(state, tmp_path: Path) -> None:
    reply = registry.handle(state, f"/import {tmp_path / 'nope.json'}") or ""
    assert reply.startswith("Import failed:")
    assert state.store.notifications[0].type == "error"


def test_import_non_utf8_file_reports_failure(state, tmp_path: Path) -> None:
    bad = tmp_path / "bad.json"
    bad.write_bytes(b"\xff\xfe{}")

    reply = registry.handle(state, f"/import {bad}") or ""
    assert reply.startswith("Import failed:")
    [note] = state.store.notifications
    assert note.type == "error"
    assert "codec can't decode" in note.message


def test_default_export_path(state) -> None:
    registry.handle(state, "/add A")
    reply = registry.handle(state, "/export csv") or ""
    target = state.settings.export_dir / "tasks.csv"
    assert reply == f"Exported csv to {target}"
    assert target.read_text("utf-8").startswith("ID,Title")
