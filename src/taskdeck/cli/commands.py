# src/taskdeck/cli/commands.py

from __future__ import annotations

import inspect
import logging
import shlex
from collections.abc import Callable
from datetime import datetime
from typing import cast

from ..core.state import AppState
from ..tasks.errors import InvalidInputError, TaskError
from ..tasks.task_models import Task
from .bootstrap import export_to_file, import_from_file

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        Task errors (bad id, empty title, ...) are rendered as the reply.
        """
        if not line.startswith("/"):
            return None

        try:
            parts = shlex.split(line[1:])
        except ValueError as e:
            return f"Cannot parse command: {e}."
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        try:
            if nparams >= 3:
                h3 = cast(CommandHandler3, handler)
                return h3(state, args, emit)
            h2 = cast(CommandHandler2, handler)
            return h2(state, args)
        except TaskError as e:
            logger.debug("Command /%s rejected: %s", name, e)
            return f"Error: {e}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- formatting / parsing helpers ----


def _fmt_when(dt: datetime | None) -> str:
    if dt is None:
        return "-"
    return dt.astimezone().strftime("%Y-%m-%d %H:%M")


def format_task(task: Task) -> str:
    line = f"[{task.id}] (p={task.priority}) {task.title} | {task.category} | due: {_fmt_when(task.due_date)}"
    if task.tags:
        line += f" | tags: {', '.join(task.tags)}"
    if task.subtasks:
        done = sum(1 for st in task.subtasks if st.completed)
        line += f" | subtasks {done}/{len(task.subtasks)}"
    return line


def _format_list(tasks: list[Task], empty: str) -> str:
    if not tasks:
        return empty
    return "\n".join(format_task(t) for t in tasks)


def _parse_id(raw: str) -> int:
    raw = raw.rstrip(".")
    if not raw.isdigit():
        raise InvalidInputError(f"Invalid id: {raw}")
    return int(raw)


def _split_options(args: list[str], keys: set[str]) -> tuple[list[str], dict[str, str]]:
    """Separate key=value options (for known keys) from positional words."""
    words: list[str] = []
    opts: dict[str, str] = {}
    for arg in args:
        key, sep, value = arg.partition("=")
        if sep and key.lower() in keys:
            opts[key.lower()] = value
        else:
            words.append(arg)
    return words, opts


# ---- handlers ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add <title...> [category=<name>] [due=<ISO date/time>] [desc=<text>]
    """
    words, opts = _split_options(args, {"category", "due", "desc"})
    task = state.store.add_task(
        " ".join(words),
        description=opts.get("desc"),
        category=opts.get("category") or None,
        due_date=opts.get("due") or None,
    )
    return f"Added: {format_task(task)}"


def cmd_list(state: AppState, args: list[str]) -> str:
    if args:
        tasks = state.store.get_tasks_by_category(args[0])
        return _format_list(tasks, f"No active tasks in category {args[0]}.")
    return _format_list(state.store.active_tasks, "No active tasks.")


def cmd_done(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return "Usage: /done <id>"
    task = state.store.complete_task(_parse_id(args[0]))
    return f'Completed: "{task.title}"'


def cmd_rm(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return "Usage: /rm <id>"
    task_id = _parse_id(args[0])
    if state.store.delete_task(task_id):
        return f"Task {task_id} removed."
    return f"Task id {task_id} not found."


def cmd_update(state: AppState, args: list[str]) -> str:
    """
    /update <id> [title=..] [desc=..] [category=..] [due=..|due=] [tags=a,b]
    """
    if len(args) < 2:
        return "Usage: /update <id> key=value ... (title, desc, category, due, tags)"
    task_id = _parse_id(args[0])
    _, opts = _split_options(args[1:], {"title", "desc", "category", "due", "tags"})
    if not opts:
        return "Nothing to update."

    patch: dict[str, object] = {}
    if "title" in opts:
        patch["title"] = opts["title"]
    if "desc" in opts:
        patch["description"] = opts["desc"]
    if "category" in opts:
        patch["category"] = opts["category"]
    if "due" in opts:
        patch["dueDate"] = opts["due"] or None
    if "tags" in opts:
        patch["tags"] = [t.strip() for t in opts["tags"].split(",") if t.strip()]

    task = state.store.update_task(task_id, patch)
    return f"Updated: {format_task(task)}"


def cmd_sub(state: AppState, args: list[str]) -> str:
    if len(args) < 2:
        return "Usage: /sub <id> <title...>"
    subtask = state.store.add_subtask(_parse_id(args[0]), " ".join(args[1:]))
    return f"Subtask added: {subtask.id} {subtask.title}"


def cmd_subdone(state: AppState, args: list[str]) -> str:
    if len(args) != 2:
        return "Usage: /subdone <id> <subtask id>"
    subtask = state.store.complete_subtask(_parse_id(args[0]), args[1])
    return f"Subtask completed: {subtask.id}"


def cmd_subrm(state: AppState, args: list[str]) -> str:
    if len(args) != 2:
        return "Usage: /subrm <id> <subtask id>"
    if state.store.delete_subtask(_parse_id(args[0]), args[1]):
        return f"Subtask {args[1]} removed."
    return f"Subtask {args[1]} not found."


def cmd_tag(state: AppState, args: list[str]) -> str:
    if len(args) != 2:
        return "Usage: /tag <id> <tag>"
    task = state.store.add_tag(_parse_id(args[0]), args[1])
    return f"Tags for {task.id}: {', '.join(task.tags)}"


def cmd_untag(state: AppState, args: list[str]) -> str:
    if len(args) != 2:
        return "Usage: /untag <id> <tag>"
    task = state.store.remove_tag(_parse_id(args[0]), args[1])
    return f"Tags for {task.id}: {', '.join(task.tags) or '(none)'}"


def cmd_search(state: AppState, args: list[str]) -> str:
    query = " ".join(args)
    return _format_list(state.store.search_tasks(query), f"No tasks match {query!r}.")


def cmd_overdue(state: AppState, args: list[str]) -> str:
    return _format_list(state.store.get_overdue_tasks(), "No overdue tasks.")


def cmd_upcoming(state: AppState, args: list[str]) -> str:
    days = 7.0
    if args:
        try:
            days = float(args[0])
        except ValueError:
            return "Usage: /upcoming [days]"
    return _format_list(
        state.store.get_upcoming_tasks(days), f"Nothing due in the next {args[0] if args else 7} days."
    )


def cmd_stats(state: AppState, args: list[str]) -> str:
    s = state.store.get_statistics()
    lines = [
        "Statistics:",
        f"  Total: {s.total_tasks} (active {s.active_tasks}, completed {s.completed_tasks})",
        f"  Completion rate: {s.completion_rate}",
        f"  Overdue: {s.overdue_tasks}",
        f"  Average completed per day: {s.average_tasks_per_day}",
        "  Categories:",
    ]
    for name, counts in s.category_statistics.items():
        lines.append(f"    {name}: active {counts.active}, completed {counts.completed}")
    return "\n".join(lines)


def cmd_notes(state: AppState, args: list[str]) -> str:
    """
    /notes      -> unread notifications
    /notes all  -> the whole log
    """
    show_all = bool(args) and args[0].lower() == "all"
    items = state.store.notifications if show_all else state.store.get_unread_notifications()
    if not items:
        return "No notifications." if show_all else "No unread notifications."
    lines = []
    for n in items:
        mark = " " if n.read else "*"
        lines.append(f"{mark} #{n.id} [{n.type}] {_fmt_when(n.timestamp)} {n.message}")
    return "\n".join(lines)


def cmd_read(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return "Usage: /read <notification id> | /read all"
    if args[0].lower() == "all":
        n = state.store.mark_all_notifications_as_read()
        return f"Marked {n} notification(s) as read."
    state.store.mark_notification_as_read(_parse_id(args[0].lstrip("#")))
    return "OK."


def cmd_export(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /export [json|csv] [path]
    """
    fmt = args[0].lower() if args else "json"
    path = args[1] if len(args) > 1 else None
    target = export_to_file(state, fmt, path)
    return f"Exported {fmt} to {target}"


def cmd_import(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if len(args) != 1:
        return "Usage: /import <path to json export>"
    if emit:
        emit(f"Importing {args[0]}...")
    if import_from_file(state, args[0]):
        return f"Imported. Active tasks: {len(state.store.active_tasks)}."
    latest = state.store.notifications[0].message if state.store.notifications else "Import failed."
    return latest


def cmd_reprioritize(state: AppState, args: list[str]) -> str:
    changed = state.store.reprioritize()
    return f"Reprioritized: {changed} task(s) changed priority."


def cmd_categories(state: AppState, args: list[str]) -> str:
    if args:
        name = " ".join(args)
        if state.store.add_category(name):
            return f"Category added: {name}"
        return f"Category already exists: {name}"
    return "Categories: " + ", ".join(state.store.categories)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register(
    "add", cmd_add, help_text="Add a task: /add <title> [category=..] [due=..] [desc=..]."
)
registry.register("list", cmd_list, help_text="List active tasks: /list [category].", aliases=["ls"])
registry.register("done", cmd_done, help_text="Complete a task: /done <id>.")
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <id>.", aliases=["remove"])
registry.register(
    "update", cmd_update, help_text="Edit a task: /update <id> title=.. desc=.. category=.. due=.. tags=a,b."
)
registry.register("sub", cmd_sub, help_text="Add a subtask: /sub <id> <title>.")
registry.register("subdone", cmd_subdone, help_text="Complete a subtask: /subdone <id> <subtask id>.")
registry.register("subrm", cmd_subrm, help_text="Delete a subtask: /subrm <id> <subtask id>.")
registry.register("tag", cmd_tag, help_text="Tag a task: /tag <id> <tag>.")
registry.register("untag", cmd_untag, help_text="Untag a task: /untag <id> <tag>.")
registry.register("search", cmd_search, help_text="Search title/description/tags: /search <text>.")
registry.register("overdue", cmd_overdue, help_text="List overdue tasks.")
registry.register("upcoming", cmd_upcoming, help_text="Tasks due soon: /upcoming [days].")
registry.register("stats", cmd_stats, help_text="Show statistics.")
registry.register("notes", cmd_notes, help_text="Notifications: /notes | /notes all.")
registry.register("read", cmd_read, help_text="Mark read: /read <id> | /read all.")
registry.register("export", cmd_export, help_text="Export: /export [json|csv] [path].")
registry.register("import", cmd_import, help_text="Import a JSON export: /import <path>.")
registry.register("reprioritize", cmd_reprioritize, help_text="Recompute priorities for today.")
registry.register("categories", cmd_categories, help_text="List or add categories: /categories [name].")
