# src/taskrank/cli/commands.py

from __future__ import annotations

import inspect
import logging
import shlex
from collections.abc import Callable
from typing import cast

from ..core.errors import TaskStoreError
from ..core.state import AppState
from ..tasks import task_api
from ..tasks.preset_models import PresetTask
from ..tasks.task_models import Task

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /list, ...)."""

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

        Task store errors become the reply; anything else propagates.
        """
        try:
            return self.dispatch(state, line, emit=emit)
        except TaskStoreError as exc:
            return error_reply(exc)

    def dispatch(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """Like handle(), but task store errors propagate to the caller."""
        if not line.startswith("/"):
            return None

        try:
            parts = split_args(line[1:])
        except ValueError:
            return 'Unbalanced quotes. Wrap names with spaces in double quotes: "my project".'
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
        except TaskStoreError as exc:
            logger.info("/%s failed: %s: %s", name, type(exc).__name__, exc)
            raise

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def split_args(text: str) -> list[str]:
    """
    Split on whitespace, keeping "double quoted" runs together.

    Apostrophes and backslashes are plain characters, so descriptions like
    "don't" come through untouched.
    Raises ValueError on an unclosed double quote.
    """
    lex = shlex.shlex(text, posix=True)
    lex.whitespace_split = True
    lex.quotes = '"'
    lex.commenters = ""
    lex.escape = ""
    return list(lex)


def error_reply(exc: TaskStoreError) -> str:
    return f"Error: {exc}"


def _name(args: list[str]) -> str:
    # Unquoted multi-word names are accepted where the name is the only argument.
    return " ".join(args).strip()


def format_task(task: Task) -> str:
    mark = "x" if task.completed else " "
    project = f"  @{task.project}" if task.project else ""
    return f"[{mark}] #{task.id} ({task.priority}) {task.description}{project}"


def _parse_id(args: list[str]) -> int | None:
    if not args:
        return None
    try:
        return int(args[0].lstrip("#"))
    except ValueError:
        return None


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    settings = state.settings
    where = "in-memory" if getattr(settings, "in_memory", False) else str(settings.tasks_db_path)
    return (
        "Status:\n"
        f"  Storage: {where}\n"
        f"  Tasks: {state.task_store.count_tasks()}\n"
        f"  Projects: {len(state.task_store.list_projects())}\n"
        f"  Presets: {len(state.task_store.list_preset_names())}"
    )


def cmd_list(state: AppState, args: list[str]) -> str:
    """
    /list            -> every task
    /list <project>  -> tasks of one project (spaces allowed)
    """
    project = _name(args) or None
    tasks = state.task_store.list_tasks(project)
    if not tasks:
        return f"No tasks in project {project!r}." if project else "No tasks."
    return "\n".join(format_task(t) for t in tasks)


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add B Buy milk            -> pending task, no project
    /add B Buy milk @groceries -> same, filed under "groceries"
    """
    if len(args) < 2:
        return "Usage: /add <A-Z> <description...> [@project]"

    words = list(args[1:])
    project = None
    if len(words) > 1 and words[-1].startswith("@"):
        project = words.pop()[1:]

    task = task_api.add_task(
        state.task_store,
        priority=args[0],
        description=" ".join(words),
        project=project,
    )
    return f"Added {format_task(task)}"


def _by_id(action: Callable[..., Task], verb: str) -> CommandHandler2:
    def handler(state: AppState, args: list[str]) -> str:
        task_id = _parse_id(args)
        if task_id is None:
            return f"Usage: /{verb} <task id>"
        return format_task(action(state.task_store, task_id))

    return handler


def cmd_edit(state: AppState, args: list[str]) -> str:
    task_id = _parse_id(args)
    if task_id is None or len(args) < 2:
        return "Usage: /edit <task id> <description...>"
    task = task_api.update_description(state.task_store, task_id, " ".join(args[1:]))
    return format_task(task)


def cmd_cleanup(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if emit:
        emit("Deleting completed tasks...")
    removed = state.task_store.cleanup()
    return f"Removed {removed} completed task(s)."


def cmd_projects(state: AppState, args: list[str]) -> str:
    projects = state.task_store.list_projects()
    if not projects:
        return "No projects."
    return "Projects:\n" + "\n".join(f"  {p}" for p in projects)


def cmd_rename(state: AppState, args: list[str]) -> str:
    if len(args) != 2:
        return 'Usage: /rename <old project> <new project> (quote names with spaces: "old name")'
    changed = state.task_store.rename_project(args[0], args[1])
    return f"Moved {changed} task(s) from {args[0]!r} to {args[1]!r}."


def cmd_presets(state: AppState, args: list[str]) -> str:
    names = state.task_store.list_preset_names()
    if not names:
        return "No presets. Create one with /preset-new <name>."
    return "Presets:\n" + "\n".join(f"  {n}" for n in names)


def cmd_preset_new(state: AppState, args: list[str]) -> str:
    name = _name(args)
    if not name:
        return "Usage: /preset-new <name>"
    preset = state.task_store.add_preset(name)
    return f"Preset {preset.name!r} created."


def cmd_preset(state: AppState, args: list[str]) -> str:
    name = _name(args)
    if not name:
        return "Usage: /preset <name>"
    preset = state.task_store.get_preset(name)
    if not preset.tasks:
        return f"Preset {preset.name!r} is empty."
    lines = [f"Preset {preset.name!r}:"]
    for pt in preset.tasks:
        lines.append(f"  ({pt.priority}) {pt.description}")
    return "\n".join(lines)


def cmd_preset_task(state: AppState, args: list[str]) -> str:
    """
    /preset-task <name> <A-Z> <description...>
    /preset-task "Weekly chores" B Vacuum
    """
    if len(args) < 3:
        return "Usage: /preset-task <preset name> <A-Z> <description...>"
    preset = state.task_store.get_preset(args[0])
    pt = PresetTask.create(args[1], " ".join(args[2:]).strip(), preset.id)
    state.task_store.add_preset_task(pt)
    return f"Added ({pt.priority}) {pt.description} to preset {preset.name!r}."


def cmd_inject(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    name = _name(args)
    if not name:
        return "Usage: /inject <preset name>"
    if emit:
        emit(f"Injecting preset {name!r}...")
    created = state.task_store.inject_preset(name)
    return f"Injected {len(created)} task(s) into project {name!r}."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show storage location and totals.")
registry.register("list", cmd_list, help_text="List tasks: /list [project].", aliases=["ls"])
registry.register("add", cmd_add, help_text="Add a task: /add <A-Z> <description> [@project].")
registry.register("done", _by_id(task_api.set_done, "done"), help_text="Mark a task done.")
registry.register(
    "pending", _by_id(task_api.set_pending, "pending"), help_text="Mark a task pending again."
)
registry.register(
    "up", _by_id(task_api.increase_priority, "up"), help_text="Increase priority (toward A)."
)
registry.register(
    "down", _by_id(task_api.lower_priority, "down"), help_text="Lower priority (toward Z)."
)
registry.register("edit", cmd_edit, help_text="Change a description: /edit <id> <text>.")
registry.register("cleanup", cmd_cleanup, help_text="Delete every completed task.")
registry.register("projects", cmd_projects, help_text="List project names.")
registry.register("rename", cmd_rename, help_text="Rename a project: /rename <old> <new>.")
registry.register("presets", cmd_presets, help_text="List preset names.")
registry.register("preset-new", cmd_preset_new, help_text="Create a preset: /preset-new <name>.")
registry.register("preset", cmd_preset, help_text="Show a preset: /preset <name>.")
registry.register(
    "preset-task",
    cmd_preset_task,
    help_text="Add a line to a preset: /preset-task <name> <A-Z> <description>.",
)
registry.register("inject", cmd_inject, help_text="Create tasks from a preset: /inject <name>.")
