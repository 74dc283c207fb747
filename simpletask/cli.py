"""Command line entry point: manage tasks or run the static file server."""

import argparse
import json
import os
import sys
from pathlib import Path

from rich.console import Console

from simpletask.config import Settings, load_settings
from simpletask.logging_setup import setup_logging
from simpletask.shell import TaskShell
from simpletask.storage import JsonFileStorage
from simpletask.store import TaskStore
from simpletask.validation import TaskValidationError

INTERACTIVE_HELP = "Type a task and press Enter to add it. :t ID toggles, :d ID deletes, :q quits."


def _store(settings: Settings) -> TaskStore:
    return TaskStore(JsonFileStorage(settings.data_file), key=settings.storage_key)


def _list(args: argparse.Namespace, settings: Settings) -> int:
    store = _store(settings)
    if args.json:
        sys.stdout.write(store.read().model_dump_json(indent=2) + "\n")
        return 0
    TaskShell(store, Console()).render()
    return 0


def _add(args: argparse.Namespace, settings: Settings) -> int:
    store = _store(settings)
    before = len(store.read().tasks)
    try:
        store.add(args.text)
    except TaskValidationError as exc:
        sys.stderr.write(f"{exc.result.reason}\n")
        return 1
    snapshot = store.read()
    if len(snapshot.tasks) == before:
        sys.stderr.write("Nothing to add\n")
        return 1
    newest = snapshot.tasks[0]
    sys.stdout.write(json.dumps({"task": newest.model_dump()}) + "\n")
    return 0


def _toggle(args: argparse.Namespace, settings: Settings) -> int:
    store = _store(settings)
    store.toggle_completion(args.task_id)
    task = store.get(args.task_id)
    if task is None:
        sys.stderr.write(f"No task with id {args.task_id}\n")
        return 1
    sys.stdout.write(json.dumps({"task": task.model_dump()}) + "\n")
    return 0


def _delete(args: argparse.Namespace, settings: Settings) -> int:
    store = _store(settings)
    existed = store.get(args.task_id) is not None
    store.delete(args.task_id)
    sys.stdout.write(json.dumps({"removed": existed, "task_id": args.task_id}) + "\n")
    return 0


def _interactive(args: argparse.Namespace, settings: Settings) -> int:
    console = Console()
    shell = TaskShell(_store(settings), console, live=True)
    console.print(INTERACTIVE_HELP, style="dim")
    shell.render()
    try:
        while True:
            try:
                line = console.input("> ")
            except EOFError:
                break
            command, _, rest = line.strip().partition(" ")
            if command == ":q":
                break
            if command == ":t":
                shell.toggle(rest.strip())
            elif command == ":d":
                shell.delete(rest.strip())
            elif not shell.submit(line):
                console.print("Task not added.", style="yellow")
    except KeyboardInterrupt:
        pass
    finally:
        shell.close()
    return 0


def _serve(args: argparse.Namespace, settings: Settings) -> int:
    import uvicorn

    # Forwarded through the environment so the app factory also sees them under --reload.
    if args.static_dir:
        os.environ["SIMPLETASK_STATIC_DIR"] = str(Path(args.static_dir).expanduser().resolve())
    uvicorn.run(
        "simpletask.main:create_app",
        factory=True,
        host=args.host or settings.host,
        port=args.port or settings.port,
        reload=args.reload,
        log_config=None,
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="SimpleTask: a local to-do list")
    parser.add_argument("--data-file", default=None, help="Task storage file (default: ~/.simpletask/storage.json)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Serve the front-end static files")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", default=None, type=int)
    serve.add_argument("--static-dir", default=None)
    serve.add_argument("--reload", action="store_true")
    serve.set_defaults(func=_serve)

    tlist = subparsers.add_parser("list", help="Show tasks")
    tlist.add_argument("--json", action="store_true", help="Print the raw snapshot as JSON")
    tlist.set_defaults(func=_list)

    tadd = subparsers.add_parser("add", help="Add a task")
    tadd.add_argument("text")
    tadd.set_defaults(func=_add)

    ttoggle = subparsers.add_parser("toggle", help="Mark a task done or not done")
    ttoggle.add_argument("task_id")
    ttoggle.set_defaults(func=_toggle)

    tdelete = subparsers.add_parser("delete", help="Delete a task")
    tdelete.add_argument("task_id")
    tdelete.set_defaults(func=_delete)

    interactive = subparsers.add_parser("shell", help="Interactive task list")
    interactive.set_defaults(func=_interactive)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = load_settings()
    if args.data_file:
        settings = settings.model_copy(update={"data_file": Path(args.data_file).expanduser()})
    setup_logging(settings.log_level)
    return int(args.func(args, settings) or 0)


if __name__ == "__main__":
    sys.exit(main())
