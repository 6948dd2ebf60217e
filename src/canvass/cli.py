"""
Command-line front end.

Every invocation loads the persisted list once, applies one interaction
through SurveyApp, and exits. Usage:

    python -m canvass add --address "Calle 1" --si 2 --ct 1 --interest 3 --notes ok
    python -m canvass list
    python -m canvass edit 0 --inc si
    python -m canvass delete 0
    python -m canvass export
"""

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Callable, List, Optional

from canvass import __version__
from canvass.app import SurveyApp
from canvass.clock import Clock
from canvass.config import Settings, load_settings
from canvass.errors import ConfigError
from canvass.export import RENDERERS, Exporter
from canvass.model import TALLY_FIELDS, Draft
from canvass.storage import JsonFileStore, SurveyRepository
from canvass.transitions import record_from_draft

CONFIRM_ANSWERS = {"eliminar", "e", "s", "si", "sí", "y", "yes"}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="canvass", description="Door-to-door survey recorder")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", help="YAML settings file")
    parser.add_argument("--data-dir", help="Directory holding the survey store")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log at INFO level")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="Show saved surveys")

    add = sub.add_parser("add", help="Save a new survey")
    add.add_argument("--address", default="", help="Dirección postal")
    for name in TALLY_FIELDS:
        add.add_argument(f"--{name}", type=int, default=0)
    add.add_argument("--notes", default="", help="Información adicional")

    edit = sub.add_parser("edit", help="Edit a saved survey and save it in place")
    edit.add_argument("index", type=int)
    edit.add_argument("--address")
    edit.add_argument("--notes")
    edit.add_argument("--inc", action="append", default=[], choices=TALLY_FIELDS, metavar="FIELD",
                      help="Add 1 to a tally (repeatable)")
    edit.add_argument("--dec", action="append", default=[], choices=TALLY_FIELDS, metavar="FIELD",
                      help="Subtract 1 from a tally (repeatable)")

    delete = sub.add_parser("delete", help="Delete a saved survey")
    delete.add_argument("index", type=int)
    delete.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")

    export = sub.add_parser("export", help="Write the export file and share it")
    export.add_argument("--format", choices=sorted(RENDERERS), default="csv")
    export.add_argument("--output-dir", help="Directory for the export file")

    clock = sub.add_parser("clock", help="Show the ticking clock")
    clock.add_argument("--ticks", type=int, help="Stop after N ticks")

    return parser


def _prompt_confirm(input_fn: Callable[[str], str]):
    def confirm(title: str, message: str) -> bool:
        answer = input_fn(f"{title}: {message} [Cancelar/Eliminar] ")
        return answer.strip().lower() in CONFIRM_ANSWERS
    return confirm


def _notify(title: str, message: str) -> None:
    print(f"{title}: {message}")


def _share(path: Path) -> None:
    print(f"Exportado: {path}")


def build_app(settings: Settings, args: argparse.Namespace, input_fn: Callable[[str], str]) -> SurveyApp:
    repository = SurveyRepository(JsonFileStore(settings.storage_path), key=settings.storage_key)

    exporter = None
    if args.command == "export":
        directory = args.output_dir or settings.export_path.parent
        filename = settings.export_filename
        if args.format != "csv":
            filename = str(Path(filename).with_suffix(f".{args.format}"))
        exporter = Exporter(directory, filename=filename, share=_share, fmt=args.format)

    if getattr(args, "yes", False):
        confirm = lambda title, message: True  # noqa: E731
    else:
        confirm = _prompt_confirm(input_fn)

    return SurveyApp(repository, exporter=exporter, confirm=confirm, notify=_notify)


def _print_list(app: SurveyApp) -> None:
    if not len(app):
        print("No hay encuestas guardadas.")
        return
    print("Encuestas Guardadas:")
    for i, record in enumerate(app.records):
        print(f"{i:>4}  {record.recorded_at} - {record.address}")


def _run_edit(app: SurveyApp, args: argparse.Namespace) -> None:
    app.edit(args.index)
    if args.address is not None:
        app.set_address(args.address)
    if args.notes is not None:
        app.set_notes(args.notes)
    for name in args.inc:
        app.increment(name)
    for name in args.dec:
        app.decrement(name)
    app.save()


def _run_add(app: SurveyApp, args: argparse.Namespace) -> None:
    draft = Draft(
        address=args.address,
        notes=args.notes,
        **{name: getattr(args, name) for name in TALLY_FIELDS},
    )
    app.add(record_from_draft(draft, recorded_at=app.clock.timestamp()))


def main(argv: Optional[List[str]] = None, input_fn: Callable[[str], str] = input) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings(args.config)
    except ConfigError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    if args.data_dir:
        settings = replace(settings, data_dir=args.data_dir)

    level = logging.INFO if args.verbose else getattr(logging, settings.log_level.upper(), logging.WARNING)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    if args.command == "clock":
        try:
            Clock().run(print, ticks=args.ticks)
        except KeyboardInterrupt:
            pass
        return 0

    app = build_app(settings, args, input_fn)
    app.load_all()
    if not app.status.ok:
        print(f"error: {app.status.message}", file=sys.stderr)
        # Only a new survey makes sense without the stored list; its save
        # sets the unreadable store aside.
        if args.command != "add":
            return 1

    try:
        if args.command == "list":
            _print_list(app)
        elif args.command == "add":
            _run_add(app, args)
        elif args.command == "edit":
            _run_edit(app, args)
        elif args.command == "delete":
            if not app.delete(args.index):
                print("Cancelado.")
        elif args.command == "export":
            app.export()
    except IndexError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    if not app.status.ok:
        print(f"error: {app.status.message}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
