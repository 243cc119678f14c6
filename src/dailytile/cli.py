"""CLI for dailytile - the latest daily note on a small display."""

import argparse
import json
import logging
import platform
import sys
from datetime import date, datetime
from pathlib import Path
from typing import Any

from . import __version__
from .adapters.transport import read_drop
from .api.app import tile_view
from .core.errors import DailyTileError, NotFound
from .core.model import Document
from .core.selector import parse_dated_name
from .format.builder import PRESETS, NoteTextBuilder
from .runtime import build_runtime
from .sync import run_sync, vault_folder


def _fmt_millis(ms: int | None) -> str:
    if not ms:
        return "never"
    return datetime.fromtimestamp(ms / 1000).strftime("%Y-%m-%d %H:%M")


def cmd_link(args: argparse.Namespace, rt: Any) -> int:
    """Remember the notes folder used by later syncs."""
    folder = args.folder.expanduser().resolve()
    try:
        root = rt.resolver.resolve(folder)
    except NotFound as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    rt.sender_state.set_vault_path(folder)
    if not args.quiet:
        print(f"Linked {folder}")
        if root != folder:
            print(f"Daily notes: {root}")
    return 0


def cmd_sync(args: argparse.Namespace, rt: Any) -> int:
    """Run one sync pass."""
    report = run_sync(rt, today=args.date)

    if args.json:
        print(json.dumps({
            "status": report.status,
            "date": report.date,
            "chars": report.chars,
            "reason": report.reason,
        }))
    elif not args.quiet:
        if report.status == "synced":
            print(f"Synced {report.date} ({report.chars} chars)")
        elif report.status == "nothing":
            print(f"Nothing to sync: {report.reason}")
        else:
            print(f"Sync failed for {report.date}: {report.reason}", file=sys.stderr)

    return 1 if report.status == "failed" else 0


def cmd_status(args: argparse.Namespace, rt: Any) -> int:
    """Show sender state and the cached note."""
    state = rt.sender_state
    note = rt.cache.current

    if args.json:
        print(json.dumps({
            "vault_path": str(vault_folder(rt)),
            "linked": str(state.vault_path()) if state.vault_path() else None,
            "last_sync": state.last_sync(),
            "last_note_date": state.last_note_date(),
            "cached": {"date": note.date, "received_at": note.received_at} if note else None,
        }, indent=2))
        return 0

    print(f"Vault: {vault_folder(rt)}")
    print(f"Last sync: {_fmt_millis(state.last_sync())}")
    print(f"Latest note: {state.last_note_date() or '-'}")
    if note is None:
        print("Cached: none")
    else:
        print(f"Cached: {note.date} (received {_fmt_millis(note.received_at)})")
    return 0


def cmd_render(args: argparse.Namespace, rt: Any) -> int:
    """Print the excerpt a note file would produce."""
    path: Path = args.file
    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error: Cannot read {path}: {e}", file=sys.stderr)
        return 1

    builder = rt.builder
    if args.preset:
        builder = NoteTextBuilder(rt.builder.renderer, preset=PRESETS[args.preset])

    day = parse_dated_name(path.name, rt.config.vault.extension) or date.today().isoformat()
    note = builder.build(Document(date=day, path=path, raw=raw))
    if args.json:
        print(json.dumps({"date": note.date, "excerpt": note.excerpt}, ensure_ascii=False))
    else:
        print(note.excerpt)
    return 0


def cmd_receive(args: argparse.Namespace, rt: Any) -> int:
    """Apply the record dropped by the file transport."""
    drop = args.inbox or rt.config.transport.out
    data = read_drop(drop)
    if data is None:
        if not args.quiet:
            print(f"Nothing received at {drop}")
        return 0

    accepted = rt.cache.apply_mapping(data)
    if args.json:
        print(json.dumps({"accepted": accepted, "date": data.get("date")}))
    elif not args.quiet:
        print(f"{'Accepted' if accepted else 'Stale, ignored'}: {data.get('date')}")
    return 0


def cmd_show(args: argparse.Namespace, rt: Any) -> int:
    """Print the cached note."""
    note = rt.cache.current

    if args.tile:
        view = tile_view(note)
        if args.json:
            print(json.dumps(view, ensure_ascii=False))
        else:
            print(view["header"])
            print(view["text"])
        return 0

    if note is None:
        print("No note cached", file=sys.stderr)
        return 1
    if args.json:
        print(json.dumps(note.to_dict(), ensure_ascii=False))
    else:
        print(note.full_text)
    return 0


def cmd_serve(args: argparse.Namespace, rt: Any) -> int:
    """Start the receiver API."""
    import uvicorn

    from .api.app import create_app, generate_token

    token_arg = args.token
    if token_arg == "auto":
        token = generate_token()
        print(f"Generated bearer token: {token}")
        print(f"Use in requests: Authorization: Bearer {token}")
    elif token_arg == "none":
        print("Warning: Running without authentication. Only use in trusted environments.")
        token = None
    else:
        token = token_arg

    app = create_app(rt, token=token)

    host = args.host or rt.config.serve.host
    port = args.port or rt.config.serve.port
    print(f"Starting server on http://{host}:{port}")

    uvicorn.run(app, host=host, port=port, log_level="info")
    return 0


def cmd_watch(args: argparse.Namespace, rt: Any) -> int:
    """Watch the notes folder and sync on change."""
    from .watch import watch_folder

    try:
        root = rt.resolver.resolve(vault_folder(rt))
    except NotFound as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    report = run_sync(rt)
    if not args.quiet and not args.json:
        print(f"Initial sync {report.status}: {report.date or '-'}")

    return watch_folder(
        rt,
        root,
        debounce_ms=args.debounce_ms,
        quiet=args.quiet,
        json_output=args.json,
    )


def _version_text() -> str:
    return (
        f"dailytile {__version__}\n"
        f"python {platform.python_version()}\n"
        f"platform {platform.platform()}"
    )


def main() -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="dailytile", description="Sync the latest daily note to a small display"
    )
    parser.add_argument(
        "--version", action="version", version=_version_text()
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: search cwd/dailytile.toml, vault/dailytile.toml)",
    )
    parser.add_argument(
        "--vault",
        type=Path,
        default=None,
        help="Path to notes folder (overrides linked folder and config)",
    )
    parser.add_argument(
        "--db",
        type=Path,
        default=None,
        help="Path to SQLite state DB (overrides config)",
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Minimize output"
    )
    parser.add_argument(
        "--json", action="store_true", help="Machine-readable output"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Debug logging"
    )

    subparsers = parser.add_subparsers(dest="cmd", required=True)

    parser_link = subparsers.add_parser("link", help="Remember the notes folder")
    parser_link.add_argument("folder", type=Path, help="Vault or daily notes folder")

    parser_sync = subparsers.add_parser("sync", help="Send the current note once")
    parser_sync.add_argument(
        "--date", type=date.fromisoformat, default=None,
        help="Reference date YYYY-MM-DD (default: today)"
    )

    subparsers.add_parser("status", help="Show last sync and cached note")

    parser_render = subparsers.add_parser("render", help="Preview the excerpt of a note file")
    parser_render.add_argument("file", type=Path, help="Markdown file")
    parser_render.add_argument(
        "--preset", choices=sorted(PRESETS), default=None,
        help="Excerpt preset (default: from config)"
    )

    parser_receive = subparsers.add_parser("receive", help="Apply a note dropped by the file transport")
    parser_receive.add_argument(
        "--inbox", type=Path, default=None,
        help="Drop file (default: [transport] out)"
    )

    parser_show = subparsers.add_parser("show", help="Print the cached note")
    parser_show.add_argument("--tile", action="store_true", help="Print the tile view")

    parser_serve = subparsers.add_parser("serve", help="Run the receiver API")
    parser_serve.add_argument("--host", default=None, help="Bind host (default: from config)")
    parser_serve.add_argument("--port", type=int, default=None, help="Bind port (default: from config)")
    parser_serve.add_argument(
        "--token", default="auto",
        help="Bearer token, 'auto' to generate one, 'none' to disable auth"
    )

    parser_watch = subparsers.add_parser("watch", help="Sync whenever a daily note changes")
    parser_watch.add_argument(
        "--debounce-ms", type=int, default=500,
        help="Debounce window in milliseconds (default: 500)"
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    handlers = {
        "link": cmd_link,
        "sync": cmd_sync,
        "status": cmd_status,
        "render": cmd_render,
        "receive": cmd_receive,
        "show": cmd_show,
        "serve": cmd_serve,
        "watch": cmd_watch,
    }
    handler = handlers.get(args.cmd)
    if handler is None:
        print(f"Unknown command: {args.cmd}", file=sys.stderr)
        sys.exit(1)

    try:
        rt = build_runtime(
            vault_path=args.vault,
            db_path=args.db,
            config_path=args.config,
        )
        exit_code = handler(args, rt)
    except (DailyTileError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
