"""Entry point: ``python -m dungeon_run``.

Supports three modes:
  - ``python -m dungeon_run``            → Launch the FastAPI server with a live run
  - ``python -m dungeon_run cli``        → Headless run driven by the scripted player
  - ``python -m dungeon_run validate``   → Check a theme file for malformed rooms
"""

from __future__ import annotations

import argparse
import logging
import sys

logger = logging.getLogger(__name__)

_LEVELS = ["DEBUG", "INFO", "WARNING"]


def _add_run_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--seed", type=int, default=0, help="Run seed (0 = random)")
    parser.add_argument("--rooms", type=int, default=10, help="Total rooms in the run")
    parser.add_argument("--rooms-per-theme", type=int, default=5)
    parser.add_argument("--start-at", type=int, default=0, help="Skip straight to this room index")
    parser.add_argument("--fixed", type=str, default="", help="Comma-separated blueprint names to cycle instead of themes")
    parser.add_argument("--themes", type=str, default=None, help="Theme JSON file (default: built-in themes)")
    parser.add_argument("--no-gate-template", action="store_true", help="Only use gates embedded in rooms")
    parser.add_argument("--log-level", type=str, default="INFO", choices=_LEVELS)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Seeded Dungeon Run Orchestrator")
    sub = parser.add_subparsers(dest="command")

    # --- Server mode (default) ---
    srv = sub.add_parser("serve", help="Start the FastAPI server (default)")
    srv.add_argument("--host", type=str, default="127.0.0.1")
    srv.add_argument("--port", type=int, default=8000)
    srv.add_argument("--paused", action="store_true", help="Wait for /control/start before ticking")
    _add_run_args(srv)

    # --- Headless CLI mode ---
    cli = sub.add_parser("cli", help="Run a headless dungeon run")
    cli.add_argument("--max-ticks", type=int, default=100_000)
    _add_run_args(cli)

    # --- Theme validation ---
    val = sub.add_parser("validate", help="Validate room blueprints in a theme file")
    val.add_argument("--themes", type=str, default=None, help="Theme JSON file (default: built-in themes)")
    val.add_argument("--strict", action="store_true", help="Exit non-zero on warnings too")
    val.add_argument("--log-level", type=str, default="WARNING", choices=_LEVELS)

    return parser


def _config_from_args(args: argparse.Namespace, **overrides):
    from dungeon_run.config import RunConfig

    fixed = tuple(name.strip() for name in args.fixed.split(",") if name.strip())
    return RunConfig(
        seed=args.seed,
        total_rooms=args.rooms,
        rooms_per_theme=args.rooms_per_theme,
        start_at_room_index=args.start_at,
        use_fixed_sequence=bool(fixed),
        fixed_sequence=fixed,
        themes_file=args.themes,
        use_gate_template=not args.no_gate_template,
        log_level=args.log_level,
        **overrides,
    )


def _run_server(args: argparse.Namespace) -> None:
    import uvicorn

    from dungeon_run.api.app import create_app

    config = _config_from_args(args)
    app = create_app(config, auto_start=not args.paused)
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level.lower())


def _run_cli(args: argparse.Namespace) -> int:
    from dungeon_run.engine.context import RunContext
    from dungeon_run.engine.driver import HeadlessDriver
    from dungeon_run.engine.room_lifecycle import RoomLifecycleManager
    from dungeon_run.engine.run_loop import RunLoop
    from dungeon_run.utils.logging import setup_logging

    config = _config_from_args(args, max_ticks=args.max_ticks)
    setup_logging(config.log_level)

    context = RunContext.from_config(config)
    manager = RoomLifecycleManager(config, context)
    loop = RunLoop(config, manager, HeadlessDriver.from_config(config))
    snapshot = loop.run()

    logger.info(
        "Done. seed=%d rooms=%d/%d spawned=%d defeated=%d",
        snapshot.seed, snapshot.rooms_cleared, snapshot.room_count,
        snapshot.total_spawned, snapshot.total_deaths,
    )
    return 0 if snapshot.complete else 1


def _run_validate(args: argparse.Namespace) -> int:
    from dungeon_run.core.themes import default_registry, load_themes
    from dungeon_run.systems.room_validator import validate_themes
    from dungeon_run.utils.logging import setup_logging

    setup_logging(args.log_level)
    registry = load_themes(args.themes) if args.themes else default_registry()
    issues = validate_themes(registry)

    for issue in issues:
        print(f"[{issue.severity.upper():7s}] {issue.theme}/{issue.blueprint}: {issue.message}")
    rooms = sum(len(t.rooms) for t in registry)
    print(f"Checked {len(registry)} themes, {rooms} rooms: {len(issues)} issue(s).")

    failing = {"error", "warning"} if args.strict else {"error"}
    return 1 if any(i.severity in failing for i in issues) else 0


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()

    # Default to serve mode if no subcommand given
    if args.command is None or args.command == "serve":
        if args.command is None:
            # Re-parse with serve defaults
            args = parser.parse_args(["serve"])
        _run_server(args)
    elif args.command == "cli":
        sys.exit(_run_cli(args))
    elif args.command == "validate":
        sys.exit(_run_validate(args))


if __name__ == "__main__":
    main()
