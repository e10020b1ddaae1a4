"""CLI entry point for the snow alert service."""

import argparse
import logging

import httpx

from snowalert.app import App, build_app
from snowalert.config.loader import get_config_value, load_config, save_config, set_config_value
from snowalert.config.schema import AppConfig
from snowalert.daemon import CheckDaemon, daemon_status, request_check, stop_daemon
from snowalert.errors import LocationNotFoundError
from snowalert.reporting.formatters import format_status, format_summary_json, format_summary_text
from snowalert.storage import run_repo, state_repo

DEFAULT_CONFIG = "ops/configs/default.yaml"
DEFAULT_DB = "data/snowalert.db"


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="snowalert",
        description="Days 5-10 snow forecast alerts",
    )
    parser.add_argument(
        "--config", default=DEFAULT_CONFIG, help="Config YAML path"
    )
    parser.add_argument("--db", default=DEFAULT_DB, help="SQLite DB path")

    sub = parser.add_subparsers(dest="command")

    check_p = sub.add_parser("check", help="Check all locations now")
    check_p.add_argument("--json", action="store_true", help="Print summary as JSON")
    sub.add_parser("status", help="Show locations and forecasts")

    search_p = sub.add_parser("search", help="Search for a city")
    search_p.add_argument("query", help="City name")

    add_p = sub.add_parser("add", help="Search for a city and track it")
    add_p.add_argument("query", help="City name")
    add_p.add_argument(
        "--pick", type=int, default=1, help="Result number to add (default 1)"
    )

    remove_p = sub.add_parser("remove", help="Stop tracking a location")
    remove_p.add_argument("location", help="Location name or id")

    alerts_p = sub.add_parser("alerts", help="Toggle alerts for a location")
    alerts_p.add_argument("location", help="Location name or id")

    daemon_p = sub.add_parser("daemon", help="Run periodic checks")
    daemon_p.add_argument("--interval", type=int, help="Seconds between checks")
    daemon_group = daemon_p.add_mutually_exclusive_group()
    daemon_group.add_argument("--stop", action="store_true", help="Stop running daemon")
    daemon_group.add_argument("--status", action="store_true", help="Show daemon status")
    daemon_group.add_argument(
        "--check-now", action="store_true", help="Ask running daemon to check now"
    )

    # config show / config set
    config_p = sub.add_parser("config", help="Config operations")
    config_sub = config_p.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Display current config")
    set_p = config_sub.add_parser("set", help="Set a config value")
    set_p.add_argument("keyvalue", help="key=value to set")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "daemon":
        if args.stop:
            return stop_daemon()
        if args.status:
            return daemon_status()
        if args.check_now:
            return request_check()

    config = load_config(args.config)

    if args.command == "config":
        return _cmd_config(config, args)
    if args.command == "daemon":
        CheckDaemon(config, args.db, interval=args.interval).start()
        return 0

    app = build_app(config, args.db)
    try:
        if args.command == "check":
            return _cmd_check(app, args)
        elif args.command == "status":
            return _cmd_status(app)
        elif args.command == "search":
            return _cmd_search(app, args)
        elif args.command == "add":
            return _cmd_add(app, args)
        elif args.command == "remove":
            return _cmd_remove(app, args)
        elif args.command == "alerts":
            return _cmd_alerts(app, args)
        else:
            parser.print_help()
            return 1
    finally:
        app.close()


def _cmd_check(app: App, args) -> int:
    summary = app.orchestrator.check_all()
    if summary is None:
        print("Check already in progress")
        return 1
    if args.json:
        print(format_summary_json(summary))
    else:
        print(format_summary_text(summary))
    return 0 if summary.locations_failed == 0 else 1


def _cmd_status(app: App) -> int:
    print(format_status(
        app.locations.locations,
        app.locations.max_snow_probability,
        app.locations.has_any_snow_expected,
        run_repo.get_last_run(app.conn),
    ))
    holder = state_repo.get_system_state(app.conn, state_repo.CHECK_LOCK_KEY)
    if holder:
        print(f"\nCheck in progress (held by {holder})")
    return 0


def _cmd_search(app: App, args) -> int:
    try:
        results = app.geocoder.search(args.query)
    except httpx.HTTPError as e:
        print(f"Search failed: {e}")
        return 1
    if not results:
        print("No results found")
        return 1
    for i, r in enumerate(results, start=1):
        label = f" ({r.display_label})" if r.display_label else ""
        print(f"{i}. {r.name}{label}  [{r.latitude:.4f}, {r.longitude:.4f}]")
    return 0


def _cmd_add(app: App, args) -> int:
    try:
        results = app.geocoder.search(args.query)
    except httpx.HTTPError as e:
        print(f"Search failed: {e}")
        return 1
    if not results:
        print("No results found")
        return 1
    if not 1 <= args.pick <= len(results):
        print(f"Error: --pick must be between 1 and {len(results)}")
        return 1

    location = app.locations.add_place(results[args.pick - 1])
    alerts = "on" if location.alerts_enabled else "off"
    print(f"Added {location.name} (alerts {alerts})")
    return 0


def _cmd_remove(app: App, args) -> int:
    try:
        location = app.locations.find(args.location)
    except LocationNotFoundError as e:
        print(f"Error: {e}")
        return 1
    app.locations.remove_location(location.id)
    print(f"Removed {location.name}")
    return 0


def _cmd_alerts(app: App, args) -> int:
    try:
        location = app.locations.find(args.location)
    except LocationNotFoundError as e:
        print(f"Error: {e}")
        return 1
    toggled = app.locations.toggle_alerts(location.id)
    print(f"Alerts {'on' if toggled.alerts_enabled else 'off'} for {toggled.name}")
    return 0


def _cmd_config(config: AppConfig, args) -> int:
    if args.config_command == "show":
        print(config.model_dump_json(indent=2))
        return 0
    elif args.config_command == "set":
        kv = args.keyvalue
        if "=" not in kv:
            print("Error: use key=value format")
            return 1
        key, value = kv.split("=", 1)
        try:
            new_config = set_config_value(config, key.strip(), value.strip())
        except Exception as e:
            print(f"Error: {e}")
            return 1
        save_config(new_config, args.config)
        print(f"Set {key.strip()} = {get_config_value(new_config, key.strip())}")
        return 0
    else:
        print("Use: config show | config set key=value")
        return 1
