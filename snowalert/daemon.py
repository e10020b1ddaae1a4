"""Periodic check daemon: runs a check cycle on a fixed interval.

Checks once on start, then every interval (6 hours by default). SIGUSR1
requests an immediate check; it is ignored while a check is running.

Usage:
    python -m snowalert daemon
    python -m snowalert daemon --interval 3600
    python -m snowalert daemon --check-now    # signal a running daemon
    python -m snowalert daemon --stop
"""

import json
import logging
import os
import signal
import sys
import time
from datetime import UTC, datetime
from pathlib import Path

from snowalert.app import App, build_app
from snowalert.config.loader import config_hash
from snowalert.config.schema import AppConfig
from snowalert.reporting.formatters import format_summary_text

logger = logging.getLogger(__name__)

MAX_BACKOFF = 3600  # 1 hour max backoff after repeated failures
PID_DIR = Path("data")
PID_FILE = PID_DIR / "daemon.pid"
STATE_FILE = PID_DIR / "daemon_state.json"
LOG_DIR = Path("logs")
MAX_LOG_FILES = 100


class CheckDaemon:
    """Runs check cycles in a loop with backoff and signal handling."""

    def __init__(
        self,
        config: AppConfig,
        db_path: str = "data/snowalert.db",
        interval: int | None = None,
    ):
        self.config = config
        self.db_path = db_path
        self.interval = interval or config.ops.check_interval_minutes * 60
        self.app: App | None = None
        self._running = False
        self._check_requested = False
        self._consecutive_failures = 0
        self._total_checks = 0
        self._total_successes = 0
        self._total_failures = 0
        self._started_at: str | None = None

    def start(self) -> None:
        """Start the daemon loop."""
        self._check_not_already_running()
        self._write_pid()
        self._setup_signals()
        self._running = True
        self._started_at = datetime.now(UTC).isoformat()
        self.app = build_app(self.config, self.db_path)

        logger.info(
            "Daemon started, interval=%ds pid=%d config=%s",
            self.interval, os.getpid(), config_hash(self.config),
        )
        print(f"🔄 Snow alert daemon started (pid {os.getpid()}, every {self.interval}s)")
        print(f"   Logs: {LOG_DIR}/")
        print("   Stop: python -m snowalert daemon --stop")

        try:
            self._loop()
        except KeyboardInterrupt:
            logger.info("Daemon interrupted by keyboard")
        finally:
            self._cleanup()

    def _loop(self) -> None:
        """Main check loop with backoff on failures."""
        while self._running:
            check_start = time.monotonic()
            self._check_requested = False
            success = self._run_one_check()

            if success:
                self._consecutive_failures = 0
                wait = self.interval
            else:
                self._consecutive_failures += 1
                wait = min(60 * (2 ** self._consecutive_failures), MAX_BACKOFF, self.interval)
                logger.warning(
                    "Check failed (%d consecutive), backing off %ds",
                    self._consecutive_failures, wait,
                )

            self._save_state()

            # Sleep in 1-second increments so we can respond to signals
            elapsed = time.monotonic() - check_start
            sleep_until = time.monotonic() + max(0, wait - elapsed)
            while self._running and not self._check_requested and time.monotonic() < sleep_until:
                time.sleep(1)

    def _run_one_check(self) -> bool:
        """Execute a single check cycle. Returns False if every location failed."""
        assert self.app is not None
        self._total_checks += 1
        timestamp = datetime.now(UTC).strftime("%Y%m%dT%H%M%SZ")

        LOG_DIR.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(LOG_DIR / f"check_{timestamp}.log")
        file_handler.setLevel(logging.INFO)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        root_logger = logging.getLogger()
        root_logger.addHandler(file_handler)

        try:
            summary = self.app.orchestrator.check_all()
            if summary is None:
                self._total_successes += 1
                return True

            logger.info("\n%s", format_summary_text(summary))
            if summary.locations_checked and summary.locations_failed == summary.locations_checked:
                self._total_failures += 1
                return False
            self._total_successes += 1
            return True

        except Exception:
            self._total_failures += 1
            logger.exception("Check #%d crashed", self._total_checks)
            return False

        finally:
            root_logger.removeHandler(file_handler)
            file_handler.close()
            self._rotate_logs()

    def _rotate_logs(self) -> None:
        """Keep only the most recent log files."""
        if not LOG_DIR.exists():
            return
        logs = sorted(LOG_DIR.glob("check_*.log"))
        if len(logs) > MAX_LOG_FILES:
            for old in logs[: len(logs) - MAX_LOG_FILES]:
                old.unlink(missing_ok=True)

    def _request_check(self, signum: int, frame: object) -> None:
        if self.app is not None and self.app.orchestrator.is_checking:
            logger.info("Check requested while a check is running, ignoring")
            return
        logger.info("Immediate check requested")
        self._check_requested = True

    def _setup_signals(self) -> None:
        """Handle SIGTERM/SIGINT for shutdown and SIGUSR1 for check-now."""
        def _stop(signum: int, frame: object) -> None:
            sig_name = signal.Signals(signum).name
            logger.info("Received %s, shutting down gracefully...", sig_name)
            print(f"\n⏹️  Received {sig_name}, finishing current check...")
            self._running = False

        signal.signal(signal.SIGTERM, _stop)
        signal.signal(signal.SIGINT, _stop)
        signal.signal(signal.SIGUSR1, self._request_check)

    def _check_not_already_running(self) -> None:
        """Prevent duplicate daemons."""
        if PID_FILE.exists():
            try:
                pid = int(PID_FILE.read_text().strip())
                os.kill(pid, 0)
                print(f"❌ Daemon already running (pid {pid}). Stop it first:")
                print("   python -m snowalert daemon --stop")
                sys.exit(1)
            except (ProcessLookupError, ValueError):
                # Stale PID file
                PID_FILE.unlink(missing_ok=True)
            except PermissionError:
                print(f"❌ Daemon may be running (pid {pid}), can't verify.")
                sys.exit(1)

    def _write_pid(self) -> None:
        PID_DIR.mkdir(parents=True, exist_ok=True)
        PID_FILE.write_text(str(os.getpid()))

    def _save_state(self) -> None:
        """Persist daemon stats for status reporting."""
        state = {
            "pid": os.getpid(),
            "started_at": self._started_at,
            "interval": self.interval,
            "total_checks": self._total_checks,
            "total_successes": self._total_successes,
            "total_failures": self._total_failures,
            "consecutive_failures": self._consecutive_failures,
            "last_update": datetime.now(UTC).isoformat(),
        }
        PID_DIR.mkdir(parents=True, exist_ok=True)
        STATE_FILE.write_text(json.dumps(state, indent=2))

    def _cleanup(self) -> None:
        """Remove PID file and close services on exit."""
        PID_FILE.unlink(missing_ok=True)
        self._save_state()
        if self.app is not None:
            self.app.close()
        logger.info(
            "Daemon stopped after %d checks (%d ok, %d failed)",
            self._total_checks, self._total_successes, self._total_failures,
        )
        print(
            f"⏹️  Daemon stopped after {self._total_checks} checks "
            f"({self._total_successes} ok, {self._total_failures} failed)"
        )


def _read_pid() -> int | None:
    if not PID_FILE.exists():
        print("No daemon running (no PID file found)")
        return None
    try:
        return int(PID_FILE.read_text().strip())
    except ValueError:
        print("Corrupt PID file, removing")
        PID_FILE.unlink(missing_ok=True)
        return None


def request_check() -> int:
    """Ask a running daemon to check now by sending SIGUSR1."""
    pid = _read_pid()
    if pid is None:
        return 1
    try:
        os.kill(pid, signal.SIGUSR1)
    except ProcessLookupError:
        print(f"Daemon not running (stale pid {pid}), cleaning up")
        PID_FILE.unlink(missing_ok=True)
        return 1
    print(f"Check requested (pid {pid})")
    return 0


def stop_daemon() -> int:
    """Stop a running daemon by sending SIGTERM."""
    pid = _read_pid()
    if pid is None:
        return 1

    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        print(f"Daemon not running (stale pid {pid}), cleaning up")
        PID_FILE.unlink(missing_ok=True)
        STATE_FILE.unlink(missing_ok=True)
        return 0

    print(f"Stopping daemon (pid {pid})...")
    os.kill(pid, signal.SIGTERM)

    # Wait up to 60s for graceful shutdown
    for _ in range(60):
        time.sleep(1)
        try:
            os.kill(pid, 0)
        except ProcessLookupError:
            print("✅ Daemon stopped")
            PID_FILE.unlink(missing_ok=True)
            return 0

    print("⚠️  Daemon didn't stop in 60s, sending SIGKILL")
    os.kill(pid, signal.SIGKILL)
    PID_FILE.unlink(missing_ok=True)
    return 0


def daemon_status() -> int:
    """Print daemon status from state file."""
    if not STATE_FILE.exists():
        print("No daemon state found")
        return 1

    state = json.loads(STATE_FILE.read_text())
    pid = state.get("pid", "?")

    running = False
    try:
        os.kill(int(pid), 0)
        running = True
    except (ProcessLookupError, ValueError, TypeError):
        pass

    status_icon = "🟢" if running else "🔴"
    print(f"{status_icon} Daemon {'running' if running else 'stopped'}")
    print(f"  PID: {pid}")
    print(f"  Interval: {state.get('interval', '?')}s")
    print(f"  Started: {state.get('started_at', '?')}")
    print(f"  Total checks: {state.get('total_checks', 0)}")
    print(f"  Successes: {state.get('total_successes', 0)}")
    print(f"  Failures: {state.get('total_failures', 0)}")
    print(f"  Consecutive failures: {state.get('consecutive_failures', 0)}")
    print(f"  Last update: {state.get('last_update', '?')}")
    return 0
