"""
Main Application

Orchestrates the export cycle: submit a report job, poll until it is done,
download the PDF and write it to disk, then wait for the next tick.
"""

import logging
import signal
import sys
import threading
from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable, List, Optional

from .cli_interface import CLIInterface
from .core import ApiKeyAuth, ExportSettings, QcsExportError, setup_logging
from .core.constants import FileConstants, ReportConstants
from .core.exceptions import ExportCancelledError
from .core.utils import mask_sensitive_info
from .reports import ReportsClient, await_export_completion, build_export_request, write_report
from .scheduler import TickScheduler

logger = logging.getLogger(__name__)


class ExportApplication:
    """Main application orchestrator for the scheduled PDF export"""

    def __init__(self,
                 cli_interface: Optional[CLIInterface] = None,
                 client: Optional[ReportsClient] = None,
                 scheduler: Optional[TickScheduler] = None,
                 stop_event: Optional[threading.Event] = None,
                 now: Callable[[], datetime] = datetime.now,
                 poll_interval: float = ReportConstants.POLL_INTERVAL):
        """
        Initialize the application with optional dependency injection

        Args:
            cli_interface: CLI interface for argument parsing (auto-created if None)
            client: Reports API client (created from settings if None)
            scheduler: Tick scheduler (created from settings if None)
            stop_event: Event set by shutdown signals (auto-created if None)
            now: Wall-clock source used for file names and the displayed next run
            poll_interval: Seconds between job status polls
        """
        self.cli_interface = cli_interface or CLIInterface()
        self.client = client
        self.scheduler = scheduler
        self.stop_event = stop_event or threading.Event()
        self.now = now
        self.poll_interval = poll_interval
        self.settings: Optional[ExportSettings] = None
        self._previous_handlers = {}

    def _create_default_client(self, settings: ExportSettings) -> ReportsClient:
        """Create default reports client."""
        return ReportsClient(
            settings.url,
            ApiKeyAuth(settings.api_key),
            timeout=settings.request_timeout,
            skip_tls=settings.skip_tls,
        )

    def _create_default_scheduler(self, settings: ExportSettings) -> TickScheduler:
        """Create default tick scheduler."""
        return TickScheduler(settings.interval)

    def _handle_signal(self, signum, frame) -> None:
        """Handle shutdown signals gracefully."""
        logger.info("Received shutdown signal. Stopping after the current step...")
        self.stop_event.set()

    def _install_signal_handlers(self) -> None:
        if threading.current_thread() is not threading.main_thread():
            return
        for signum in (signal.SIGINT, signal.SIGTERM):
            self._previous_handlers[signum] = signal.signal(signum, self._handle_signal)

    def _restore_signal_handlers(self) -> None:
        for signum, handler in self._previous_handlers.items():
            signal.signal(signum, handler)
        self._previous_handlers.clear()

    def run(self, argv: Optional[List[str]] = None) -> int:
        """
        Run the application until stopped or an error occurs

        Args:
            argv: Argument list without the program name (defaults to sys.argv[1:])

        Returns:
            Exit code (0 when stopped by a signal, 1 on error)
        """
        setup_logging()
        self.settings = self.cli_interface.build_settings(argv)
        if self.settings.debug:
            setup_logging(debug=True)
        logger.debug(f"Effective configuration: {self.settings.to_dict()}")

        if self.cli_interface.ignored_arguments:
            logger.warning(f"Ignoring unrecognized arguments: {' '.join(self.cli_interface.ignored_arguments)}")

        self.client = self.client or self._create_default_client(self.settings)
        self.scheduler = self.scheduler or self._create_default_scheduler(self.settings)

        self._install_signal_handlers()
        try:
            self.run_main_loop()
            return 0
        except ExportCancelledError as e:
            logger.info(str(e))
            return 0
        except (QcsExportError, OSError) as e:
            message = mask_sensitive_info(str(e), self.settings.api_key)
            logger.error(f"Export failed: {message}")
            print(f"Error: {message}", file=sys.stderr)
            return 1
        finally:
            self._restore_signal_handlers()
            self.client.close()

    def run_main_loop(self) -> None:
        """
        Run export cycles on the configured cadence until the stop event is set.
        """
        request_body = build_export_request(self.settings.app_id, self.settings.object_id)
        sequence = 0
        completed = 0

        logger.info(f"Exporting object {self.settings.object_id} of app {self.settings.app_id} "
                    f"every {self.settings.interval}s")

        while not self.stop_event.is_set():
            started = self.now()
            tick = self.scheduler.next_tick()
            next_run = started + timedelta(seconds=tick - self.scheduler.clock())
            self.run_cycle(sequence, started, next_run, request_body)
            completed += 1

            delay = self.scheduler.seconds_until_tick()
            if self.stop_event.wait(delay):
                break
            sequence += 1

        logger.info(f"Stopped after {completed} export cycle(s)")

    def run_cycle(self, sequence: int, started: datetime, next_run: datetime, request_body: dict) -> Path:
        """
        Run a single export cycle

        Args:
            sequence: Cycle sequence number
            started: Wall-clock time the cycle started, used in the file name
            next_run: Target time of the following cycle, for display
            request_body: Export job request document

        Returns:
            Path: The written report file
        """
        print(f"{sequence}\t{next_run.strftime(FileConstants.DISPLAY_TIME_FORMAT)} - Generating pdf... ",
              end="", flush=True)

        status_path = self.client.submit_report(request_body)
        artifact_path = await_export_completion(
            self.client, status_path, stop_event=self.stop_event, poll_interval=self.poll_interval)

        print("Downloading file... ", end="", flush=True)
        content = self.client.download(artifact_path)
        print("Done! ", end="", flush=True)

        path = write_report(content, sequence, started, self.settings.output_dir)
        print(f"Wrote {len(content)} to file: {path.name}", flush=True)
        return path


def main() -> int:
    """
    Application entry point.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    app = ExportApplication()
    return app.run()
