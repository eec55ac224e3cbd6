"""
Application tests

Runs whole export cycles with a mocked reports client, a fake clock and a
fake stop event so nothing sleeps and nothing touches the network.
"""

import signal
from datetime import datetime
from unittest.mock import Mock, call, patch

import pytest

from qcs_export_pdf.libs.cli_interface import CLIInterface
from qcs_export_pdf.libs.core.config import ConfigManager
from qcs_export_pdf.libs.core.exceptions import AuthenticationError, NetworkError
from qcs_export_pdf.libs.main_app import ExportApplication
from qcs_export_pdf.libs.reports.client import ReportsClient
from qcs_export_pdf.libs.scheduler import TickScheduler

from test_constants import CommonTestConstants as TestConstants, TestUtilities, FakeEvent

START = datetime(2024, 1, 31, 12, 0, 0)
MONOTONIC_NOW = 5000.0


def make_client(statuses=None) -> Mock:
    client = Mock(spec=ReportsClient)
    client.submit_report.return_value = TestConstants.STATUS_PATH
    client.get_status.side_effect = statuses or [
        {"status": "done", "results": [{"location": TestConstants.ARTIFACT_LOCATION}]},
    ]
    client.download.return_value = TestConstants.PDF_BYTES
    return client


def make_app(client, stop_event, now=None) -> ExportApplication:
    cli = CLIInterface(config_manager=ConfigManager(env_reader=TestUtilities.env_reader({})))
    return ExportApplication(
        cli_interface=cli,
        client=client,
        scheduler=TickScheduler(1, clock=lambda: MONOTONIC_NOW),
        stop_event=stop_event,
        now=now or (lambda: START),
    )


@pytest.fixture(autouse=True)
def quiet_logging():
    """Keep setup_logging from replacing pytest's handlers"""
    with patch('qcs_export_pdf.libs.main_app.setup_logging') as mock_setup:
        yield mock_setup


class TestExportCycle:
    """Test complete export cycles"""

    def test_single_cycle_writes_report(self, tmp_path, capsys):
        """Interval 1s, job done on first poll, stopped during the inter-cycle wait"""
        # Arrange
        client = make_client()
        event = FakeEvent(set_after=1)
        app = make_app(client, event)

        # Act
        exit_code = app.run(TestConstants.BASE_ARGS + ["-t", "1", "-outDir", str(tmp_path)])

        # Assert
        assert exit_code == 0
        report = tmp_path / "generated_report_0_20240131T120000.pdf"
        assert report.read_bytes() == TestConstants.PDF_BYTES
        client.get_status.assert_called_once_with(TestConstants.STATUS_PATH)
        client.download.assert_called_once_with(TestConstants.ARTIFACT_PATH)
        assert event.waits == [1.0]

        out = capsys.readouterr().out
        assert out == (
            "0\t2024-01-31 12:00:01 - Generating pdf... "
            "Downloading file... "
            "Done! "
            f"Wrote {len(TestConstants.PDF_BYTES)} to file: generated_report_0_20240131T120000.pdf\n"
        )

    def test_request_body_submitted(self, tmp_path):
        client = make_client()
        app = make_app(client, FakeEvent(set_after=1))

        app.run(TestConstants.BASE_ARGS + ["-outDir", str(tmp_path)])

        body = client.submit_report.call_args[0][0]
        assert body["senseImageTemplate"]["appId"] == TestConstants.APP_ID
        assert body["senseImageTemplate"]["visualization"]["id"] == TestConstants.OBJECT_ID

    def test_sequence_increments_each_cycle(self, tmp_path):
        """Each cycle gets the next sequence number and its own start time"""
        # Arrange
        done = {"status": "done", "results": [{"location": TestConstants.ARTIFACT_LOCATION}]}
        client = make_client(statuses=[done, done, done])
        starts = iter([START, START.replace(minute=1), START.replace(minute=2)])
        app = make_app(client, FakeEvent(set_after=3), now=lambda: next(starts))

        # Act
        exit_code = app.run(TestConstants.BASE_ARGS + ["-outDir", str(tmp_path)])

        # Assert
        assert exit_code == 0
        assert sorted(p.name for p in tmp_path.iterdir()) == [
            "generated_report_0_20240131T120000.pdf",
            "generated_report_1_20240131T120100.pdf",
            "generated_report_2_20240131T120200.pdf",
        ]
        assert client.submit_report.call_count == 3

    def test_polls_until_done(self, tmp_path):
        """Pending statuses are polled once per second before downloading"""
        client = make_client(statuses=[
            {"status": "queued"},
            {"status": "processing"},
            {"status": "done", "results": [{"location": TestConstants.ARTIFACT_LOCATION}]},
        ])
        event = FakeEvent(set_after=3)
        app = make_app(client, event)

        app.run(TestConstants.BASE_ARGS + ["-outDir", str(tmp_path)])

        assert client.get_status.call_count == 3
        assert event.waits == [1, 1, 1.0]


class TestFailures:
    """Test error propagation out of the loop"""

    def test_network_error_exits_non_zero(self, tmp_path, capsys):
        """A failed request ends the process with a logged error"""
        client = make_client()
        client.submit_report.side_effect = NetworkError("HTTP 500 Internal Server Error from POST")
        app = make_app(client, FakeEvent())

        exit_code = app.run(TestConstants.BASE_ARGS + ["-outDir", str(tmp_path)])

        assert exit_code == 1
        assert "Error: HTTP 500" in capsys.readouterr().err
        client.close.assert_called_once()
        assert list(tmp_path.iterdir()) == []

    def test_error_message_masks_api_key(self, tmp_path, capsys):
        client = make_client()
        client.submit_report.side_effect = AuthenticationError(f"rejected {TestConstants.API_KEY}")
        app = make_app(client, FakeEvent())

        app.run(TestConstants.BASE_ARGS + ["-outDir", str(tmp_path)])

        assert TestConstants.API_KEY not in capsys.readouterr().err

    def test_failed_job_exits_non_zero(self, tmp_path):
        client = make_client(statuses=[{"status": "failed", "message": "object not found"}])
        app = make_app(client, FakeEvent())

        assert app.run(TestConstants.BASE_ARGS + ["-outDir", str(tmp_path)]) == 1
        client.download.assert_not_called()

    def test_write_failure_exits_non_zero(self, tmp_path):
        """A name collision on disk is fatal"""
        (tmp_path / "generated_report_0_20240131T120000.pdf").write_bytes(b"old")
        app = make_app(make_client(), FakeEvent())

        assert app.run(TestConstants.BASE_ARGS + ["-outDir", str(tmp_path)]) == 1


class TestLifecycle:
    """Test help handling, cancellation and signal wiring"""

    def test_help_makes_no_http_calls(self, capsys):
        client = make_client()
        app = make_app(client, FakeEvent())

        with pytest.raises(SystemExit) as exc_info:
            app.run(["-h"])

        assert exc_info.value.code == 0
        assert "Usage:" in capsys.readouterr().out
        client.submit_report.assert_not_called()

    def test_cancel_while_polling_exits_zero(self, tmp_path):
        """A shutdown signal during polling stops without an error"""
        client = make_client(statuses=[{"status": "processing"}])
        app = make_app(client, FakeEvent(set_after=1))

        assert app.run(TestConstants.BASE_ARGS + ["-outDir", str(tmp_path)]) == 0
        client.download.assert_not_called()

    def test_signal_handler_sets_stop_event(self):
        event = FakeEvent()
        app = make_app(make_client(), event)

        app._handle_signal(signal.SIGTERM, None)

        assert event.is_set()

    def test_signal_handlers_restored(self, tmp_path):
        original = signal.getsignal(signal.SIGTERM)
        app = make_app(make_client(), FakeEvent(set_after=1))

        app.run(TestConstants.BASE_ARGS + ["-outDir", str(tmp_path)])

        assert signal.getsignal(signal.SIGTERM) is original

    def test_ignored_arguments_logged(self, tmp_path, caplog):
        app = make_app(make_client(), FakeEvent(set_after=1))

        with caplog.at_level("WARNING"):
            app.run(["-format", "png"] + TestConstants.BASE_ARGS + ["-outDir", str(tmp_path)])

        assert "Ignoring unrecognized arguments: -format png" in caplog.text


class TestLogging:
    """Test logging configuration around settings parsing"""

    def test_logging_configured_before_parsing(self, tmp_path, quiet_logging):
        """Default level first, debug only once -debug has been parsed"""
        app = make_app(make_client(), FakeEvent(set_after=1))

        app.run(TestConstants.BASE_ARGS + ["-outDir", str(tmp_path), "-debug"])

        assert quiet_logging.call_args_list == [call(), call(debug=True)]

    def test_debug_not_raised_without_flag(self, tmp_path, quiet_logging):
        app = make_app(make_client(), FakeEvent(set_after=1))

        app.run(TestConstants.BASE_ARGS + ["-outDir", str(tmp_path)])

        assert quiet_logging.call_args_list == [call()]

    def test_config_file_load_is_logged(self, tmp_path, caplog):
        """Messages emitted while reading settings reach the log"""
        # Arrange
        config_path = tmp_path / "export.yaml"
        config_path.write_text("global:\n  timeout: 10\n")
        app = make_app(make_client(), FakeEvent(set_after=1))

        # Act
        with caplog.at_level("DEBUG"):
            app.run(TestConstants.BASE_ARGS + ["-outDir", str(tmp_path), "-config", str(config_path), "-debug"])

        # Assert
        assert f"Loaded configuration from {config_path}" in caplog.text
        assert "Effective configuration" in caplog.text
        assert TestConstants.API_KEY not in caplog.text


class TestDisplayedSchedule:
    """Test the next-run time shown in the progress line"""

    def test_next_run_uses_wall_clock(self, tmp_path, capsys):
        """Tick arithmetic on a monotonic clock is shown relative to now()"""
        client = make_client()
        app = ExportApplication(
            cli_interface=CLIInterface(config_manager=ConfigManager(env_reader=TestUtilities.env_reader({}))),
            client=client,
            scheduler=TickScheduler(60, clock=lambda: 123.5),
            stop_event=FakeEvent(set_after=1),
            now=lambda: START,
        )

        app.run(TestConstants.BASE_ARGS + ["-outDir", str(tmp_path)])

        assert capsys.readouterr().out.startswith("0\t2024-01-31 12:01:00 - Generating pdf... ")
