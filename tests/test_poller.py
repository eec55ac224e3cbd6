"""
Completion poller tests
"""

import pytest
from unittest.mock import Mock, call

from qcs_export_pdf.libs.core.constants import ReportConstants
from qcs_export_pdf.libs.core.exceptions import ExportCancelledError, ExportJobError
from qcs_export_pdf.libs.reports.poller import JobStatus, await_export_completion
from qcs_export_pdf.libs.reports.request import build_export_request

from test_constants import CommonTestConstants as TestConstants, FakeEvent

JobState = ReportConstants.JobState


def done_document(location=TestConstants.ARTIFACT_LOCATION):
    return {"status": "done", "results": [{"location": location}, {"location": "/ignored"}]}


class TestJobStatus:
    """Test interpretation of status documents"""

    def test_done_carries_first_result_location(self):
        """Only results[0].location is used"""
        job = JobStatus.from_document(done_document())

        assert job.state is JobState.DONE
        assert job.result_location == TestConstants.ARTIFACT_LOCATION

    @pytest.mark.parametrize("status", ["queued", "processing", "", None, "Done"])
    def test_anything_else_is_pending(self, status):
        """Only the literal 'done' completes a job"""
        assert JobStatus.from_document({"status": status}).state is JobState.PENDING

    @pytest.mark.parametrize("status", ["failed", "error", "aborted", "cancelled"])
    def test_failure_statuses(self, status):
        """Failure states are recognised instead of polled forever"""
        job = JobStatus.from_document({"status": status, "error": {"message": "render crashed"}})

        assert job.state is JobState.FAILED
        assert job.reason == "render crashed"

    def test_failure_reason_from_errors_list(self):
        """The errors list of an API error document is used when present"""
        job = JobStatus.from_document({"status": "failed", "errors": [{"title": "Bad object", "detail": "not found"}]})

        assert job.reason == "not found"

    @pytest.mark.parametrize("document", [
        {"status": "done"},
        {"status": "done", "results": []},
        {"status": "done", "results": [{}]},
    ])
    def test_done_without_location_raises(self, document):
        """A done job must point at its artifact"""
        with pytest.raises(ExportJobError):
            JobStatus.from_document(document)


class TestAwaitExportCompletion:
    """Test the polling loop"""

    def test_done_on_first_poll(self):
        """A job that is already done is fetched exactly once"""
        # Arrange
        client = Mock()
        client.get_status.return_value = done_document()
        event = FakeEvent()

        # Act
        artifact_path = await_export_completion(client, TestConstants.STATUS_PATH, stop_event=event)

        # Assert
        assert artifact_path == TestConstants.ARTIFACT_PATH
        client.get_status.assert_called_once_with(TestConstants.STATUS_PATH)
        assert event.waits == []

    def test_one_get_per_tick_until_done(self):
        """N pending documents cost N waits of one second and N+1 GETs"""
        # Arrange
        client = Mock()
        client.get_status.side_effect = [
            {"status": "queued"},
            {"status": "processing"},
            {"status": "processing"},
            done_document(),
        ]
        event = FakeEvent()

        # Act
        artifact_path = await_export_completion(client, TestConstants.STATUS_PATH, stop_event=event)

        # Assert
        assert artifact_path == TestConstants.ARTIFACT_PATH
        assert client.get_status.call_args_list == [call(TestConstants.STATUS_PATH)] * 4
        assert event.waits == [1, 1, 1]

    def test_failed_job_raises(self):
        """A failure state ends polling with an error"""
        client = Mock()
        client.get_status.side_effect = [{"status": "processing"}, {"status": "failed", "message": "timeout"}]

        with pytest.raises(ExportJobError, match="failed.*timeout"):
            await_export_completion(client, TestConstants.STATUS_PATH, stop_event=FakeEvent())

    def test_stop_event_cancels_wait(self):
        """Setting the stop event interrupts polling"""
        client = Mock()
        client.get_status.return_value = {"status": "processing"}

        with pytest.raises(ExportCancelledError):
            await_export_completion(client, TestConstants.STATUS_PATH, stop_event=FakeEvent(set_after=2))

        assert client.get_status.call_count == 2


class TestBuildExportRequest:
    """Test the export job document"""

    def test_fixed_shape(self):
        """The document matches the reports API sense-image template"""
        body = build_export_request(TestConstants.APP_ID, TestConstants.OBJECT_ID)

        assert body == {
            "type": "sense-image-1.0",
            "output": {"outputId": "Chart_pdf", "type": "pdf", "pdfOutput": {}},
            "senseImageTemplate": {
                "appId": TestConstants.APP_ID,
                "visualization": {"id": TestConstants.OBJECT_ID, "widthPx": 613, "heightPx": 409},
            },
        }
