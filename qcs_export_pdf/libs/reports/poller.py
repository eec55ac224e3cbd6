"""
Completion Poller

Polls a job status resource until the export job finishes.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..core.constants import ErrorMessages, ReportConstants
from ..core.exceptions import ExportCancelledError, ExportJobError
from ..core.utils import url_path

logger = logging.getLogger(__name__)

JobState = ReportConstants.JobState


def _failure_reason(document: Dict[str, Any]) -> str:
    """Pull a human-readable failure reason out of a status document"""
    errors = document.get('errors')
    if isinstance(errors, list) and errors:
        first = errors[0]
        if isinstance(first, dict):
            return first.get('detail') or first.get('title') or str(first)
        return str(first)

    error = document.get('error')
    if isinstance(error, dict):
        return error.get('message') or error.get('title') or str(error)
    if error:
        return str(error)

    return document.get('message') or "no reason given"


@dataclass(frozen=True)
class JobStatus:
    """A single observation of a remote export job"""
    state: JobState
    status: str
    result_location: Optional[str] = None
    reason: Optional[str] = None

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> 'JobStatus':
        """
        Interpret a status document returned by the reports API

        Args:
            document: Parsed JSON status document

        Returns:
            JobStatus: Pending, done (with result location) or failed (with reason)

        Raises:
            ExportJobError: If the job is done but carries no result location
        """
        status = document.get('status')
        status_text = status if isinstance(status, str) else str(status)

        if status == ReportConstants.DONE_STATUS:
            try:
                location = document['results'][0]['location']
            except (KeyError, IndexError, TypeError):
                location = None
            if not location:
                raise ExportJobError(str(ErrorMessages.JobError.NO_RESULT))
            return cls(JobState.DONE, status_text, result_location=location)

        if isinstance(status, str) and status.lower() in ReportConstants.FAILED_STATUSES:
            return cls(JobState.FAILED, status_text, reason=_failure_reason(document))

        return cls(JobState.PENDING, status_text)


def await_export_completion(client, status_path: str,
                            stop_event: Optional[threading.Event] = None,
                            poll_interval: float = ReportConstants.POLL_INTERVAL) -> str:
    """
    Poll the job status until the job is done

    Args:
        client: ReportsClient used to fetch status documents
        status_path: Path of the job status resource
        stop_event: Event that interrupts the wait between polls when set
        poll_interval: Seconds to wait between polls

    Returns:
        str: Path of the rendered artifact

    Raises:
        ExportJobError: If the job reports a failure state
        ExportCancelledError: If stop_event is set while waiting
    """
    stop_event = stop_event or threading.Event()
    polls = 1
    job = JobStatus.from_document(client.get_status(status_path))

    while job.state is JobState.PENDING:
        logger.debug(f"Export job status '{job.status}' after {polls} poll(s)")
        if stop_event.wait(poll_interval):
            raise ExportCancelledError(ErrorMessages.JobError.CANCELLED.format(what="the export job"))
        job = JobStatus.from_document(client.get_status(status_path))
        polls += 1

    if job.state is JobState.FAILED:
        raise ExportJobError(ErrorMessages.JobError.FAILED.format(status=job.status, reason=job.reason))

    logger.debug(f"Export job done after {polls} poll(s): {job.result_location}")
    return url_path(job.result_location)
