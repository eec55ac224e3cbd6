"""
Reports Client

Handles HTTP communication with the tenant's reports API: submitting export
jobs, reading job status documents and downloading rendered artifacts.
"""

import logging
from typing import Any, Dict, Optional

import requests

from ..core.auth import ApiKeyAuth
from ..core.constants import ErrorMessages, NetworkConstants, ReportConstants
from ..core.exceptions import NetworkError
from ..core.utils import disable_ssl_warnings, format_bytes, handle_http_error, url_path

logger = logging.getLogger(__name__)


class ReportsClient:
    """Client for the reports API of a single tenant"""

    def __init__(self, base_url: str, auth: ApiKeyAuth,
                 timeout: int = NetworkConstants.DEFAULT_TIMEOUT,
                 skip_tls: bool = False,
                 session: Optional[requests.Session] = None):
        """
        Initialize reports client

        Args:
            base_url: Tenant base URL
            auth: API key authentication
            timeout: Per-request timeout in seconds
            skip_tls: Whether to skip TLS verification
            session: Pre-built session (a new one is created if None)
        """
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.auth = auth
        self.session.headers[str(NetworkConstants.HTTPHeader.USER_AGENT)] = NetworkConstants.USER_AGENT

        if skip_tls:
            self.session.verify = False
            disable_ssl_warnings()

    def _make_request(self, method: str, path: str, **kwargs) -> requests.Response:
        """
        Make HTTP request with error handling

        Args:
            method: HTTP method
            path: Absolute path on the tenant
            **kwargs: Passed through to ``requests.Session.request``

        Returns:
            requests.Response: Successful response

        Raises:
            AuthenticationError: If the API key is rejected
            NetworkError: On transport failure or any other non-success status
        """
        url = f"{self.base_url}{path}"
        logger.debug(f"{method} {url}")
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.SSLError as e:
            logger.error(f"API request failed for {url}: {e}")
            raise NetworkError(ErrorMessages.NetworkError.SSL_ERROR.format(url=url))
        except requests.exceptions.Timeout:
            logger.error(f"API request timed out for {url}")
            raise NetworkError(ErrorMessages.NetworkError.TIMEOUT.format(url=url, timeout=self.timeout))
        except requests.RequestException as e:
            logger.error(f"API request failed for {url}: {e}")
            raise NetworkError(ErrorMessages.NetworkError.CONNECTION_FAILED.format(url=url, error=e))

        if not response.ok:
            logger.debug(f"{method} {url} returned {response.status_code}: {response.text[:500]}")
            handle_http_error(response.status_code, method, url)

        return response

    def submit_report(self, request_body: Dict[str, Any]) -> str:
        """
        Submit an export job

        Args:
            request_body: Export job request document

        Returns:
            str: Path of the job status resource, taken from the Location header

        Raises:
            NetworkError: If the response carries no Location header
        """
        response = self._make_request(
            "POST",
            ReportConstants.REPORTS_PATH,
            json=request_body,
            headers={str(NetworkConstants.HTTPHeader.ACCEPT): str(NetworkConstants.ContentType.JSON)},
        )

        location = response.headers.get(str(NetworkConstants.HTTPHeader.LOCATION))
        if not location:
            raise NetworkError(str(ErrorMessages.NetworkError.MISSING_LOCATION))

        status_path = url_path(location)
        logger.debug(f"Export job accepted, status at {status_path}")
        return status_path

    def get_status(self, status_path: str) -> Dict[str, Any]:
        """
        Fetch a job status document

        Args:
            status_path: Path returned by ``submit_report``

        Returns:
            Dict: Parsed JSON status document

        Raises:
            NetworkError: If the body is not a JSON object
        """
        response = self._make_request(
            "GET",
            status_path,
            headers={str(NetworkConstants.HTTPHeader.ACCEPT): str(NetworkConstants.ContentType.JSON)},
        )
        try:
            document = response.json()
        except ValueError as e:
            raise NetworkError(ErrorMessages.NetworkError.INVALID_JSON.format(url=response.url, error=e))

        if not isinstance(document, dict):
            raise NetworkError(ErrorMessages.NetworkError.INVALID_JSON.format(
                url=response.url, error=f"got {type(document).__name__}"))
        return document

    def download(self, artifact_path: str) -> bytes:
        """
        Download a rendered artifact

        Args:
            artifact_path: Path of the artifact on the tenant

        Returns:
            bytes: Raw response body
        """
        response = self._make_request("GET", artifact_path)
        content = response.content
        logger.debug(f"Downloaded {format_bytes(len(content))} from {artifact_path}")
        return content

    def close(self) -> None:
        """Close the underlying HTTP session"""
        self.session.close()

    def __enter__(self):
        """Context manager entry"""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit"""
        self.close()
