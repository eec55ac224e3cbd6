"""
Core Utilities

Common utility functions used across the export tool.
"""

import logging
import re
import urllib3
from typing import Optional
from urllib.parse import urlsplit

from .constants import ErrorMessages, NetworkConstants
from .exceptions import AuthenticationError, ConfigurationError, NetworkError


def setup_logging(debug: bool = False) -> None:
    """
    Set up logging configuration for the application.

    Args:
        debug: Enable debug logging level
    """
    level = logging.DEBUG if debug else logging.INFO

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # Console handler writes to stderr so progress output on stdout stays clean
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)

    formatter = logging.Formatter(
        '%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # Reduce noise from urllib3 connection pool
    logging.getLogger('urllib3').setLevel(logging.WARNING)

    if debug:
        logger = logging.getLogger(__name__)
        logger.debug("Debug mode enabled")


def disable_ssl_warnings() -> None:
    """Disable SSL warnings when -skipTls is used"""
    urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)


def mask_sensitive_info(text: str, api_key: Optional[str] = None) -> str:
    """
    Mask sensitive information in text for logging and debug output.

    Args:
        text: Text to mask
        api_key: API key to mask (optional)

    Returns:
        Text with sensitive information masked
    """
    if not text:
        return text

    masked_text = text

    if api_key and api_key in masked_text:
        masked_text = masked_text.replace(api_key, "***MASKED***")

    # Bearer tokens and JWT-shaped strings
    masked_text = re.sub(r'Bearer [A-Za-z0-9+/=_.-]+', 'Bearer ***MASKED***', masked_text)
    masked_text = re.sub(r'eyJ[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+\.[A-Za-z0-9_-]*', '***MASKED***', masked_text)

    return masked_text


def validate_tenant_url(url: str) -> str:
    """
    Validate that the provided string is an absolute http(s) URL.

    Args:
        url: Tenant base URL to validate

    Returns:
        str: The URL without a trailing slash

    Raises:
        ConfigurationError: If URL is invalid
    """
    if not url or not isinstance(url, str):
        raise ConfigurationError("Tenant URL cannot be empty")

    try:
        parts = urlsplit(url.strip())
    except ValueError:
        raise ConfigurationError(ErrorMessages.UsageError.INVALID_URL.format(value=url))

    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise ConfigurationError(ErrorMessages.UsageError.INVALID_URL.format(value=url))

    return url.strip().rstrip('/')


def parse_positive_int(value, message_template: str) -> int:
    """
    Parse a positive integer from a string or int value.

    Raises:
        ConfigurationError: If the value is not a positive integer
    """
    if isinstance(value, bool):
        raise ConfigurationError(message_template.format(value=value))
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        raise ConfigurationError(message_template.format(value=value))
    if number <= 0:
        raise ConfigurationError(message_template.format(value=value))
    return number


def url_path(location: str) -> str:
    """
    Reduce an absolute or relative URL to its path component.

    Args:
        location: URL as returned by the service

    Returns:
        str: Path component, query and fragment dropped
    """
    path = urlsplit(location).path
    return path or "/"


def format_bytes(bytes_count: int) -> str:
    """
    Format byte count into human-readable string.

    Args:
        bytes_count: Number of bytes

    Returns:
        str: Human-readable byte count (e.g., "1.5 MB")
    """
    if bytes_count == 0:
        return "0 B"

    units = ['B', 'KB', 'MB', 'GB', 'TB']
    unit_index = 0
    size = float(bytes_count)

    while size >= 1024 and unit_index < len(units) - 1:
        size /= 1024
        unit_index += 1

    return f"{size:.1f} {units[unit_index]}"


def handle_http_error(status_code: int, method: str, url: str) -> None:
    """
    Centralized HTTP status handling with user-friendly messages

    Args:
        status_code: HTTP status code of the failed response
        method: HTTP method of the request
        url: Requested URL

    Raises:
        AuthenticationError: For 401 and 403
        NetworkError: For every other non-success status
    """
    if status_code == NetworkConstants.HTTPStatus.UNAUTHORIZED:
        raise AuthenticationError(str(ErrorMessages.AuthError.UNAUTHORIZED))
    if status_code == NetworkConstants.HTTPStatus.FORBIDDEN:
        raise AuthenticationError(str(ErrorMessages.AuthError.FORBIDDEN))

    try:
        status = str(NetworkConstants.HTTPStatus(status_code))
    except ValueError:
        status = str(status_code)
    raise NetworkError(ErrorMessages.NetworkError.HTTP_ERROR.format(status=status, method=method, url=url))
