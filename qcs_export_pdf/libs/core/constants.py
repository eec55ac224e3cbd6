"""
Constants Module

Centralized constants for the export tool to eliminate magic strings
and improve maintainability.
"""


class ReportConstants:
    """Reports API related constants"""
    
    from enum import Enum
    
    # Endpoint - relative to the tenant base URL
    REPORTS_PATH = "/api/v1/reports"
    
    # Export job request shape
    REQUEST_TYPE = "sense-image-1.0"
    OUTPUT_ID = "Chart_pdf"
    OUTPUT_TYPE = "pdf"
    WIDTH_PX = 613
    HEIGHT_PX = 409
    
    # Poll cadence (seconds)
    POLL_INTERVAL = 1
    
    class JobState(str, Enum):
        """Local interpretation of a remote job status"""
        PENDING = "pending"
        DONE = "done"
        FAILED = "failed"
        
        def __str__(self) -> str:
            """Return the state value for use in log messages"""
            return self.value
    
    # Remote status strings that end a job without a result
    FAILED_STATUSES = frozenset({"failed", "error", "aborted", "cancelled"})
    DONE_STATUS = "done"


class NetworkConstants:
    """Network-related constants"""
    
    from enum import Enum, IntEnum
    
    # Timeout constants (seconds)
    DEFAULT_TIMEOUT = 30
    
    # User Agent
    USER_AGENT = "qcs-export-pdf/1.0"
    
    class HTTPStatus(IntEnum):
        """HTTP status codes the client reports on explicitly"""
        OK = 200
        UNAUTHORIZED = 401
        FORBIDDEN = 403
        NOT_FOUND = 404
        TOO_MANY_REQUESTS = 429
        INTERNAL_SERVER_ERROR = 500
        SERVICE_UNAVAILABLE = 503
        
        def __str__(self) -> str:
            """Return a human-readable description of the status code"""
            descriptions = {
                200: "OK",
                401: "Unauthorized",
                403: "Forbidden",
                404: "Not Found",
                429: "Too Many Requests",
                500: "Internal Server Error",
                503: "Service Unavailable"
            }
            return f"{self.value} {descriptions.get(self.value, 'Unknown')}"
    
    class ContentType(str, Enum):
        """Content-Type header values"""
        JSON = "application/json"
        
        def __str__(self) -> str:
            """Return the content type value for use in headers"""
            return self.value
    
    class HTTPHeader(str, Enum):
        """Standard HTTP header names"""
        AUTHORIZATION = "Authorization"
        LOCATION = "Location"
        USER_AGENT = "User-Agent"
        ACCEPT = "Accept"
        
        def __str__(self) -> str:
            """Return the header name for use in HTTP requests"""
            return self.value


class ConfigConstants:
    """Configuration defaults and environment variable names"""
    
    DEFAULT_INTERVAL = 60
    DEFAULT_OUTPUT_DIR = "."
    
    # Environment variables (also read from a .env file)
    ENV_URL = "QCS_URL"
    ENV_API_KEY = "QCS_API_KEY"
    ENV_APP_ID = "QCS_APP_ID"
    ENV_OBJECT_ID = "QCS_OBJECT_ID"
    ENV_INTERVAL = "QCS_INTERVAL"
    ENV_OUTPUT_DIR = "QCS_OUTPUT_DIR"


class FileConstants:
    """Output file naming"""
    
    REPORT_PREFIX = "generated_report"
    REPORT_EXTENSION = ".pdf"
    TIMESTAMP_FORMAT = "%Y%m%dT%H%M%S"
    
    # Format used when printing the next scheduled run
    DISPLAY_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


class ErrorMessages:
    """Centralized error message templates"""
    
    from enum import Enum
    
    class UsageError(str, Enum):
        """Command-line usage error templates"""
        INVALID_URL = "Unable to parse url: {value}"
        INVALID_INTERVAL = "Unable to parse interval as integer: {value}"
        NON_POSITIVE_INTERVAL = "Interval must be a positive number of seconds: {value}"
        INVALID_TIMEOUT = "Unable to parse timeout as a positive integer: {value}"
        MISSING_REQUIRED = "Missing required argument(s): {flags}"
        
        def __str__(self) -> str:
            """Return the error message template"""
            return self.value
    
    class AuthError(str, Enum):
        """Authentication-related error message templates"""
        UNAUTHORIZED = (
            "Unauthorized (401). Verify that the API key is valid and has not expired."
        )
        FORBIDDEN = (
            "Forbidden (403). The API key is valid but lacks permission to export "
            "this app or object."
        )
        
        def __str__(self) -> str:
            """Return the error message template"""
            return self.value
    
    class NetworkError(str, Enum):
        """Network-related error message templates"""
        CONNECTION_FAILED = "Unable to reach {url}: {error}"
        TIMEOUT = "Request to {url} timed out after {timeout}s"
        HTTP_ERROR = "HTTP {status} from {method} {url}"
        MISSING_LOCATION = "Report request accepted but the response carried no Location header"
        INVALID_JSON = "Expected a JSON status document from {url}: {error}"
        SSL_ERROR = (
            "SSL certificate verification failed for {url}.\n"
            "If the tenant uses a self-signed certificate, add the -skipTls flag."
        )
        
        def __str__(self) -> str:
            """Return the error message template"""
            return self.value
    
    class JobError(str, Enum):
        """Export job error message templates"""
        FAILED = "Export job ended with status '{status}': {reason}"
        NO_RESULT = "Export job reported done but returned no result location"
        CANCELLED = "Export cancelled while waiting for {what}"
        
        def __str__(self) -> str:
            """Return the error message template"""
            return self.value
