"""
Error taxonomy for the Salesforce opportunity pipeline.

Every error carries an HTTP-style status code and a short tag so the
web layer can turn it into the JSON error envelope without inspecting
the message.
"""

from typing import Any, Dict, Optional


class PipelineError(Exception):
    """Base class for errors that abort a pipeline run"""

    status_code = 500
    code = "UNKNOWN_ERROR"

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> Dict[str, Any]:
        """Error envelope returned to the dashboard"""
        return {
            "success": False,
            "error": self.message,
            "code": self.code
        }


class ConfigError(PipelineError):
    """Raised when required Salesforce configuration is missing"""

    status_code = 500
    code = "CONFIG_ERROR"


class AuthError(PipelineError):
    """Raised when the OAuth token exchange is rejected"""

    status_code = 401
    code = "AUTH_ERROR"


class QueryError(PipelineError):
    """Raised when the query endpoint rejects a page request"""

    status_code = 500
    code = "QUERY_ERROR"
