"""
Custom error classes for the application
"""

from typing import Optional


class AgentError(Exception):
    """Base exception for agent errors"""
    pass


class ConfigurationError(AgentError):
    """Missing or invalid startup configuration"""
    pass


class ValidationError(AgentError):
    """Turn input rejected before any model or backend call"""
    pass


class BackendError(AgentError):
    """Error talking to the Fliplet API"""
    pass


class BackendStatusError(BackendError):
    """Non-retryable HTTP status from the Fliplet API"""

    def __init__(self, status_code: int, reason: str, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"{status_code} {reason} - {body}")


class BackendRetryExhaustedError(BackendError):
    """Every attempt of a request hit a rate limit or a network fault"""

    def __init__(self, path: str, attempts: int, last_error: Optional[Exception] = None):
        self.path = path
        self.attempts = attempts
        self.last_error = last_error
        message = f"Failed after {attempts} attempts: {path}"
        if last_error is not None:
            message = f"{message} ({last_error})"
        super().__init__(message)


class ToolError(AgentError):
    """Error resolving or executing a tool invocation"""
    pass


class UnknownToolError(ToolError):
    """The model asked for a tool that is not in the catalog"""
    pass


class ToolInputError(ToolError):
    """A tool invocation is missing a required parameter"""
    pass
