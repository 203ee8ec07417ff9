"""
Error definitions for source URL resolution
"""

from enum import Enum


class FetchErrorType(Enum):
    """
    Categories of transport-level failures

    A FetchError means the answer is unknown, as opposed to a registry or
    hosting API that answered "not found"
    """

    TIMEOUT = "TIMEOUT"
    CONNECTION = "CONNECTION"
    AUTHENTICATION = "AUTHENTICATION"
    TRANSPORT = "TRANSPORT"


class FetchError(Exception):
    """
    Raised when a registry or hosting API request could not be completed
    """

    def __init__(self, error_type, message, url=None):
        """
        Args:
            error_type (FetchErrorType): Category of the failure
            message (str): Human-readable error description
            url (str): Optional URL of the request that failed
        """
        self.error_type = error_type
        self.url = url
        super().__init__(message)
