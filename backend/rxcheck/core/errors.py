"""
Error taxonomy shared by both analyzers.

InputError       - no drugs supplied
ServiceError     - transport failure or non-success HTTP status from an upstream
DataFormatError  - response body does not parse as the expected JSON/schema
UpstreamError    - upstream answered but returned no usable payload
"""

from typing import Optional


class AnalysisError(Exception):
    """Base class; the message is shown to the user as-is."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class InputError(AnalysisError):
    pass


class ServiceError(AnalysisError):

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class DataFormatError(AnalysisError):
    pass


class UpstreamError(AnalysisError):
    pass
