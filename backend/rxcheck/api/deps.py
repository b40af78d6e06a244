from fastapi import HTTPException, Request, status

from rxcheck.core.errors import AnalysisError, InputError
from rxcheck.services.session import AnalysisSession


def get_session(request: Request) -> AnalysisSession:
    return request.app.state.session


def to_http_error(error: AnalysisError) -> HTTPException:
    """InputError is the caller's fault; every other analysis failure is an upstream one."""
    if isinstance(error, InputError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error.message)
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=error.message)
