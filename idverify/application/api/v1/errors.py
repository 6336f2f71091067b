"""Centralized error transformation for API routes.

Maps idverify errors (domain and infrastructure) to HTTPException responses.
"""

from typing import Any

from fastapi import HTTPException

from idverify.domain.shared.error import (
    AuthenticationError,
    DomainError,
    IdVerifyError,
    ValidationError,
)

DOMAIN_ERROR_STATUS_MAP: dict[type[DomainError], int] = {
    ValidationError: 422,
    AuthenticationError: 401,
}


def map_error(error: IdVerifyError) -> HTTPException:
    """Map an idverify error to an HTTPException.

    Args:
        error: The error to map.

    Returns:
        HTTPException with appropriate status code and detail.
    """
    detail: dict[str, Any] = {
        "code": error.code,
        "message": error.message,
    }

    if isinstance(error, AuthenticationError):
        # Rejections keep the identity authority's status
        if error.status_code == 401:
            return HTTPException(
                status_code=401,
                detail=detail,
                headers={"WWW-Authenticate": "Bearer"},
            )
        if not 400 <= error.status_code < 600:
            # Only error statuses may carry a rejection body
            return HTTPException(status_code=502, detail=detail)
        return HTTPException(status_code=error.status_code, detail=detail)

    if isinstance(error, DomainError):
        status_code = DOMAIN_ERROR_STATUS_MAP.get(type(error), 400)
        if isinstance(error, ValidationError):
            detail["field"] = error.field
        return HTTPException(status_code=status_code, detail=detail)

    # Hard failures: transport, malformed responses, header faults, bad config
    detail["message"] = "Internal server error"
    return HTTPException(status_code=500, detail=detail)
