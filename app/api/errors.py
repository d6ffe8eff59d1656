"""
Translation of domain errors into HTTP responses.
"""
import logging

from fastapi import HTTPException, status

from app.core.exceptions import (
    GenerationError,
    JobGenieError,
    NotFoundError,
    StoreError,
    WebhookError,
)

logger = logging.getLogger(__name__)


def to_http_exception(error: JobGenieError) -> HTTPException:
    """
    Map a domain error onto the status code the client sees.

    Args:
        error: Error raised by a tracker or collaborator service

    Returns:
        HTTPException ready to raise from a route
    """
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
    if isinstance(error, (WebhookError, GenerationError)):
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(error))
    if isinstance(error, StoreError):
        logger.error(f"Store failure: {error}")
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to save changes: {error}",
        )
    logger.error(f"Unhandled domain error: {type(error).__name__}: {error}")
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(error))
