import logging

from fastapi import HTTPException, status

from app.services.errors import ServiceError

logger = logging.getLogger(__name__)


def to_http_error(exc: Exception) -> HTTPException:
    if isinstance(exc, ServiceError):
        detail = exc.message
        if exc.details is not None:
            detail = {"message": exc.message, "details": exc.details}
        return HTTPException(status_code=exc.status_code, detail=detail)

    logger.error(f"Unhandled error: {exc}", exc_info=exc)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error")
