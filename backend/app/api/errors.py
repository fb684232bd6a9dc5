"""
Domain error to HTTP error mapping shared by the routers
"""
import logging

from fastapi import HTTPException

from app.core.exceptions import DukaanError, InsufficientInventoryError

logger = logging.getLogger(__name__)


def to_http_exception(error: DukaanError) -> HTTPException:
    """HTTPException carrying the error's status code and message"""
    if error.status_code >= 500:
        logger.error(f"{type(error).__name__}: {error}")
    else:
        logger.info(f"{type(error).__name__}: {error}")

    if isinstance(error, InsufficientInventoryError):
        return HTTPException(
            status_code=error.status_code,
            detail={
                "message": str(error),
                "out_of_stock_items": [item.model_dump() for item in error.out_of_stock_items],
            },
        )

    return HTTPException(status_code=error.status_code, detail=str(error))
