import functools
from typing import Any, Awaitable, Callable

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError

from core.api_response import api_response
from core.exceptions import AclError
from core.logging_config import get_logger

logger = get_logger(__name__)


def exception_handler(
    func: Callable[..., Awaitable[Any]],
) -> Callable[..., Awaitable[Any]]:
    """
    Wrap an endpoint so domain errors become API error envelopes.

    HTTPExceptions pass through to the application handler. ACL errors use
    their own status code. Database and unexpected errors are logged and
    answered with a 500.
    """

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)
        except HTTPException:
            raise
        except AclError as exc:
            return api_response(
                status_code=exc.status_code,
                message=exc.message,
                log_error=True,
            )
        except SQLAlchemyError as exc:
            logger.exception(f"Database error in {func.__name__}: {exc}")
            return api_response(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                message="A database error occurred.",
                log_error=True,
            )
        except Exception as exc:
            logger.exception(f"Unhandled error in {func.__name__}: {exc}")
            return api_response(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                message="An unexpected error occurred.",
                log_error=True,
            )

    return wrapper
