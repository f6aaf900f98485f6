import logging
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi.encoders import jsonable_encoder
from starlette.responses import JSONResponse

logger = logging.getLogger(__name__)


def api_response(
    status_code: int,
    message: str,
    data: Optional[Any] = None,
    log_error: bool = False,
) -> JSONResponse:
    """
    Build the uniform JSON envelope returned by every endpoint.

    Error responses (status >= 400, or ``log_error``) are logged at ERROR,
    everything else at INFO.
    """
    content: dict[str, Any] = {
        "statusCode": status_code,
        "message": message,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    if data is not None:
        content["data"] = jsonable_encoder(data)

    log_message = f"API Response - Code: {status_code}, Message: {message}"
    if log_error or status_code >= 400:
        logger.error(log_message)
    else:
        logger.info(log_message)

    return JSONResponse(status_code=status_code, content=content)
