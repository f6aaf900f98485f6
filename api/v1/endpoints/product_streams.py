from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.responses import JSONResponse

from api.dependencies import require_privileges
from core.api_response import api_response
from db.sessions.database import get_db
from schemas.product_stream import ProductStreamCreate, ProductStreamDetails
from services.product_stream import (
    create_product_stream,
    delete_product_stream,
    get_product_stream,
)
from utils.exception_handlers import exception_handler

router = APIRouter()


@router.post(
    "",
    response_model=ProductStreamDetails,
    status_code=status.HTTP_201_CREATED,
    dependencies=[
        Depends(require_privileges("product_stream:create", "product_stream_filter:create"))
    ],
)
@exception_handler
async def create_stream(
    payload: ProductStreamCreate,
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    """Create a product stream together with its nested filter tree."""
    result = await create_product_stream(db=db, payload=payload)
    return api_response(
        status_code=status.HTTP_201_CREATED,
        message="Product stream created successfully.",
        data=result.model_dump(),
    )


@router.get(
    "/{stream_id}",
    response_model=ProductStreamDetails,
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_privileges("product_stream:read"))],
)
@exception_handler
async def get_stream(
    stream_id: str = Path(..., description="Product stream ID"),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    result = await get_product_stream(db=db, stream_id=stream_id)

    if isinstance(result, JSONResponse):
        return result

    return api_response(
        status_code=status.HTTP_200_OK,
        message="Product stream retrieved successfully.",
        data=result.model_dump(),
    )


@router.delete(
    "/{stream_id}",
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_privileges("product_stream:delete"))],
)
@exception_handler
async def delete_stream(
    stream_id: str = Path(..., description="Product stream ID"),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    result = await delete_product_stream(db=db, stream_id=stream_id)

    if isinstance(result, JSONResponse):
        return result

    return api_response(
        status_code=status.HTTP_200_OK,
        message="Product stream deleted successfully.",
    )
