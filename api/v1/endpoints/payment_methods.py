from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.responses import JSONResponse

from api.dependencies import require_privileges
from core.api_response import api_response
from db.sessions.database import get_db
from schemas.payment_method import PaymentMethodCreate, PaymentMethodUpdate
from services.payment_method import (
    create_payment_method,
    delete_payment_method,
    get_payment_method,
    list_payment_methods,
    update_payment_method,
)
from utils.exception_handlers import exception_handler

router = APIRouter()


@router.get(
    "",
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_privileges("payment_method:read"))],
)
@exception_handler
async def get_payment_methods(db: AsyncSession = Depends(get_db)) -> JSONResponse:
    methods = await list_payment_methods(db=db)
    return api_response(
        status_code=status.HTTP_200_OK,
        message="Payment methods retrieved successfully.",
        data=[method.model_dump() for method in methods],
    )


@router.get(
    "/{payment_method_id}",
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_privileges("payment_method:read"))],
)
@exception_handler
async def get_payment_method_by_id(
    payment_method_id: str = Path(..., description="Payment method ID"),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    result = await get_payment_method(db=db, payment_method_id=payment_method_id)

    if isinstance(result, JSONResponse):
        return result

    return api_response(
        status_code=status.HTTP_200_OK,
        message="Payment method retrieved successfully.",
        data=result.model_dump(),
    )


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_privileges("payment_method:create"))],
)
@exception_handler
async def create_payment_method_entry(
    payload: PaymentMethodCreate,
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    result = await create_payment_method(db=db, payload=payload)
    return api_response(
        status_code=status.HTTP_201_CREATED,
        message="Payment method created successfully.",
        data=result.model_dump(),
    )


@router.patch(
    "/{payment_method_id}",
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_privileges("payment_method:update"))],
)
@exception_handler
async def update_payment_method_by_id(
    payload: PaymentMethodUpdate,
    payment_method_id: str = Path(..., description="Payment method ID"),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    result = await update_payment_method(
        db=db, payment_method_id=payment_method_id, payload=payload
    )

    if isinstance(result, JSONResponse):
        return result

    return api_response(
        status_code=status.HTTP_200_OK,
        message="Payment method updated successfully.",
        data=result.model_dump(),
    )


@router.delete(
    "/{payment_method_id}",
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_privileges("payment_method:delete"))],
)
@exception_handler
async def delete_payment_method_by_id(
    payment_method_id: str = Path(..., description="Payment method ID"),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    result = await delete_payment_method(db=db, payment_method_id=payment_method_id)

    if isinstance(result, JSONResponse):
        return result

    return api_response(
        status_code=status.HTTP_200_OK,
        message="Payment method deleted successfully.",
    )
