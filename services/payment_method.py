from typing import List

from fastapi import status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.responses import JSONResponse

from core.api_response import api_response
from core.logging_config import get_logger
from db.models.payment import PaymentMethod
from schemas.payment_method import (
    PaymentMethodCreate,
    PaymentMethodDetails,
    PaymentMethodUpdate,
)
from utils.id_generators import generate_digits_letters

logger = get_logger(__name__)


def _details(method: PaymentMethod) -> PaymentMethodDetails:
    return PaymentMethodDetails(
        payment_method_id=method.payment_method_id,
        name=method.name,
        description=method.description,
        position=method.position,
        active=method.active,
    )


def _not_found() -> JSONResponse:
    return api_response(
        status_code=status.HTTP_404_NOT_FOUND,
        message="Payment method not found.",
        log_error=True,
    )


async def list_payment_methods(db: AsyncSession) -> List[PaymentMethodDetails]:
    result = await db.execute(
        select(PaymentMethod).order_by(PaymentMethod.position, PaymentMethod.name)
    )
    return [_details(method) for method in result.scalars().all()]


async def get_payment_method(
    db: AsyncSession, payment_method_id: str
) -> JSONResponse | PaymentMethodDetails:
    method = await db.get(PaymentMethod, payment_method_id)
    if method is None:
        return _not_found()
    return _details(method)


async def create_payment_method(
    db: AsyncSession, payload: PaymentMethodCreate
) -> PaymentMethodDetails:
    method = PaymentMethod(
        payment_method_id=generate_digits_letters(),
        name=payload.name,
        description=payload.description,
        position=payload.position,
        active=payload.active,
    )
    db.add(method)
    await db.commit()
    logger.info(f"Created payment method {method.payment_method_id} '{method.name}'")
    return _details(method)


async def update_payment_method(
    db: AsyncSession, payment_method_id: str, payload: PaymentMethodUpdate
) -> JSONResponse | PaymentMethodDetails:
    method = await db.get(PaymentMethod, payment_method_id)
    if method is None:
        return _not_found()

    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(method, field, value)

    await db.commit()
    await db.refresh(method)
    return _details(method)


async def delete_payment_method(
    db: AsyncSession, payment_method_id: str
) -> JSONResponse | None:
    method = await db.get(PaymentMethod, payment_method_id)
    if method is None:
        return _not_found()

    await db.delete(method)
    await db.commit()
    logger.info(f"Deleted payment method {payment_method_id}")
    return None
