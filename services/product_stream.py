from typing import Dict, List, Optional

from fastapi import status
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.responses import JSONResponse

from core.api_response import api_response
from core.logging_config import get_logger
from db.models.product_stream import ProductStream, ProductStreamFilter
from schemas.product_stream import (
    ProductStreamCreate,
    ProductStreamDetails,
    ProductStreamFilterInput,
    ProductStreamFilterNode,
)
from utils.id_generators import generate_hex_id

logger = get_logger(__name__)


def flatten_filters(
    stream_id: str,
    filters: List[ProductStreamFilterInput],
    parent_id: Optional[str] = None,
) -> List[ProductStreamFilter]:
    """Turn a nested filter payload into rows, parents before their queries."""
    rows: List[ProductStreamFilter] = []
    for index, item in enumerate(filters):
        row = ProductStreamFilter(
            id=generate_hex_id(),
            product_stream_id=stream_id,
            parent_id=parent_id,
            type=item.type,
            field=item.field,
            operator=item.operator,
            value=item.value,
            parameters=item.parameters,
            position=item.position if item.position is not None else index,
            custom_fields=item.custom_fields,
        )
        rows.append(row)
        rows.extend(flatten_filters(stream_id, item.queries, parent_id=row.id))
    return rows


def build_filter_tree(rows: List[ProductStreamFilter]) -> List[ProductStreamFilterNode]:
    nodes: Dict[str, ProductStreamFilterNode] = {
        row.id: ProductStreamFilterNode(
            id=row.id,
            parent_id=row.parent_id,
            type=row.type,
            field=row.field,
            operator=row.operator,
            value=row.value,
            parameters=row.parameters,
            position=row.position,
            custom_fields=row.custom_fields,
        )
        for row in rows
    }

    roots: List[ProductStreamFilterNode] = []
    for node in nodes.values():
        parent = nodes.get(node.parent_id) if node.parent_id else None
        if parent is None:
            roots.append(node)
        else:
            parent.queries.append(node)

    def _sort(children: List[ProductStreamFilterNode]) -> None:
        children.sort(key=lambda n: n.position)
        for child in children:
            _sort(child.queries)

    _sort(roots)
    return roots


def _not_found() -> JSONResponse:
    return api_response(
        status_code=status.HTTP_404_NOT_FOUND,
        message="Product stream not found.",
        log_error=True,
    )


async def create_product_stream(
    db: AsyncSession, payload: ProductStreamCreate
) -> ProductStreamDetails:
    stream = ProductStream(
        id=generate_hex_id(),
        name=payload.name,
        description=payload.description,
        invalid=False,
    )
    db.add(stream)
    await db.flush()

    rows = flatten_filters(stream.id, payload.filters)
    db.add_all(rows)
    await db.commit()
    logger.info(f"Created product stream {stream.id} with {len(rows)} filters")

    return ProductStreamDetails(
        id=stream.id,
        name=stream.name,
        description=stream.description,
        invalid=stream.invalid,
        filters=build_filter_tree(rows),
    )


async def get_product_stream(
    db: AsyncSession, stream_id: str
) -> JSONResponse | ProductStreamDetails:
    stream = await db.get(ProductStream, stream_id)
    if stream is None:
        return _not_found()

    result = await db.execute(
        select(ProductStreamFilter)
        .where(ProductStreamFilter.product_stream_id == stream_id)
        .order_by(ProductStreamFilter.position)
    )
    return ProductStreamDetails(
        id=stream.id,
        name=stream.name,
        description=stream.description,
        invalid=stream.invalid,
        filters=build_filter_tree(list(result.scalars().all())),
    )


async def delete_product_stream(
    db: AsyncSession, stream_id: str
) -> JSONResponse | None:
    stream = await db.get(ProductStream, stream_id)
    if stream is None:
        return _not_found()

    await db.execute(
        delete(ProductStreamFilter).where(
            ProductStreamFilter.product_stream_id == stream_id
        )
    )
    await db.execute(delete(ProductStream).where(ProductStream.id == stream_id))
    await db.commit()
    logger.info(f"Deleted product stream {stream_id}")
    return None
