"""
HTTP routes for the storefront API.
"""

from __future__ import annotations

import json
import logging
import math
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import ValidationError

from storefront.auth import require_admin
from storefront.constants import (
    CREATED_AT_FIELD,
    ORDER_INITIAL_STATUS,
    STATUS_FIELD,
)
from storefront.db import StorageContext, StoreStatus
from storefront.dependencies import get_storage
from storefront.schemas import MessageResponse, OrderCreatedResponse, ProductPayload

logger = logging.getLogger(__name__)

router = APIRouter()


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _finite_float(raw: str) -> float:
    value = float(raw)
    if not math.isfinite(value):
        raise ValueError(f"non-finite number: {raw}")
    return value


def _reject_constant(raw: str) -> float:
    raise ValueError(f"non-finite number: {raw}")


async def _read_json(request: Request) -> Any:
    """
    Return the decoded body, or None when it is empty or not JSON.

    NaN, Infinity and overflowing numbers count as invalid JSON; they cannot
    be written back out in a response.
    """
    try:
        return json.loads(
            await request.body(),
            parse_float=_finite_float,
            parse_constant=_reject_constant,
        )
    except ValueError:
        return None


@router.post("/create-order", response_model=OrderCreatedResponse)
async def create_order(
    request: Request, storage: StorageContext = Depends(get_storage)
):
    logger.info("Received a new order request")
    order = await _read_json(request)
    if not isinstance(order, dict):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Order payload must be a JSON object.",
        )

    order[CREATED_AT_FIELD] = _now()
    order[STATUS_FIELD] = ORDER_INITIAL_STATUS

    if not storage.available:
        order_id = await storage.memory.add_order(order)
        logger.info("Order stored in memory with ID: %s", order_id)
        return OrderCreatedResponse(
            message="Order received and stored in memory.", orderId=order_id
        )

    # Store errors on this path are surfaced, not absorbed into memory.
    result = await storage.attempt(lambda db: db.add_order(order))
    if not result.ok:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save order.",
        )
    logger.info("Order saved to Firestore with ID: %s", result.value)
    return OrderCreatedResponse(
        message="Order received and saved successfully!", orderId=result.value
    )


@router.get("/products")
async def list_products(storage: StorageContext = Depends(get_storage)):
    result = await storage.attempt(lambda db: db.list_products())
    if result.ok:
        return result.value
    if result.status is StoreStatus.ERROR:
        logger.warning("Serving in-memory products after store error")
    return await storage.memory.list_products()


@router.post(
    "/admin/products",
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def add_product(
    request: Request, storage: StorageContext = Depends(get_storage)
):
    body = await _read_json(request)
    try:
        payload = ProductPayload.model_validate(body)
    except ValidationError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Product name and numeric price are required.",
        )

    product = payload.model_dump()
    product[CREATED_AT_FIELD] = _now()

    result = await storage.attempt(lambda db: db.add_product(dict(product)))
    if result.ok:
        logger.info("Product saved to Firestore with ID: %s", result.value["id"])
        return result.value

    record = await storage.memory.add_product(product)
    logger.info("Product stored in memory with ID: %s", record["id"])
    return record


@router.delete(
    "/admin/products",
    response_model=MessageResponse,
    dependencies=[Depends(require_admin)],
)
async def delete_all_products(storage: StorageContext = Depends(get_storage)):
    result = await storage.attempt(lambda db: db.delete_all_products())
    if result.status is StoreStatus.ERROR:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete products.",
        )
    if result.status is StoreStatus.UNAVAILABLE:
        removed = await storage.memory.delete_all_products()
    else:
        removed = result.value
    logger.info("Deleted %d products from %s", removed, storage.backend_name)
    return MessageResponse(message="All products deleted.")


@router.delete(
    "/admin/products/{product_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_admin)],
)
async def delete_product(
    product_id: str, storage: StorageContext = Depends(get_storage)
):
    result = await storage.attempt(lambda db: db.delete_product(product_id))
    if result.status is StoreStatus.ERROR:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete product.",
        )
    if result.status is StoreStatus.UNAVAILABLE:
        await storage.memory.delete_product(product_id)
    logger.info("Deleted product %s from %s", product_id, storage.backend_name)
    return MessageResponse(message="Product deleted.")
