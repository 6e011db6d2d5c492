"""
Storage abstraction for Firestore and an in-memory fallback.

Handlers never talk to a backend directly. They go through ``StorageContext``,
which reports every document-store call as a ``StoreResult`` so the fallback to
the in-memory store is an explicit branch at the call site.
"""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Generic, Optional, Protocol, TypeVar

from google.cloud import firestore

from storefront.constants import (
    CREATED_AT_FIELD,
    ORDERS_COLLECTION,
    PRODUCTS_COLLECTION,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class StoreClient(Protocol):
    """Operations the API needs from a product/order store."""

    async def add_order(self, order: dict) -> str:
        ...

    async def list_products(self) -> list[dict]:
        ...

    async def add_product(self, product: dict) -> dict:
        ...

    async def delete_all_products(self) -> int:
        ...

    async def delete_product(self, product_id: str) -> None:
        ...


def generate_local_id() -> str:
    """Millisecond timestamp followed by a short random token."""
    return f"{int(time.time() * 1000)}{uuid.uuid4().hex[:6]}"


class InMemoryStoreClient:
    """Process-local collections used when Firestore is unavailable."""

    def __init__(self):
        self.orders: list[dict] = []
        # Newest first, mirroring the createdAt-descending Firestore query.
        self.products: list[dict] = []

    async def add_order(self, order: dict) -> str:
        order_id = generate_local_id()
        self.orders.append({**order, "id": order_id})
        return order_id

    async def list_products(self) -> list[dict]:
        return list(self.products)

    async def add_product(self, product: dict) -> dict:
        record = {**product, "id": generate_local_id()}
        self.products.insert(0, record)
        return record

    async def delete_all_products(self) -> int:
        removed = len(self.products)
        self.products.clear()
        return removed

    async def delete_product(self, product_id: str) -> None:
        for index, product in enumerate(self.products):
            if product.get("id") == product_id:
                del self.products[index]
                return


class FirestoreStoreClient:
    """
    Firestore-backed implementation over an async client.

    Documents are stored flat in the ``orders`` and ``products`` collections;
    identifiers are generated by Firestore.
    """

    def __init__(self, client: Any):
        self.client = client

    async def add_order(self, order: dict) -> str:
        _, doc_ref = await self.client.collection(ORDERS_COLLECTION).add(order)
        return doc_ref.id

    async def list_products(self) -> list[dict]:
        query = self.client.collection(PRODUCTS_COLLECTION).order_by(
            CREATED_AT_FIELD, direction=firestore.Query.DESCENDING
        )
        products = []
        async for doc in query.stream():
            products.append({**(doc.to_dict() or {}), "id": doc.id})
        return products

    async def add_product(self, product: dict) -> dict:
        _, doc_ref = await self.client.collection(PRODUCTS_COLLECTION).add(product)
        return {**product, "id": doc_ref.id}

    async def delete_all_products(self) -> int:
        batch = self.client.batch()
        removed = 0
        async for doc in self.client.collection(PRODUCTS_COLLECTION).stream():
            batch.delete(doc.reference)
            removed += 1
        await batch.commit()
        return removed

    async def delete_product(self, product_id: str) -> None:
        # Firestore treats deleting a missing document as success.
        await self.client.collection(PRODUCTS_COLLECTION).document(product_id).delete()


class StoreStatus(str, Enum):
    OK = "OK"
    UNAVAILABLE = "UNAVAILABLE"
    ERROR = "ERROR"


@dataclass
class StoreResult(Generic[T]):
    status: StoreStatus
    value: Optional[T] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is StoreStatus.OK


@dataclass
class StorageContext:
    """
    Storage selected once at startup.

    ``available`` never changes after construction; a failing call only
    affects the request that made it.
    """

    document: Optional[StoreClient] = None
    memory: InMemoryStoreClient = field(default_factory=InMemoryStoreClient)

    @property
    def available(self) -> bool:
        return self.document is not None

    @property
    def backend_name(self) -> str:
        return "Firestore" if self.available else "in-memory storage"

    async def attempt(
        self, operation: Callable[[StoreClient], Awaitable[T]]
    ) -> StoreResult[T]:
        if self.document is None:
            return StoreResult(StoreStatus.UNAVAILABLE)
        try:
            value = await operation(self.document)
        except Exception as exc:
            logger.error("Document store call failed: %s", exc)
            return StoreResult(StoreStatus.ERROR, error=str(exc))
        return StoreResult(StoreStatus.OK, value=value)
