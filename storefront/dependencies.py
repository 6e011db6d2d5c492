"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

import logging

import firebase_admin
from fastapi import Request
from firebase_admin import credentials, firestore_async

from storefront.config import Settings
from storefront.credentials import resolve_credentials
from storefront.db import FirestoreStoreClient, StorageContext

logger = logging.getLogger(__name__)


def _connect_firestore(service_account: dict) -> FirestoreStoreClient:
    cert = credentials.Certificate(service_account)
    try:
        firebase_app = firebase_admin.get_app()
    except ValueError:
        firebase_app = firebase_admin.initialize_app(cert)
    return FirestoreStoreClient(firestore_async.client(firebase_app))


def select_storage(settings: Settings) -> StorageContext:
    """
    Pick the storage backend for the lifetime of the process.

    Any failure while loading credentials or initialising Firebase leaves the
    service running on the in-memory store.
    """
    if settings.use_in_memory_backends:
        logger.info("In-memory backends forced by configuration")
        return StorageContext()

    try:
        service_account = resolve_credentials(settings)
        if service_account is None:
            logger.warning(
                "No Firestore credentials found; using in-memory storage"
            )
            return StorageContext()
        document = _connect_firestore(service_account)
    except Exception as exc:
        logger.warning(
            "Firestore initialisation failed, using in-memory storage: %s", exc
        )
        return StorageContext()

    logger.info("Connected to Firestore")
    return StorageContext(document=document)


def get_storage(request: Request) -> StorageContext:
    """Return the storage context selected when the app started."""
    state = request.app.state
    if state.storage is None:
        state.storage = select_storage(state.settings)
    return state.storage


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
