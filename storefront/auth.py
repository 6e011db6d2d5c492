"""
Shared-secret guard for the catalog admin routes.
"""

from __future__ import annotations

import logging
import secrets

from fastapi import Depends, Header, HTTPException, status

from storefront.config import Settings
from storefront.constants import ADMIN_SECRET_HEADER
from storefront.dependencies import get_app_settings

logger = logging.getLogger(__name__)


def check_admin_secret(expected: str | None, supplied: str | None) -> None:
    if not expected:
        logger.warning("Rejected admin request: ADMIN_SECRET is not configured")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Admin endpoints are disabled.",
        )
    if supplied is None or not secrets.compare_digest(
        supplied.encode("utf-8"), expected.encode("utf-8")
    ):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized.",
        )


async def require_admin(
    x_admin_secret: str | None = Header(default=None, alias=ADMIN_SECRET_HEADER),
    settings: Settings = Depends(get_app_settings),
) -> None:
    check_admin_secret(settings.admin_secret, x_admin_secret)
