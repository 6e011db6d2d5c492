"""
Resolve Firestore service-account credentials from the environment or disk.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

from storefront.config import Settings


class CredentialsError(ValueError):
    """Raised when a credentials source exists but cannot be used."""


def _parse(raw: str, source: str) -> dict:
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise CredentialsError(f"{source} is not valid JSON: {exc}") from exc
    if not isinstance(parsed, dict):
        raise CredentialsError(f"{source} must contain a JSON object")
    return parsed


def resolve_credentials(settings: Settings) -> Optional[dict]:
    """
    Return the service-account mapping, or None when no source is configured.

    FIREBASE_SERVICE_ACCOUNT takes precedence; the local key file is used for
    development when the variable is unset.
    """
    if settings.firebase_service_account:
        return _parse(settings.firebase_service_account, "FIREBASE_SERVICE_ACCOUNT")

    path = Path(settings.firebase_credentials_path)
    if not path.is_file():
        return None
    return _parse(path.read_text(encoding="utf-8"), str(path))
