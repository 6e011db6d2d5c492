"""
Run the storefront backend under uvicorn.
"""

from __future__ import annotations

import argparse
import logging

import uvicorn

from storefront.app import create_app
from storefront.config import get_settings

logger = logging.getLogger(__name__)


def main() -> int:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Storefront backend server")
    parser.add_argument(
        "--host",
        type=str,
        default=settings.host,
        help="Interface to bind",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=settings.port,
        help="Port to listen on",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="info",
        choices=["debug", "info", "warning", "error"],
        help="Log level for the app and uvicorn",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(name)s %(levelname)s %(asctime)s %(message)s",
        datefmt="%m/%d/%Y %I:%M:%S %p",
    )

    logger.info("Server is running on http://%s:%d", args.host, args.port)
    uvicorn.run(
        create_app(settings),
        host=args.host,
        port=args.port,
        log_level=args.log_level,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
