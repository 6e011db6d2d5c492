"""
Storefront backend package.

This package provides a FastAPI application for order intake and a small
product catalog, persisted to Firestore with an in-memory fallback when
Firestore is not reachable.
"""
