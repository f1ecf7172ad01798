"""
Apps package - FastAPI services for the one-time secret platform.

This package contains:
- secret_service: HTTP API over the secret store and rate limiter
"""
