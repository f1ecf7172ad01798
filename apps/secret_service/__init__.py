"""
Secret Service FastAPI Application.

This module provides REST API endpoints for:
- Storing client-encrypted secrets with a TTL
- Reading each secret exactly once
- Backend health checks

Every route is rate limited per client address.
"""
