"""
Admin gate for FastAPI routes.

Every ``/api/admin/*`` router depends on ``require_admin``: the caller must
send ``X-Admin-Key`` matching ``settings.ADMIN_API_KEY``.  An empty key
disables the check (local development).
"""
from __future__ import annotations

import hmac
import logging
from typing import Optional

from fastapi import Header, HTTPException, Request, status

from app.config import settings

logger = logging.getLogger(__name__)


async def require_admin(
    request: Request,
    x_admin_key: Optional[str] = Header(None, alias="X-Admin-Key"),
) -> None:
    """Reject the request with 401 unless the admin key matches."""
    expected = settings.ADMIN_API_KEY
    if not expected:
        return

    if not x_admin_key or not hmac.compare_digest(x_admin_key, expected):
        logger.warning("Rejected admin request %s %s: bad or missing X-Admin-Key", request.method, request.url.path)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing or invalid X-Admin-Key header.",
        )


def client_ip(request: Request) -> Optional[str]:
    """Best-effort client address (first X-Forwarded-For hop, else the socket peer)."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None
