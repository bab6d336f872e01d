# This project was developed with assistance from AI tools.
"""
Request identity dependency.

Authentication happens upstream: the gateway in front of this service
validates the session and forwards the caller's identity in the
``X-User-Id`` / ``X-User-Role`` headers.  This module only reads them so
reviews and loan creation can record who acted.

Set AUTH_DISABLED=true to act as a dev admin without headers (tests / local dev).
"""

import logging
from typing import Annotated

from db.enums import UserRole
from fastapi import Depends, HTTPException, Request, status

from ..core.config import settings
from ..schemas.auth import UserContext

logger = logging.getLogger(__name__)

USER_ID_HEADER = "x-user-id"
USER_ROLE_HEADER = "x-user-role"
USER_NAME_HEADER = "x-user-name"

_DISABLED_USER = UserContext(
    user_id="dev-user",
    role=UserRole.ADMIN,
    name="Dev User",
)


def _resolve_role(raw: str | None) -> UserRole:
    """Map the forwarded role header onto a UserRole, defaulting to loan officer."""
    if not raw:
        return UserRole.LOAN_OFFICER
    try:
        return UserRole(raw.strip().lower())
    except ValueError:
        logger.warning("Unknown role header %r, treating as loan_officer", raw)
        return UserRole.LOAN_OFFICER


async def get_current_user(request: Request) -> UserContext:
    """FastAPI dependency: return the caller's identity from gateway headers.

    When AUTH_DISABLED=true, returns a dev admin user without reading headers.
    """
    if settings.AUTH_DISABLED:
        return _DISABLED_USER

    user_id = request.headers.get(USER_ID_HEADER)
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing caller identity",
        )

    return UserContext(
        user_id=user_id,
        role=_resolve_role(request.headers.get(USER_ROLE_HEADER)),
        name=request.headers.get(USER_NAME_HEADER, ""),
    )


# Type alias for use in route signatures
CurrentUser = Annotated[UserContext, Depends(get_current_user)]
