"""
Request dependencies shared by the route modules.
"""
from typing import Optional
from fastapi import Header, HTTPException, Query, status
from pydantic import ValidationError
from journaloo.core.security import decode_access_token
from journaloo.schemas.user import TokenClaims

BEARER_PREFIX = "bearer "


def _unauthorized() -> HTTPException:
    # Same response for every failure so clients cannot tell the causes apart
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated"
    )


async def get_current_user(authorization: Optional[str] = Header(None)) -> TokenClaims:
    """
    Resolve the caller's identity from the Authorization header.

    The header carries the raw token; a leading "Bearer " is accepted too.
    """
    if not authorization:
        raise _unauthorized()

    token = authorization.strip()
    if token.lower().startswith(BEARER_PREFIX):
        token = token[len(BEARER_PREFIX):].strip()

    payload = decode_access_token(token)
    if not payload:
        raise _unauthorized()

    try:
        return TokenClaims(**payload)
    except ValidationError:
        raise _unauthorized()


async def get_page(page: int = Query(0, description="Zero-based page number")) -> int:
    """Page query parameter. Negative pages are rejected rather than clamped."""
    if page < 0:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Page must be a non-negative integer"
        )
    return page
