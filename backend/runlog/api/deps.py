from typing import Optional

from fastapi import Header, HTTPException


def get_current_user(authorization: Optional[str] = Header(None)) -> str:
    """Resolve the caller from a bearer token.

    The reference API has no user store; the token itself identifies the user.
    """
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(status_code=401, detail="Authentication required")
    return token.strip()
