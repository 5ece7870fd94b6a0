"""
Caller identity for the recommendations API.

Authentication happens upstream; the gateway forwards the authenticated
user as X-User-Id / X-User-Role headers.
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header, HTTPException, status

CANDIDATE_ROLE = "student"


@dataclass
class CurrentUser:
    id: str
    role: str


def get_current_user(
    x_user_id: Optional[str] = Header(default=None),
    x_user_role: Optional[str] = Header(default=None),
) -> CurrentUser:
    """Resolve the caller, 401 when the gateway sent no identity."""
    if not x_user_id or not x_user_role:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return CurrentUser(id=x_user_id.strip(), role=x_user_role.strip().lower())


def require_role(*allowed_roles: str):
    """Dependency that only lets the given roles through (403 otherwise)."""

    def dependency(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if user.role not in allowed_roles:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
        return user

    return dependency
