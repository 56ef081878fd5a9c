"""Cache API dependencies.

ONLY FastAPI dependency injection - resolves the cache service of the
running application and enforces the admin-only access rule.
"""

from enum import Enum
from typing import TYPE_CHECKING, Annotated, Optional

from fastapi import Depends, HTTPException, Request, status

if TYPE_CHECKING:
    from ..service import CacheService


class UserRole(str, Enum):
    """Dashboard role hierarchy, highest first."""
    SUPER_ADMIN = "SuperAdmin"
    ADMIN = "Admin"
    STAFF = "Staff"
    PARTNER = "Partner"
    AGENT = "Agent"
    USER = "User"


CACHE_ADMIN_ROLES = frozenset({UserRole.SUPER_ADMIN, UserRole.ADMIN})


async def get_cache_service(request: Request) -> "CacheService":
    """Get the cache service stored on the application state."""
    service = getattr(request.app.state, "cache_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Cache service is not initialized",
        )
    return service


def get_user_role(request: Request) -> Optional[str]:
    """Role attached to the request by upstream authentication."""
    return getattr(request.state, "user_role", None)


async def require_cache_admin(
    role: Annotated[Optional[str], Depends(get_user_role)]
) -> UserRole:
    """Allow only SuperAdmin and Admin.

    Raises:
        HTTPException: 401 without a role, 403 for any other role
    """
    if not role:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )

    try:
        user_role = UserRole(role)
    except ValueError:
        user_role = None

    if user_role not in CACHE_ADMIN_ROLES:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Insufficient permissions. Only SuperAdmin and Admin can access cache statistics.",
        )
    return user_role
