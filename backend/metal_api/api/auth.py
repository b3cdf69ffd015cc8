"""Admin Authentication — bearer-token dependency producing the current user.

Invariants:
    - Missing, malformed or unknown tokens raise AuthenticationError (401 envelope)
    - CurrentUser is immutable; routes read user.id for added_by/updated_by

Usage:
    @router.post("/create")
    async def add_metal(user: CurrentUser = Depends(get_current_user)):
        ...
"""

from dataclasses import dataclass
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from metal_api.config import get_settings
from metal_api.core.errors import AuthenticationError

# auto_error=False: a missing header becomes our 401 envelope, not FastAPI's 403
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True, slots=True)
class CurrentUser:
    """Authenticated admin."""
    id: UUID


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> CurrentUser:
    """Resolve the bearer token against the configured admin tokens."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError()
    user_id = get_settings().api_tokens.get(credentials.credentials)
    if user_id is None:
        raise AuthenticationError()
    return CurrentUser(id=user_id)
