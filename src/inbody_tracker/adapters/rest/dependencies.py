"""
FastAPI dependencies shared by all routers.

- get_factory(): the ServiceFactory installed by the app lifespan.
- get_current_user(): verifies the auth service's bearer JWT; 'sub' is the owner id.
"""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from inbody_tracker.application.context import SessionContext
from inbody_tracker.factory import ServiceFactory

# Module-level reference set by app lifespan
_factory: ServiceFactory | None = None


def set_factory(factory: ServiceFactory | None) -> None:
    global _factory
    _factory = factory


def get_factory() -> ServiceFactory:
    if _factory is None:
        raise RuntimeError("ServiceFactory not initialized.")
    return _factory


# --- JWT Bearer ---

_bearer_scheme = HTTPBearer()


@dataclass
class CurrentUser:
    """Extracted from JWT payload. Passed to route handlers."""
    owner_id: str
    role: str

    def session(self) -> SessionContext:
        return SessionContext(owner_id=self.owner_id, role=self.role)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(_bearer_scheme),
    factory: ServiceFactory = Depends(get_factory),
) -> CurrentUser:
    """Validate the auth service's JWT and return CurrentUser. Raises 401 on failure."""
    config = factory.config
    try:
        payload = jwt.decode(
            credentials.credentials,
            config.jwt_secret,
            algorithms=[config.jwt_algorithm],
            options={"verify_aud": False},
        )
    except JWTError:
        payload = {}

    owner_id = payload.get("sub")
    if not owner_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token.",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return CurrentUser(
        owner_id=str(owner_id),
        role=payload.get("role", "client"),
    )
