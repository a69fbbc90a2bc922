"""
Authentication and authorization gates for the FastAPI API.

Callers present an API key as a Bearer token. Keys listed in ``API_KEYS`` belong
to ordinary callers; keys listed in ``ADMIN_API_KEYS`` belong to administrators.
The gates are dependencies and compose per route:

    require_authenticated -> require_admin
"""

import secrets
from typing import Dict, List, Optional

import structlog
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel, Field

from api.config import config

logger = structlog.get_logger(__name__)

ROLE_USER = "user"
ROLE_ADMIN = "admin"

# Missing credentials are reported by require_authenticated, not by the scheme
security = HTTPBearer(auto_error=False)


class Caller(BaseModel):
    """Identity resolved from a request's API key."""
    api_key: str = Field(..., description="API key presented by the caller")
    role: str = Field(..., description="Caller role (user or admin)")

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


def _mask(api_key: str) -> str:
    return api_key[:6] + "..."


class APIKeyManager:
    """Resolves API keys against the configured key lists."""

    @staticmethod
    def parse_keys(raw: str) -> List[str]:
        """Split a comma-separated key list, dropping blanks."""
        if not raw:
            return []
        return [key.strip() for key in raw.split(",") if key.strip()]

    @staticmethod
    def configured_keys() -> Dict[str, List[str]]:
        """Configured keys grouped by role."""
        return {
            ROLE_ADMIN: APIKeyManager.parse_keys(config.admin_api_keys),
            ROLE_USER: APIKeyManager.parse_keys(config.api_keys),
        }

    @staticmethod
    def resolve(api_key: str) -> Optional[Caller]:
        """
        Resolve an API key to a caller.

        Admin keys are checked first, so a key listed in both lists is an admin.

        Args:
            api_key: Key taken from the Authorization header

        Returns:
            Caller if the key is configured, None otherwise
        """
        for role, keys in APIKeyManager.configured_keys().items():
            if any(secrets.compare_digest(api_key.encode(), key.encode()) for key in keys):
                return Caller(api_key=api_key, role=role)
        return None


async def require_authenticated(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Caller:
    """
    Resolve the caller from the Bearer token.

    Raises:
        HTTPException: 401 if the token is missing or unknown
    """
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    caller = APIKeyManager.resolve(credentials.credentials)
    if caller is None:
        logger.warning("Invalid API key attempted", api_key=_mask(credentials.credentials))
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid API key",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return caller


async def require_admin(caller: Caller = Depends(require_authenticated)) -> Caller:
    """
    Allow only administrators through.

    Raises:
        HTTPException: 403 if the caller is authenticated but not an admin
    """
    if not caller.is_admin:
        logger.warning("Admin access denied", api_key=_mask(caller.api_key), role=caller.role)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return caller
