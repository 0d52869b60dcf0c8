"""
Caller authorization.

Every protected route depends on require_roles(...), so the role check runs
before request bodies are processed or any service code is reached.
Callers present an API key in the X-API-Key header; only its SHA-256 hash is stored.
"""

import hashlib
import logging
import secrets
from dataclasses import dataclass
from typing import Optional, Tuple
from uuid import UUID

from fastapi import Depends, Security
from fastapi.security import APIKeyHeader
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from courierdesk.core.errors import AuthenticationRequired, PermissionDenied
from courierdesk.database import get_db
from courierdesk.models import ApiKey, Role, STAFF_ROLES

logger = logging.getLogger(__name__)

API_KEY_HEADER = "X-API-Key"
KEY_PREFIX_LENGTH = 8

api_key_header = APIKeyHeader(name=API_KEY_HEADER, auto_error=False)


@dataclass(frozen=True)
class Principal:
    """The authenticated caller."""
    key_id: UUID
    role: Role
    key_prefix: str
    user_code: Optional[str] = None
    label: Optional[str] = None

    @property
    def actor(self) -> str:
        """Name recorded in history and audit fields."""
        return self.label or f"{self.role.value}:{self.key_prefix}"


def hash_api_key(secret: str) -> str:
    return hashlib.sha256(secret.encode("utf-8")).hexdigest()


def generate_api_key() -> str:
    return f"cd_{secrets.token_urlsafe(32)}"


async def create_api_key(
    db: AsyncSession,
    role: Role,
    user_code: Optional[str] = None,
    label: Optional[str] = None,
    secret: Optional[str] = None,
) -> Tuple[ApiKey, str]:
    """
    Create an API key.
    
    Returns:
        (stored key record, plaintext secret); the secret is not recoverable later
    """
    secret = secret or generate_api_key()
    record = ApiKey(
        key_prefix=secret[:KEY_PREFIX_LENGTH],
        key_hash=hash_api_key(secret),
        role=role,
        user_code=user_code,
        label=label,
    )
    db.add(record)
    await db.flush()
    logger.info("Created %s API key %s", role.value, record.key_prefix)
    return record, secret


async def ensure_api_key(db: AsyncSession, secret: str, role: Role, label: str) -> None:
    """Create the key for a known secret unless it already exists."""
    result = await db.execute(select(ApiKey).where(ApiKey.key_hash == hash_api_key(secret)))
    if result.scalar_one_or_none() is None:
        await create_api_key(db, role, label=label, secret=secret)
        await db.commit()


async def authenticate(db: AsyncSession, secret: str) -> Principal:
    """Resolve an API key secret to a Principal."""
    result = await db.execute(
        select(ApiKey).where(ApiKey.key_hash == hash_api_key(secret))
    )
    record = result.scalar_one_or_none()
    if record is None or not record.is_active:
        raise AuthenticationRequired("Invalid API key")
    return Principal(
        key_id=record.id,
        role=record.role,
        key_prefix=record.key_prefix,
        user_code=record.user_code,
        label=record.label,
    )


def require_roles(*roles: Role):
    """
    Build a dependency that admits only callers holding one of the given roles.
    
    Missing or unknown keys fail with 401, a known key with the wrong role with 403.
    """
    allowed = frozenset(roles)

    async def dependency(
        api_key: Optional[str] = Security(api_key_header),
        db: AsyncSession = Depends(get_db),
    ) -> Principal:
        if not api_key:
            raise AuthenticationRequired(f"API key required in {API_KEY_HEADER} header")
        principal = await authenticate(db, api_key)
        if principal.role not in allowed:
            raise PermissionDenied(
                f"Role '{principal.role.value}' may not perform this operation"
            )
        return principal

    return dependency


require_staff = require_roles(*STAFF_ROLES)
require_admin = require_roles(Role.ADMIN)
require_customer = require_roles(Role.CUSTOMER)
