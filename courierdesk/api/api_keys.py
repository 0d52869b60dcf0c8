"""
API key management (admin only).
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from courierdesk.core.security import Principal, create_api_key, require_admin
from courierdesk.database import get_db
from courierdesk.schemas.auth import ApiKeyCreateRequest, ApiKeyCreatedResponse
from courierdesk.services.customer_service import get_customer

router = APIRouter(prefix="/api-keys", tags=["API Keys"])


@router.post(
    "",
    response_model=ApiKeyCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Issue an API key",
    description="The plaintext key is only shown in this response.",
)
async def issue_api_key(
    request: ApiKeyCreateRequest,
    principal: Principal = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> ApiKeyCreatedResponse:
    if request.user_code:
        # customer keys must point at a real customer
        await get_customer(db, request.user_code)
    record, secret = await create_api_key(
        db, request.role, user_code=request.user_code, label=request.label
    )
    await db.commit()
    return ApiKeyCreatedResponse(
        id=record.id,
        key=secret,
        key_prefix=record.key_prefix,
        role=record.role,
        user_code=record.user_code,
        label=record.label,
    )
