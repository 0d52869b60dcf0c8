"""
Customers API endpoints (staff).
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from courierdesk.core.security import Principal, require_staff
from courierdesk.database import get_db
from courierdesk.schemas.customer import (
    CustomerCreateRequest,
    CustomerResponse,
    CustomerListResponse,
)
from courierdesk.services import customer_service

router = APIRouter(prefix="/customers", tags=["Customers"])


@router.post(
    "",
    response_model=CustomerResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a customer",
)
async def create_customer(
    request: CustomerCreateRequest,
    principal: Principal = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
) -> CustomerResponse:
    customer = await customer_service.create_customer(db, request)
    return CustomerResponse.model_validate(customer)


@router.get(
    "",
    response_model=CustomerListResponse,
    summary="Search customers",
)
async def list_customers(
    q: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
    principal: Principal = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
) -> CustomerListResponse:
    customers, total = await customer_service.list_customers(db, q=q, page=page, per_page=per_page)
    return CustomerListResponse(
        customers=[CustomerResponse.model_validate(c) for c in customers],
        total_count=total,
    )


@router.get(
    "/{user_code}",
    response_model=CustomerResponse,
    summary="Get a customer by user code",
)
async def get_customer(
    user_code: str,
    principal: Principal = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
) -> CustomerResponse:
    customer = await customer_service.get_customer(db, user_code)
    return CustomerResponse.model_validate(customer)
