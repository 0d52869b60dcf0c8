"""
Customer service layer.
Customers are created by staff and looked up by their user code.
"""

import logging
from typing import List, Optional, Tuple

from sqlalchemy import select, func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from courierdesk.core.errors import ConflictError, NotFoundError
from courierdesk.models import Customer
from courierdesk.schemas.customer import CustomerCreateRequest

logger = logging.getLogger(__name__)


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so user input matches literally."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


async def find_customer(db: AsyncSession, user_code: str) -> Optional[Customer]:
    result = await db.execute(
        select(Customer).where(Customer.user_code == user_code)
    )
    return result.scalar_one_or_none()


async def get_customer(db: AsyncSession, user_code: str) -> Customer:
    customer = await find_customer(db, user_code)
    if not customer:
        raise NotFoundError(f"Customer {user_code} not found")
    return customer


async def create_customer(db: AsyncSession, data: CustomerCreateRequest) -> Customer:
    """
    Create a customer.
    
    Raises:
        ConflictError: user_code is already taken
    """
    if await find_customer(db, data.user_code):
        raise ConflictError(f"Customer {data.user_code} already exists")
    
    customer = Customer(**data.model_dump())
    db.add(customer)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError(f"Customer {data.user_code} already exists")
    
    logger.info("Created customer %s", customer.user_code)
    return customer


async def list_customers(
    db: AsyncSession,
    q: Optional[str] = None,
    page: int = 1,
    per_page: int = 20,
) -> Tuple[List[Customer], int]:
    """Search customers by code, name, email or phone."""
    conditions = []
    if q and q.strip():
        pattern = f"%{escape_like(q.strip())}%"
        conditions.append(or_(
            Customer.user_code.ilike(pattern, escape="\\"),
            Customer.first_name.ilike(pattern, escape="\\"),
            Customer.last_name.ilike(pattern, escape="\\"),
            Customer.email.ilike(pattern, escape="\\"),
            Customer.phone.ilike(pattern, escape="\\"),
        ))
    
    total_result = await db.execute(
        select(func.count(Customer.id)).where(*conditions)
    )
    total = total_result.scalar_one()
    
    result = await db.execute(
        select(Customer)
        .where(*conditions)
        .order_by(Customer.user_code)
        .offset((page - 1) * per_page)
        .limit(per_page)
    )
    return list(result.scalars().all()), total
