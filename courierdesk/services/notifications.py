"""
Customer inbox notifications.
Messages are stored records; delivery by email or SMS is out of scope.
"""

import logging
from typing import List

from sqlalchemy import select, func, update
from sqlalchemy.ext.asyncio import AsyncSession

from courierdesk.models import Message, Package

logger = logging.getLogger(__name__)


async def notify_customer(
    db: AsyncSession,
    user_code: str,
    subject: str,
    body: str,
    sender: str = "system",
) -> Message:
    """Add a message to a customer's inbox. The caller commits."""
    message = Message(user_code=user_code, subject=subject, body=body, sender=sender)
    db.add(message)
    await db.flush()
    logger.info("Queued message %r for %s", subject, user_code)
    return message


async def notify_package_received(db: AsyncSession, package: Package) -> Message:
    return await notify_customer(
        db,
        package.user_code,
        subject=f"Package {package.tracking_number} received",
        body=(
            f"Your package {package.tracking_number}"
            f"{' from ' + package.shipper if package.shipper else ''} "
            "has arrived at our warehouse."
        ),
    )


async def notify_status_change(db: AsyncSession, package: Package, previous_status) -> Message:
    new_label = package.status.value.replace("_", " ")
    return await notify_customer(
        db,
        package.user_code,
        subject=f"Package {package.tracking_number} is now {new_label}",
        body=(
            f"The status of your package {package.tracking_number} changed "
            f"from {previous_status.value.replace('_', ' ')} to {new_label}."
        ),
    )


async def list_messages(db: AsyncSession, user_code: str, limit: int = 100) -> List[Message]:
    """Inbox for one customer, newest first."""
    result = await db.execute(
        select(Message)
        .where(Message.user_code == user_code)
        .order_by(Message.created_at.desc())
        .limit(limit)
    )
    return list(result.scalars().all())


async def count_unread(db: AsyncSession, user_code: str) -> int:
    result = await db.execute(
        select(func.count(Message.id)).where(
            Message.user_code == user_code,
            Message.read.is_(False),
        )
    )
    return result.scalar_one()


async def mark_all_read(db: AsyncSession, user_code: str) -> int:
    """Mark every unread message as read; returns how many changed."""
    result = await db.execute(
        update(Message)
        .where(Message.user_code == user_code, Message.read.is_(False))
        .values(read=True)
    )
    await db.commit()
    return result.rowcount or 0
