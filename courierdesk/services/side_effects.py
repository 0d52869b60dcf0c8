"""
Best-effort follow-up work.

Invoices, inbox messages and pre-alert links are written after the primary
change has committed. A failure in one of them is logged and rolled back;
it never undoes or fails the primary change.
"""

import logging
from typing import Any, Awaitable, Callable, Iterable

from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


async def run_best_effort(
    db: AsyncSession,
    label: str,
    operation: Callable[..., Awaitable[Any]],
    *args: Any,
    refresh: Iterable[Any] = (),
    **kwargs: Any,
) -> bool:
    """
    Run operation(db, *args, **kwargs) and commit it on its own.
    
    Args:
        db: Database session (the primary change must already be committed)
        label: Name used in the log line when the step fails
        operation: Coroutine function taking the session first
        refresh: ORM objects to reload after a rollback expires them
    
    Returns:
        True if the step committed, False if it failed and was rolled back
    """
    try:
        await operation(db, *args, **kwargs)
        await db.commit()
        return True
    except Exception:
        logger.exception("Follow-up step %r failed; primary change kept", label)
        await db.rollback()
        for obj in refresh:
            await db.refresh(obj)
        return False
