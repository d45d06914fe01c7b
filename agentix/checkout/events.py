from typing import Any, Dict, Optional
from fastapi import BackgroundTasks
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker
from agentix.checkout.constants import logger
from agentix.schema.full_schema import CheckoutEvent


async def write_checkout_event(session_factory: async_sessionmaker, checkout_id: str, event_type: str,
                               data: Optional[Dict[str, Any]] = None) -> None:
    # audit rows are best effort, a failed write is logged and dropped
    try:
        async with session_factory() as session:
            session.add(CheckoutEvent(checkout_id=checkout_id, type=event_type, data=data or {}))
            await session.commit()
    except SQLAlchemyError as exc:
        logger.error("checkout.event.write_failed",
                     extra={"checkout_id": checkout_id, "event_type": event_type, "reason": str(exc)})


class AuditTrail:
    """Appends checkout events after the response is sent.

    Without a BackgroundTasks instance (scripts, direct engine use) the write
    happens inline, still without raising.
    """

    def __init__(self, session_factory: async_sessionmaker, background_tasks: Optional[BackgroundTasks] = None):
        self.session_factory = session_factory
        self.background_tasks = background_tasks

    async def record(self, checkout_id: str, event_type: str, data: Optional[Dict[str, Any]] = None) -> None:
        if self.background_tasks is not None:
            self.background_tasks.add_task(write_checkout_event, self.session_factory, checkout_id, event_type, data)
            return
        await write_checkout_event(self.session_factory, checkout_id, event_type, data)
