"""
Transaction runner.

Runs a unit of work function in its own transaction and re-runs the
whole function when the database reports a concurrency conflict.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, TypeVar

from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import async_sessionmaker
from sqlalchemy.orm.exc import StaleDataError

from storefront.data.uow import UnitOfWork, create_uow
from storefront.domain.event_bus import EventBus

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Conflicts that a fresh attempt can resolve. Domain errors are never retried.
RETRYABLE_ERRORS = (StaleDataError, OperationalError)


@dataclass
class RetryPolicy:
    """Retry policy for transactional operations."""

    max_attempts: int = 3
    backoff_seconds: float = 0.0


async def run_in_transaction(
    session_factory: async_sessionmaker,
    work: Callable[[UnitOfWork], Awaitable[T]],
    policy: Optional[RetryPolicy] = None,
    event_bus: Optional[EventBus] = None,
    operation: str = "transaction",
) -> T:
    """
    Execute `work` atomically.

    Each attempt gets a new UnitOfWork; the work commits only if it
    returns. Domain events recorded on saved aggregates are published
    after the commit succeeds.

    Raises:
        The original exception once attempts are exhausted, or any
        non-retryable exception immediately.
    """
    policy = policy or RetryPolicy()

    for attempt in range(1, policy.max_attempts + 1):
        uow = create_uow(session_factory)
        try:
            async with uow:
                result = await work(uow)
                await uow.commit()
                events = uow.collect_new_events()
        except RETRYABLE_ERRORS as e:
            if attempt >= policy.max_attempts:
                logger.error(
                    f"{operation} failed after {attempt} attempt(s): "
                    f"{type(e).__name__}: {e}"
                )
                raise
            logger.warning(
                f"{operation} conflict on attempt {attempt}/{policy.max_attempts}, "
                f"retrying: {type(e).__name__}"
            )
            if policy.backoff_seconds > 0:
                await asyncio.sleep(policy.backoff_seconds * attempt)
            continue

        if event_bus is not None and events:
            await event_bus.publish_all(events)
        return result

    raise RuntimeError(f"{operation}: retry policy allows no attempts")
