"""Unit of Work pattern for atomic transactions."""

import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from storefront.domain.events import DomainEvent
from storefront.domain.value_objects import ExecutionID

from .repositories import (
    SqlAlchemyAddressRepository,
    SqlAlchemyCartRepository,
    SqlAlchemyCouponRepository,
    SqlAlchemyOfferRepository,
    SqlAlchemyOrderRepository,
    SqlAlchemyProductRepository,
    SqlAlchemyReturnRequestRepository,
    SqlAlchemyWalletRepository,
)

logger = logging.getLogger(__name__)


class UnitOfWork:
    """
    Unit of Work pattern for atomic transactions.

    Responsibilities:
    1. Manage SQLAlchemy session lifecycle
    2. Propagate ExecutionID across all operations
    3. Atomic commit/rollback of all repository operations
    4. Lazy initialization of repositories
    5. Collect domain events from saved aggregates
    """

    def __init__(self, session_factory: async_sessionmaker) -> None:
        """Initialize Unit of Work.

        Args:
            session_factory: SQLAlchemy async session factory
        """
        self._session_factory = session_factory
        self._session: Optional[AsyncSession] = None
        self._execution_id: Optional[ExecutionID] = None
        self._repositories: dict = {}

    async def __aenter__(self) -> "UnitOfWork":
        """Start transaction scope."""
        self._session = self._session_factory()
        self._execution_id = ExecutionID.generate()
        self._repositories = {}
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Rollback on exception, always close the session."""
        if exc_type is not None:
            logger.warning(
                f"[{self._execution_id}] Rolling back transaction: "
                f"{exc_type.__name__}: {exc_val}"
            )
            await self._session.rollback()
        await self._session.close()

    @property
    def session(self) -> AsyncSession:
        if self._session is None:
            raise RuntimeError("UnitOfWork not initialized. Use async context manager.")
        return self._session

    @property
    def execution_id(self) -> ExecutionID:
        if self._execution_id is None:
            raise RuntimeError("UnitOfWork not initialized. Use async context manager.")
        return self._execution_id

    def _repository(self, name: str, cls):
        if name not in self._repositories:
            self._repositories[name] = cls(self.session)
        return self._repositories[name]

    @property
    def orders(self) -> SqlAlchemyOrderRepository:
        return self._repository("orders", SqlAlchemyOrderRepository)

    @property
    def returns(self) -> SqlAlchemyReturnRequestRepository:
        return self._repository("returns", SqlAlchemyReturnRequestRepository)

    @property
    def products(self) -> SqlAlchemyProductRepository:
        return self._repository("products", SqlAlchemyProductRepository)

    @property
    def offers(self) -> SqlAlchemyOfferRepository:
        return self._repository("offers", SqlAlchemyOfferRepository)

    @property
    def addresses(self) -> SqlAlchemyAddressRepository:
        return self._repository("addresses", SqlAlchemyAddressRepository)

    @property
    def carts(self) -> SqlAlchemyCartRepository:
        return self._repository("carts", SqlAlchemyCartRepository)

    @property
    def coupons(self) -> SqlAlchemyCouponRepository:
        return self._repository("coupons", SqlAlchemyCouponRepository)

    @property
    def wallets(self) -> SqlAlchemyWalletRepository:
        return self._repository("wallets", SqlAlchemyWalletRepository)

    async def commit(self) -> None:
        """Commit all pending changes."""
        await self.session.commit()
        logger.info(f"[{self._execution_id}] ✅ Transaction committed")

    async def rollback(self) -> None:
        """Rollback all pending changes."""
        await self.session.rollback()

    def collect_new_events(self) -> List[DomainEvent]:
        """Drain events recorded on every aggregate saved in this unit."""
        events: List[DomainEvent] = []
        for name in ("orders", "returns"):
            repository = self._repositories.get(name)
            if repository is None:
                continue
            for aggregate in repository.seen:
                for event in aggregate.get_domain_events():
                    event.execution_id = str(self._execution_id)
                    events.append(event)
                aggregate.clear_domain_events()
        return events


def create_uow(session_factory: async_sessionmaker) -> UnitOfWork:
    """Create a new Unit of Work instance.

    Args:
        session_factory: SQLAlchemy async session factory

    Returns:
        UnitOfWork instance
    """
    return UnitOfWork(session_factory)
