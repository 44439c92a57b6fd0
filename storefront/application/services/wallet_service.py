"""Application service for wallet queries."""

import logging

from sqlalchemy.ext.asyncio import async_sessionmaker

from storefront.application.dtos.wallet_dto import (
    WalletDTO,
    WalletReconciliationDTO,
    WalletTransactionDTO,
    WalletTransactionListDTO,
)
from storefront.data.uow import create_uow
from storefront.domain.entities import Wallet

logger = logging.getLogger(__name__)


class WalletService:
    """
    Read side of the wallet ledger.

    Credits and debits happen only inside checkout, cancellation and
    return transactions; nothing here writes.
    """

    def __init__(self, session_factory: async_sessionmaker) -> None:
        self._session_factory = session_factory

    async def get_wallet(self, user_id: str) -> WalletDTO:
        uow = create_uow(self._session_factory)
        async with uow:
            wallet = await uow.wallets.get_or_create(user_id)
            return WalletDTO(
                user_id=user_id,
                balance=wallet.balance.amount,
                currency=wallet.balance.currency,
            )

    async def list_transactions(
        self, user_id: str, page: int = 1, limit: int = 20
    ) -> WalletTransactionListDTO:
        uow = create_uow(self._session_factory)
        async with uow:
            transactions = await uow.wallets.list_transactions(
                user_id, offset=(page - 1) * limit, limit=limit
            )
            total = await uow.wallets.count_transactions(user_id)
            return WalletTransactionListDTO(
                transactions=[WalletTransactionDTO.from_domain(t) for t in transactions],
                total=total,
                page=page,
                limit=limit,
            )

    async def reconcile(self, user_id: str) -> WalletReconciliationDTO:
        """Compare the stored balance with the signed sum of the ledger."""
        uow = create_uow(self._session_factory)
        async with uow:
            wallet = await uow.wallets.get_or_create(user_id)
            transactions = await uow.wallets.list_transactions(user_id, limit=None)
            ledger = Wallet.reconciled_balance(transactions, wallet.balance.currency)
            consistent = ledger == wallet.balance
            if not consistent:
                logger.error(
                    f"Wallet of {user_id} out of balance: stored {wallet.balance}, "
                    f"ledger {ledger}"
                )
            return WalletReconciliationDTO(
                user_id=user_id,
                balance=wallet.balance.amount,
                ledger_balance=ledger.amount,
                consistent=consistent,
            )
