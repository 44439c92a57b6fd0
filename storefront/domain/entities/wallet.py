"""Wallet ledger aggregate."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Optional

from ..enums import TransactionType
from ..exceptions import InsufficientFunds, ValidationError
from ..value_objects import DEFAULT_CURRENCY, Money, new_id, utcnow


@dataclass(frozen=True)
class WalletTransaction:
    """Append-only ledger entry. Amount is always positive."""
    transaction_id: str
    amount: Money
    type: TransactionType
    description: str
    occurred_at: datetime

    @property
    def signed_amount(self) -> Money:
        return self.amount if self.type == TransactionType.CREDIT else -self.amount


@dataclass
class Wallet:
    """
    User wallet.

    Invariant: balance == signed sum of all transactions.
    Only transactions appended since load are held in `new_transactions`;
    the full history lives in the repository.
    """
    user_id: str
    balance: Money = field(default_factory=lambda: Money.zero(DEFAULT_CURRENCY))
    new_transactions: List[WalletTransaction] = field(default_factory=list)
    updated_at: Optional[datetime] = None

    def credit(self, amount: Money, description: str, now: Optional[datetime] = None) -> WalletTransaction:
        self._check_amount(amount)
        return self._append(amount, TransactionType.CREDIT, description, now)

    def debit(self, amount: Money, description: str, now: Optional[datetime] = None) -> WalletTransaction:
        self._check_amount(amount)
        if self.balance < amount:
            raise InsufficientFunds(
                f"Wallet balance {self.balance} is less than {amount}"
            )
        return self._append(amount, TransactionType.DEBIT, description, now)

    def _check_amount(self, amount: Money) -> None:
        if not amount.is_positive():
            raise ValidationError(f"Wallet amount must be positive, got {amount}")

    def _append(
        self,
        amount: Money,
        type_: TransactionType,
        description: str,
        now: Optional[datetime],
    ) -> WalletTransaction:
        txn = WalletTransaction(
            transaction_id=new_id(),
            amount=amount,
            type=type_,
            description=description,
            occurred_at=now or utcnow(),
        )
        self.balance = self.balance + txn.signed_amount
        self.new_transactions.append(txn)
        self.updated_at = txn.occurred_at
        return txn

    @staticmethod
    def reconciled_balance(
        transactions: Iterable[WalletTransaction], currency: str = DEFAULT_CURRENCY
    ) -> Money:
        total = Money.zero(currency)
        for txn in transactions:
            total = total + txn.signed_amount
        return total
