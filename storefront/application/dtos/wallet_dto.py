"""Application DTOs for wallet operations."""

from datetime import datetime
from decimal import Decimal
from typing import List

from pydantic import BaseModel, Field

from storefront.domain.entities import WalletTransaction


class WalletDTO(BaseModel):
    user_id: str
    balance: Decimal
    currency: str = "INR"

    model_config = {"frozen": True}


class WalletTransactionDTO(BaseModel):
    transaction_id: str
    amount: Decimal = Field(..., gt=0)
    type: str = Field(..., description="credit | debit")
    description: str
    occurred_at: datetime

    model_config = {"frozen": True}

    @classmethod
    def from_domain(cls, txn: WalletTransaction) -> "WalletTransactionDTO":
        return cls(
            transaction_id=txn.transaction_id,
            amount=txn.amount.amount,
            type=txn.type.value,
            description=txn.description,
            occurred_at=txn.occurred_at,
        )


class WalletTransactionListDTO(BaseModel):
    transactions: List[WalletTransactionDTO] = Field(default_factory=list)
    total: int = Field(..., ge=0)
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1)

    model_config = {"frozen": True}


class WalletReconciliationDTO(BaseModel):
    user_id: str
    balance: Decimal
    ledger_balance: Decimal
    consistent: bool

    model_config = {"frozen": True}
