"""Tests for the wallet aggregate."""

import random
from decimal import Decimal

import pytest

from storefront.domain.entities import Wallet
from storefront.domain.enums import TransactionType
from storefront.domain.exceptions import InsufficientFunds, ValidationError
from storefront.domain.value_objects import Money

D = Decimal


def test_credit_and_debit_move_balance():
    wallet = Wallet(user_id="u1")
    wallet.credit(Money(D("200")), "Refund")
    txn = wallet.debit(Money(D("75.50")), "Payment")

    assert wallet.balance == Money(D("124.50"))
    assert txn.type == TransactionType.DEBIT
    assert txn.signed_amount == Money(D("-75.50"))
    assert len(wallet.new_transactions) == 2


def test_debit_above_balance_changes_nothing():
    wallet = Wallet(user_id="u1")
    wallet.credit(Money(D("200")), "Top-up")

    with pytest.raises(InsufficientFunds):
        wallet.debit(Money(D("250")), "Payment")

    assert wallet.balance == Money(D("200"))
    assert len(wallet.new_transactions) == 1


@pytest.mark.parametrize("amount", ["0", "-5"])
def test_non_positive_amounts_rejected(amount):
    wallet = Wallet(user_id="u1")
    with pytest.raises(ValidationError):
        wallet.credit(Money(D(amount)), "Nothing")


@pytest.mark.parametrize("seed", range(10))
def test_balance_matches_ledger_after_random_operations(seed):
    rng = random.Random(seed)
    wallet = Wallet(user_id="u1")

    for _ in range(50):
        amount = Money(D(rng.randint(1, 100_00)) / 100)
        if rng.random() < 0.6:
            wallet.credit(amount, "credit")
        else:
            try:
                wallet.debit(amount, "debit")
            except InsufficientFunds:
                pass
        assert wallet.balance.amount >= 0

    assert Wallet.reconciled_balance(wallet.new_transactions) == wallet.balance
