"""Tests for the transaction runner's retry behaviour."""

import pytest
from sqlalchemy.orm.exc import StaleDataError

from storefront.application.transaction import RetryPolicy, run_in_transaction
from storefront.domain.exceptions import NotEligible


class FlakyWork:
    """Raises `error` on the first `failures` attempts, then succeeds."""

    def __init__(self, failures: int, error: Exception):
        self.failures = failures
        self.error = error
        self.attempts = 0

    async def __call__(self, uow):
        self.attempts += 1
        assert uow.session is not None
        if self.attempts <= self.failures:
            raise self.error
        return "done"


@pytest.mark.asyncio
async def test_conflict_is_retried_with_fresh_unit_of_work(session_factory):
    work = FlakyWork(failures=2, error=StaleDataError("version mismatch"))

    result = await run_in_transaction(session_factory, work, RetryPolicy(max_attempts=3))

    assert result == "done"
    assert work.attempts == 3


@pytest.mark.asyncio
async def test_original_error_raised_when_attempts_exhausted(session_factory):
    work = FlakyWork(failures=5, error=StaleDataError("version mismatch"))

    with pytest.raises(StaleDataError):
        await run_in_transaction(session_factory, work, RetryPolicy(max_attempts=3))

    assert work.attempts == 3


@pytest.mark.asyncio
async def test_domain_errors_are_not_retried(session_factory):
    work = FlakyWork(failures=5, error=NotEligible("already cancelled"))

    with pytest.raises(NotEligible):
        await run_in_transaction(session_factory, work, RetryPolicy(max_attempts=3))

    assert work.attempts == 1
