"""Tests for gateway signature verification."""

import hashlib
import hmac

from storefront.domain.services.payment_signature import expected_signature, verify_signature

SECRET = "test_secret"


def test_expected_signature_is_hmac_sha256_of_order_and_payment():
    expected = hmac.new(
        SECRET.encode(), b"order_abc|pay_xyz", hashlib.sha256
    ).hexdigest()
    assert expected_signature(SECRET, "order_abc", "pay_xyz") == expected


def test_valid_signature_accepted():
    signature = expected_signature(SECRET, "order_abc", "pay_xyz")
    assert verify_signature(SECRET, "order_abc", "pay_xyz", signature)
    assert verify_signature(SECRET, "order_abc", "pay_xyz", signature.upper())


def test_tampered_signature_rejected():
    signature = expected_signature(SECRET, "order_abc", "pay_xyz")
    assert not verify_signature(SECRET, "order_abc", "pay_other", signature)
    assert not verify_signature("other_secret", "order_abc", "pay_xyz", signature)
    assert not verify_signature(SECRET, "order_abc", "pay_xyz", "")


def test_non_ascii_signature_rejected_without_error():
    assert not verify_signature(SECRET, "order_abc", "pay_xyz", "é" * 64)
