"""Coupon code generation."""

import secrets
import string

LETTERS = string.ascii_uppercase
ALPHABET = string.ascii_uppercase + string.digits


def generate_coupon_code(length: int = 8) -> str:
    """Random upper-case code; always starts with a letter."""
    if length < 6 or length > 12:
        raise ValueError(f"Coupon code length must be 6..12, got {length}")
    head = secrets.choice(LETTERS)
    tail = "".join(secrets.choice(ALPHABET) for _ in range(length - 1))
    return head + tail


def normalize_coupon_code(code: str) -> str:
    return code.strip().upper()
