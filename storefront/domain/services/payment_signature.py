"""Gateway payment signature verification (HMAC-SHA256, hex)."""

import hashlib
import hmac


def expected_signature(secret: str, remote_order_id: str, remote_payment_id: str) -> str:
    message = f"{remote_order_id}|{remote_payment_id}".encode("utf-8")
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).hexdigest()


def verify_signature(
    secret: str, remote_order_id: str, remote_payment_id: str, signature: str
) -> bool:
    """Constant-time comparison against the recomputed signature."""
    if not secret or not signature:
        return False
    expected = expected_signature(secret, remote_order_id, remote_payment_id)
    supplied = signature.strip().lower().encode("utf-8")
    return hmac.compare_digest(expected.encode("ascii"), supplied)
