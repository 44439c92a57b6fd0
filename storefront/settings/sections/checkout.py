from decimal import Decimal

from pydantic import Field
from pydantic_settings import BaseSettings


class CheckoutSettings(BaseSettings):
    """
    Checkout and settlement rules.
    Loaded from environment / .env with the CHECKOUT_ prefix.
    """

    currency: str = Field(default="INR", min_length=3, max_length=3)
    shipping_fee: Decimal = Field(default=Decimal("50"), ge=0)
    free_shipping_above: Decimal = Field(default=Decimal("500"), ge=0)
    cod_max_amount: Decimal = Field(default=Decimal("4000"), ge=0)
    max_quantity_per_item: int = Field(default=10, ge=1)
    pending_order_ttl_hours: int = Field(default=24, ge=1)

    # Optimistic-concurrency retries for whole operations
    transaction_attempts: int = Field(default=3, ge=1)
    retry_backoff_seconds: float = Field(default=0.05, ge=0)

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "CHECKOUT_",
        "extra": "ignore",
    }
