from pydantic import Field
from pydantic_settings import BaseSettings


class RazorpaySettings(BaseSettings):
    """
    Payment gateway settings.
    Disabled gateway falls back to the in-process mock.
    """

    enabled: bool = Field(default=False)
    key_id: str = Field(default="rzp_test_key")
    key_secret: str = Field(default="rzp_test_secret")
    base_url: str = Field(default="https://api.razorpay.com/v1")
    timeout_seconds: float = Field(default=10.0, gt=0)

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "RAZORPAY_",
        "extra": "ignore",
    }
