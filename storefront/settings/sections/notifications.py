from pydantic import Field
from pydantic_settings import BaseSettings


class NotificationSettings(BaseSettings):
    """Order confirmation mail relay (webhook)."""

    enabled: bool = Field(default=False)
    webhook_url: str = Field(default="")
    sender: str = Field(default="orders@infinitytech.in")
    prefix: str = Field(default="[InfinityTech]")
    timeout_seconds: float = Field(default=10.0, gt=0)

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "NOTIFY_",
        "extra": "ignore",
    }
