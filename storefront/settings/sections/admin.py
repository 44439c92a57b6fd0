from pydantic import Field
from pydantic_settings import BaseSettings


class AdminSettings(BaseSettings):
    token: str = Field(default="change-me")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "ADMIN_",
        "extra": "ignore",
    }
