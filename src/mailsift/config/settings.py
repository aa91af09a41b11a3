"""
Pydantic Settings configuration for mailsift.

Loads parser options from ``MAILSIFT_*`` environment variables or a
``.env`` file.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Parser settings loaded from environment variables."""

    # Header errors (bad From/To/Sender grammar) are recorded instead of raised
    ignore_header_errors: bool = Field(False)
    # Body walker errors are raised instead of recorded
    strict_body: bool = Field(False)
    # Maximum multipart nesting depth
    max_depth: int = Field(32, ge=1, le=256)
    # Charset assumed for parts that declare none
    default_charset: str = Field("UTF-8", pattern=r"^[A-Za-z0-9._:-]+$")

    # Logging settings
    log_format: Literal["console", "json"] = Field("console")
    debug: bool = Field(False)

    model_config = {
        "env_prefix": "MAILSIFT_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure only one Settings instance is created,
    avoiding repeated environment variable parsing.
    """
    return Settings()
