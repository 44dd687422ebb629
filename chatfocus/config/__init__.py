"""Configuration management for chatfocus."""
import json
from pathlib import Path
from typing import Annotated, List, Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from chatfocus.browser.locator import DEFAULT_PATTERNS

# Resolve .env relative to the project root (where this package lives)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Chrome remote debugging
    cdp_host: str = Field(default="127.0.0.1", alias="CDP_HOST")
    cdp_port: int = Field(default=9222, alias="CDP_PORT")
    cdp_timeout: float = Field(default=5.0, alias="CDP_TIMEOUT")

    # Tab matching
    target_patterns: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_PATTERNS), alias="TARGET_PATTERNS"
    )

    # Block on the injected script and report page errors
    wait_for_result: bool = Field(default=False, alias="WAIT_FOR_RESULT")

    # Application Settings
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_dir: Path = Field(default=Path("./logs"), alias="LOG_DIR")

    @field_validator("target_patterns", mode="before")
    @classmethod
    def _split_patterns(cls, value: Union[str, List[str]]) -> List[str]:
        if isinstance(value, str):
            text = value.strip()
            value = json.loads(text) if text.startswith("[") else text.split(",")
        if not isinstance(value, list) or not all(isinstance(p, str) for p in value):
            raise ValueError("target patterns must be strings")
        patterns = [p.strip() for p in value if p.strip()]
        if not patterns:
            raise ValueError("at least one target pattern is required")
        return patterns


def load_config():
    """Load and return application configuration."""
    return Settings()
