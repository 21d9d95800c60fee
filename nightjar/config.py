"""
Configuration for the Nightjar Launch analyzer.

Values come from the environment (optionally a local .env file) and can be
overridden by keyword when constructing Settings directly.
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

load_dotenv()

EXTRACTION_STRATEGIES = ("anchor", "delimiter")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


def _env_optional_float(name: str) -> Optional[float]:
    value = os.getenv(name)
    return float(value) if value else None


class Settings(BaseModel):
    # Defaults come from the environment and must pass the same checks
    model_config = ConfigDict(validate_default=True)

    # Logging
    log_level: str = Field(default_factory=lambda: os.getenv("NIGHTJAR_LOG_LEVEL", "INFO"))
    debug: bool = Field(default_factory=lambda: _env_bool("NIGHTJAR_DEBUG"))
    log_file_path: Optional[Path] = Field(
        default_factory=lambda: Path(os.environ["NIGHTJAR_LOG_FILE"]) if os.getenv("NIGHTJAR_LOG_FILE") else None
    )

    # Generative backend (optional)
    openai_api_key: Optional[str] = Field(default_factory=lambda: os.getenv("OPENAI_API_KEY") or None)
    openai_model: str = Field(default_factory=lambda: os.getenv("NIGHTJAR_OPENAI_MODEL", "gpt-4"))
    temperature: float = Field(default_factory=lambda: float(os.getenv("NIGHTJAR_TEMPERATURE", "0.5")))

    # Extraction
    extraction_strategy: str = Field(default_factory=lambda: os.getenv("NIGHTJAR_STRATEGY", "anchor"))
    rule_window_chars: int = Field(default_factory=lambda: int(os.getenv("NIGHTJAR_RULE_WINDOW_CHARS", "2000")))
    rule_window_lead: int = Field(default_factory=lambda: int(os.getenv("NIGHTJAR_RULE_WINDOW_LEAD", "20")))

    # HTTP; no timeout unless configured
    http_timeout: Optional[float] = Field(default_factory=lambda: _env_optional_float("NIGHTJAR_HTTP_TIMEOUT"))
    user_agent: str = Field(default_factory=lambda: os.getenv("NIGHTJAR_USER_AGENT", "nightjar/0.1"))

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("extraction_strategy")
    @classmethod
    def validate_strategy(cls, v: str) -> str:
        if v not in EXTRACTION_STRATEGIES:
            raise ValueError(f"extraction_strategy must be one of {', '.join(EXTRACTION_STRATEGIES)}")
        return v

    @field_validator("rule_window_chars")
    @classmethod
    def validate_window(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("rule_window_chars must be positive")
        return v

    @model_validator(mode="after")
    def validate_lead(self) -> "Settings":
        if self.rule_window_lead < 0:
            raise ValueError("rule_window_lead must not be negative")
        return self

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.debug else self.log_level

    @property
    def ai_enabled(self) -> bool:
        return bool(self.openai_api_key)

    def get_log_file_path(self) -> Optional[Path]:
        if self.log_file_path:
            self.log_file_path.parent.mkdir(parents=True, exist_ok=True)
        return self.log_file_path


# Singleton instance
_settings = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
