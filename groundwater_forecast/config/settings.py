"""
Groundwater Forecast - Global Configuration Settings

Centralizes model selection, retry timing and logging configuration.
"""

import os
from dataclasses import dataclass, field
from typing import Optional
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

DEFAULT_SYSTEM_INSTRUCTION = (
    "Act as an expert hydrogeologist. Your analysis must be rigorously grounded in data "
    "from official sources like government geological surveys and meteorological agencies. "
    "Provide a precise, quantitative groundwater forecast. Prioritize verifiable data over "
    "speculation. When providing scores and predictions, maintain a conservative and "
    "data-driven approach. Clearly state the key factors influencing your forecast."
)


@dataclass
class ModelConfig:
    """
    Configuration for the remote forecast model.

    Temperature stays low so repeated requests for the same location
    produce comparable reports.
    """
    model_name: str = field(default_factory=lambda: os.getenv("GROUNDWATER_MODEL", "gpt-4o-mini"))
    temperature: float = 0.2
    max_tokens: int = 8192
    request_timeout_seconds: float = 120.0
    system_instruction: str = DEFAULT_SYSTEM_INSTRUCTION


@dataclass
class RetryConfig:
    """Configuration for the attempt loop."""
    max_attempts: int = 3
    base_delay_seconds: float = 1.5
    min_loading_seconds: float = 0.75


@dataclass
class Settings:
    """
    Master settings class combining all configuration sections.

    Usage:
        settings = get_settings()
        model = settings.models.model_name
    """
    models: ModelConfig = field(default_factory=ModelConfig)
    retry: RetryConfig = field(default_factory=RetryConfig)

    # API Configuration
    openai_api_key: str = field(default_factory=lambda: os.getenv("OPENAI_API_KEY", ""))
    openai_base_url: Optional[str] = field(default_factory=lambda: os.getenv("OPENAI_BASE_URL") or None)

    # Probe target used to detect an offline host when no base URL is set
    connectivity_host: str = "api.openai.com"
    connectivity_port: int = 443
    connectivity_timeout_seconds: float = 3.0

    # Logging settings
    log_level: str = field(default_factory=lambda: os.getenv("GROUNDWATER_LOG_LEVEL", "INFO"))
    verbose_logging: bool = True

    def validate(self) -> bool:
        """Validate that required settings are present."""
        if not self.openai_api_key:
            raise ValueError("OPENAI_API_KEY not found in environment variables")
        return True


# Singleton pattern for settings
_settings_instance: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance (singleton)."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance


def reload_settings() -> Settings:
    """Force reload of settings (useful for testing)."""
    global _settings_instance
    _settings_instance = Settings()
    return _settings_instance
