"""Environment-based settings using pydantic-settings.

AppSettings reads PROMPTSMITH_* environment variables (and an optional
.env file) and layers them over the file-based IntelligenceConfig.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .config import IntelligenceConfig


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="PROMPTSMITH_", case_sensitive=False
    )

    # Logging
    log_level: str = Field(default="INFO", description="Application log level")
    log_format: str = Field(default="text", description="Log format: json or text")
    pipeline_log_level: Optional[str] = Field(
        default=None, description="Level for the promptsmith logger tree; unset follows log_level"
    )

    # Pipeline
    config_file: Optional[str] = Field(default=None, description="Path to a YAML/JSON config file")
    verbose_pattern_logs: Optional[bool] = Field(
        default=None, description="Log each pattern application at INFO instead of DEBUG"
    )

    def to_intelligence_config(self, base: Optional[IntelligenceConfig] = None) -> IntelligenceConfig:
        """Merge environment settings into an IntelligenceConfig.

        Without a base, the config is loaded from config_file (or the
        default search path). Environment values take precedence.
        """
        if base is None:
            base = IntelligenceConfig.load(self.config_file)

        if self.verbose_pattern_logs is not None:
            base = base.model_copy(update={"verbose_pattern_logs": self.verbose_pattern_logs})
        return base
