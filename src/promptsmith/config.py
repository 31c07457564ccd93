"""
Configuration for the prompt intelligence pipeline.

Loaded from YAML or JSON, keys may use either camelCase (as written in
config files) or snake_case:

    patterns:
      disabled: [step-decomposer]
      priorityOverrides: {edge-case-identifier: 8}
      customSettings: {edge-case-identifier: {maxEdgeCases: 4}}
    verbosePatternLogs: true
    escalation: {qualityFloor: 60}
    qualityWeights:
      defaults: {clarity: 20, efficiency: 20, structure: 20, completeness: 20, actionability: 20}

Invalid values are dropped rather than rejected so a partially valid file
still loads.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigError
from .intelligence.types import is_valid_priority

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "PROMPTSMITH_CONFIG"
CONFIG_FILENAME = "promptsmith.yaml"


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class PatternSettingsConfig(_CamelModel):
    disabled: List[str] = Field(default_factory=list, description="Pattern ids never selected")
    priority_overrides: Dict[str, int] = Field(
        default_factory=dict, alias="priorityOverrides", description="Pattern id -> priority 1..10"
    )
    custom_settings: Dict[str, Dict[str, Any]] = Field(
        default_factory=dict, alias="customSettings", description="Pattern id -> settings read by the pattern"
    )

    @field_validator("disabled", mode="before")
    def drop_invalid_disabled(cls, v):
        if not isinstance(v, (list, tuple, set)):
            logger.debug(f"Ignoring non-list disabled patterns: {v!r}")
            return []
        return [item for item in v if isinstance(item, str)]

    @field_validator("priority_overrides", mode="before")
    def drop_invalid_priorities(cls, v):
        if not isinstance(v, dict):
            logger.debug(f"Ignoring non-mapping priority overrides: {v!r}")
            return {}
        valid = {}
        for pattern_id, priority in v.items():
            if is_valid_priority(priority):
                valid[str(pattern_id)] = priority
            else:
                logger.debug(f"Dropping priority override {pattern_id}={priority!r}: must be an integer 1-10")
        return valid

    @field_validator("custom_settings", mode="before")
    def drop_invalid_settings(cls, v):
        if not isinstance(v, dict):
            logger.debug(f"Ignoring non-mapping custom settings: {v!r}")
            return {}
        return {str(k): settings for k, settings in v.items() if isinstance(settings, dict)}


class EscalationConfig(_CamelModel):
    """Thresholds behind the deep-mode recommendation."""
    quality_floor: int = Field(default=65, alias="qualityFloor")
    short_prompt_length: int = Field(default=50, alias="shortPromptLength")
    completeness_floor: int = Field(default=70, alias="completenessFloor")


class QualityWeightsConfig(_CamelModel):
    """Percent weights per dimension; validated by the quality assessor."""
    by_intent: Dict[str, Dict[str, Any]] = Field(default_factory=dict, alias="byIntent")
    defaults: Optional[Dict[str, Any]] = None


class IntelligenceConfig(_CamelModel):
    patterns: PatternSettingsConfig = Field(default_factory=PatternSettingsConfig)
    verbose_pattern_logs: bool = Field(default=False, alias="verbosePatternLogs")
    escalation: EscalationConfig = Field(default_factory=EscalationConfig)
    quality_weights: Optional[QualityWeightsConfig] = Field(default=None, alias="qualityWeights")

    @classmethod
    def from_file(cls, path: Path) -> "IntelligenceConfig":
        """Load configuration from a YAML or JSON file."""
        path = Path(path)
        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                if path.suffix.lower() == ".json":
                    data = json.load(f)
                else:
                    data = yaml.safe_load(f)
        except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
            raise ConfigError(f"Could not parse configuration file {path}: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"Configuration file {path} must contain a mapping, got {type(data).__name__}")

        # Accept either a bare config or one nested under an "intelligence" key
        if isinstance(data.get("intelligence"), dict):
            data = data["intelligence"]

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration in {path}: {e}") from e

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "IntelligenceConfig":
        """Load configuration using precedence: explicit path -> env var -> home file -> cwd file -> defaults."""
        explicit = path or (Path(os.getenv(CONFIG_ENV_VAR)) if os.getenv(CONFIG_ENV_VAR) else None)
        if explicit:
            return cls.from_file(Path(explicit))

        home_cfg = cls.default_config_path()
        if home_cfg.exists():
            return cls.from_file(home_cfg)

        local = Path(CONFIG_FILENAME)
        if local.exists():
            return cls.from_file(local)

        return cls()

    def save_to_file(self, path: Path) -> None:
        """Save configuration to a YAML file using the camelCase keys."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(self.model_dump(by_alias=True, exclude_none=True), f, default_flow_style=False, indent=2)

    @staticmethod
    def default_config_path() -> Path:
        """Return the default per-user config path under ~/.promptsmith."""
        return Path(os.path.expanduser(f"~/.promptsmith/{CONFIG_FILENAME}"))
