import json

import pytest
import yaml

from promptsmith.config import EscalationConfig, IntelligenceConfig, PatternSettingsConfig
from promptsmith.errors import ConfigError


def test_default_config():
    """Test creating a default configuration."""
    config = IntelligenceConfig()

    assert config.patterns.disabled == []
    assert config.patterns.priority_overrides == {}
    assert config.verbose_pattern_logs is False
    assert config.escalation.quality_floor == 65
    assert config.escalation.short_prompt_length == 50
    assert config.escalation.completeness_floor == 70
    assert config.quality_weights is None


def test_camel_and_snake_case_keys():
    """Config files use camelCase; Python callers may use snake_case."""
    camel = IntelligenceConfig.model_validate({
        "verbosePatternLogs": True,
        "patterns": {"priorityOverrides": {"step-decomposer": 8}},
        "escalation": {"qualityFloor": 55},
    })
    snake = IntelligenceConfig(
        verbose_pattern_logs=True,
        patterns=PatternSettingsConfig(priority_overrides={"step-decomposer": 8}),
        escalation=EscalationConfig(quality_floor=55),
    )

    assert camel == snake
    assert camel.patterns.priority_overrides == {"step-decomposer": 8}


def test_invalid_pattern_settings_are_dropped():
    """Invalid overrides are ignored rather than rejected."""
    settings = PatternSettingsConfig.model_validate({
        "disabled": "step-decomposer",
        "priorityOverrides": {"a": 11, "b": "high", "c": 4, "d": True, "e": 0},
        "customSettings": {"edge-case-identifier": {"maxEdgeCases": 3}, "broken": "yes"},
    })

    assert settings.disabled == []
    assert settings.priority_overrides == {"c": 4}
    assert settings.custom_settings == {"edge-case-identifier": {"maxEdgeCases": 3}}


def test_config_from_yaml_file(tmp_path):
    """Test loading configuration from a YAML file."""
    path = tmp_path / "promptsmith.yaml"
    path.write_text(yaml.safe_dump({
        "patterns": {
            "disabled": ["step-decomposer"],
            "customSettings": {"edge-case-identifier": {"maxEdgeCases": 4}},
        },
        "qualityWeights": {
            "byIntent": {"debugging": {"clarity": 20, "efficiency": 20, "structure": 20,
                                       "completeness": 20, "actionability": 20}},
        },
    }))

    config = IntelligenceConfig.from_file(path)
    assert config.patterns.disabled == ["step-decomposer"]
    assert config.patterns.custom_settings["edge-case-identifier"]["maxEdgeCases"] == 4
    assert config.quality_weights.by_intent["debugging"]["clarity"] == 20


def test_config_from_json_file(tmp_path):
    """Test loading configuration from a JSON file."""
    path = tmp_path / "promptsmith.json"
    path.write_text(json.dumps({"verbosePatternLogs": True}))

    assert IntelligenceConfig.from_file(path).verbose_pattern_logs is True


def test_config_nested_under_intelligence_key(tmp_path):
    """Test a config nested under an intelligence key."""
    path = tmp_path / "app.yaml"
    path.write_text(yaml.safe_dump({"intelligence": {"patterns": {"disabled": ["ambiguity-detector"]}}}))

    assert IntelligenceConfig.from_file(path).patterns.disabled == ["ambiguity-detector"]


def test_empty_file_gives_defaults(tmp_path):
    """Test that an empty file gives the defaults."""
    path = tmp_path / "empty.yaml"
    path.write_text("")

    assert IntelligenceConfig.from_file(path) == IntelligenceConfig()


@pytest.mark.parametrize("content", [
    "patterns: [unclosed",
    "- just\n- a\n- list\n",
    "escalation:\n  qualityFloor: high\n",
])
def test_bad_config_file_raises(tmp_path, content):
    """Test that malformed config files raise ConfigError."""
    path = tmp_path / "bad.yaml"
    path.write_text(content)

    with pytest.raises(ConfigError):
        IntelligenceConfig.from_file(path)


def test_missing_config_file_raises(tmp_path):
    """Test that an explicit missing path raises ConfigError."""
    with pytest.raises(ConfigError) as exc_info:
        IntelligenceConfig.from_file(tmp_path / "nope.yaml")
    assert "not found" in str(exc_info.value)
    assert "YAML or JSON" in str(exc_info.value)


def test_load_precedence(tmp_path, monkeypatch):
    """Explicit path, then PROMPTSMITH_CONFIG, then home file, then cwd file."""
    assert IntelligenceConfig.load() == IntelligenceConfig()

    (tmp_path / "promptsmith.yaml").write_text("verbosePatternLogs: true\n")
    assert IntelligenceConfig.load().verbose_pattern_logs is True

    home = IntelligenceConfig.default_config_path()
    home.parent.mkdir(parents=True)
    home.write_text("patterns:\n  disabled: [step-decomposer]\n")
    assert IntelligenceConfig.load().patterns.disabled == ["step-decomposer"]

    env_file = tmp_path / "env.yaml"
    env_file.write_text("escalation:\n  qualityFloor: 40\n")
    monkeypatch.setenv("PROMPTSMITH_CONFIG", str(env_file))
    assert IntelligenceConfig.load().escalation.quality_floor == 40

    explicit = tmp_path / "explicit.json"
    explicit.write_text(json.dumps({"escalation": {"qualityFloor": 30}}))
    assert IntelligenceConfig.load(explicit).escalation.quality_floor == 30


def test_config_save_to_file(tmp_path):
    """Test saving configuration writes camelCase keys that load back."""
    config = IntelligenceConfig.model_validate({
        "patterns": {"disabled": ["step-decomposer"], "priorityOverrides": {"edge-case-identifier": 8}},
        "verbosePatternLogs": True,
    })
    path = tmp_path / "nested" / "promptsmith.yaml"
    config.save_to_file(path)

    saved = yaml.safe_load(path.read_text())
    assert saved["patterns"]["priorityOverrides"] == {"edge-case-identifier": 8}
    assert saved["verbosePatternLogs"] is True
    assert IntelligenceConfig.from_file(path) == config
