from promptsmith.config import IntelligenceConfig
from promptsmith.settings import AppSettings


def test_default_settings():
    """Test default settings values."""
    settings = AppSettings()

    assert settings.log_level == "INFO"
    assert settings.log_format == "text"
    assert settings.config_file is None
    assert settings.pipeline_log_level is None
    assert settings.verbose_pattern_logs is None


def test_environment_prefix(monkeypatch):
    """Test the PROMPTSMITH_ environment prefix."""
    monkeypatch.setenv("PROMPTSMITH_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("PROMPTSMITH_LOG_FORMAT", "json")
    monkeypatch.setenv("promptsmith_verbose_pattern_logs", "true")
    monkeypatch.setenv("PROMPTSMITH_PIPELINE_LOG_LEVEL", "DEBUG")

    settings = AppSettings()
    assert settings.log_level == "DEBUG"
    assert settings.log_format == "json"
    assert settings.pipeline_log_level == "DEBUG"
    assert settings.verbose_pattern_logs is True


def test_dotenv_file(isolated_config):
    """Test loading settings from a .env file."""
    (isolated_config / ".env").write_text("PROMPTSMITH_LOG_LEVEL=WARNING\n")
    assert AppSettings().log_level == "WARNING"


def test_environment_overrides_config_file(tmp_path, monkeypatch):
    """Test that environment values override the config file."""
    path = tmp_path / "custom.yaml"
    path.write_text("verbosePatternLogs: false\npatterns:\n  disabled: [step-decomposer]\n")
    monkeypatch.setenv("PROMPTSMITH_CONFIG_FILE", str(path))
    monkeypatch.setenv("PROMPTSMITH_VERBOSE_PATTERN_LOGS", "1")

    config = AppSettings().to_intelligence_config()
    assert config.patterns.disabled == ["step-decomposer"]
    assert config.verbose_pattern_logs is True


def test_unset_values_keep_base_config():
    """Test that unset values return the base config unchanged."""
    base = IntelligenceConfig(verbose_pattern_logs=True)
    assert AppSettings().to_intelligence_config(base) is base
