import logging
import os

import pytest

from promptsmith.config import IntelligenceConfig


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep the user's real config files and PROMPTSMITH_* variables out of tests."""
    for name in list(os.environ):
        if name.startswith("PROMPTSMITH_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(IntelligenceConfig, "default_config_path",
                        staticmethod(lambda: tmp_path / "home" / "promptsmith.yaml"))
    monkeypatch.chdir(tmp_path)
    yield tmp_path


@pytest.fixture
def restore_root_logging():
    """Restore root handlers and levels after tests that call configure_logging()."""
    root = logging.getLogger()
    pipeline = logging.getLogger("promptsmith")
    handlers, level, pipeline_level = list(root.handlers), root.level, pipeline.level
    yield root
    pipeline.setLevel(pipeline_level)
    for handler in list(root.handlers):
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)
