import json
import logging

import pytest
from pythonjsonlogger import jsonlogger

from promptsmith.intelligence import PatternLibrary, UniversalOptimizer
from promptsmith.intelligence.patterns import BasePattern
from promptsmith.intelligence.types import PromptIntent
from promptsmith.logging_config import PIPELINE_LOGGER, configure_logging


class FailingPattern(BasePattern):
    id = "failing"
    name = "Failing"
    description = "Always raises"
    applicable_intents = frozenset(PromptIntent)

    def apply(self, prompt, context):
        raise ValueError("boom")


def last_json_record(capsys):
    """Parse the last JSON line written to stderr."""
    return json.loads(capsys.readouterr().err.strip().splitlines()[-1])


def test_json_logging(restore_root_logging, capsys):
    """Test JSON records carry the standard fields."""
    configure_logging("DEBUG", "json")

    root = restore_root_logging
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0].formatter, jsonlogger.JsonFormatter)

    logging.getLogger("promptsmith.test").info("pattern applied")
    record = last_json_record(capsys)
    assert record["message"] == "pattern applied"
    assert record["levelname"] == "INFO"
    assert record["name"] == "promptsmith.test"


def test_text_logging(restore_root_logging, capsys):
    """Test the plain text format."""
    configure_logging("warning", "text")

    root = restore_root_logging
    assert root.level == logging.WARNING
    assert not isinstance(root.handlers[0].formatter, jsonlogger.JsonFormatter)

    logging.getLogger("promptsmith.test").warning("slow pattern")
    assert "WARNING promptsmith.test: slow pattern" in capsys.readouterr().err


def test_unknown_level_falls_back_to_info(restore_root_logging):
    """Test that an unknown level name falls back to INFO."""
    configure_logging("chatty", "text")
    assert restore_root_logging.level == logging.INFO


def test_reconfiguring_replaces_handlers(restore_root_logging):
    """Test that configuring twice leaves a single handler."""
    configure_logging("INFO", "json")
    configure_logging("INFO", "text")
    assert len(restore_root_logging.handlers) == 1


def test_pipeline_level_is_independent_of_root(restore_root_logging, capsys):
    """Test tracing pattern decisions while the root stays at WARNING."""
    configure_logging("WARNING", "text", pipeline_level="DEBUG")

    assert logging.getLogger(PIPELINE_LOGGER).level == logging.DEBUG
    logging.getLogger("promptsmith.intelligence.optimizer").debug("Pattern x skipped")
    logging.getLogger("other.library").info("not shown")

    err = capsys.readouterr().err
    assert "Pattern x skipped" in err
    assert "not shown" not in err


def test_unset_pipeline_level_follows_root(restore_root_logging):
    """Test that reconfiguring without a pipeline level clears an earlier one."""
    configure_logging("INFO", "text", pipeline_level="DEBUG")
    configure_logging("INFO", "text")
    assert logging.getLogger(PIPELINE_LOGGER).level == logging.NOTSET


@pytest.mark.asyncio
async def test_pattern_failure_record_names_pattern(restore_root_logging, capsys):
    """Test that a failing pattern is logged with its id as a JSON field."""
    configure_logging("INFO", "json")
    optimizer = UniversalOptimizer(pattern_library=PatternLibrary(patterns=[FailingPattern()]))

    await optimizer.optimize("Write a parser")

    record = last_json_record(capsys)
    assert record["levelname"] == "WARNING"
    assert record["pattern_id"] == "failing"
    assert "boom" in record["message"]
