"""Logging setup for promptsmith applications.

Every pipeline module logs under the ``promptsmith`` logger tree: intent
detection at DEBUG, each pattern application at DEBUG (INFO with
verbose_pattern_logs), and a failing pattern at WARNING with its id in the
``pattern_id`` record field. The library never configures logging on import;
applications call configure_logging() (or OptimizerFactory.create() with
setup_logging=True) once at startup.

The pipeline level is separate from the root level so an application can
keep its own logs at WARNING while tracing pattern decisions, or the reverse.
"""

from __future__ import annotations

import logging
from typing import Optional

from pythonjsonlogger import jsonlogger

PIPELINE_LOGGER = "promptsmith"

TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _level(name: Optional[str], default: int = logging.INFO) -> int:
    if not name:
        return default
    return getattr(logging, name.upper(), default)


def _build_json_formatter() -> logging.Formatter:
    # Fields passed through ``extra`` (pattern_id) are appended by the formatter
    fields = ["asctime", "levelname", "name", "message", "funcName", "lineno"]
    return jsonlogger.JsonFormatter(fmt=" ".join(f"%({f})s" for f in fields))


def configure_logging(level: str = "INFO", fmt: str = "json",
                      pipeline_level: Optional[str] = None) -> None:
    """
    Install one stream handler on the root logger.

    Args:
        level: Root level; unknown names fall back to INFO
        fmt: "json" for python-json-logger records, anything else for text
        pipeline_level: Level for the promptsmith logger tree; unset follows the root
    """
    root = logging.getLogger()
    root.setLevel(_level(level))

    # Reconfiguring replaces the handler instead of stacking a second one
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler()
    if fmt.lower() == "json":
        handler.setFormatter(_build_json_formatter())
    else:
        handler.setFormatter(logging.Formatter(fmt=TEXT_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S%z"))
    root.addHandler(handler)

    logging.getLogger(PIPELINE_LOGGER).setLevel(_level(pipeline_level, logging.NOTSET))
