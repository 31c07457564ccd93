"""
Optimizer Factory - wires settings, configuration and logging together.

Applications that do not need custom collaborators call
OptimizerFactory.create() once at startup and reuse the optimizer.
"""

import logging
from typing import Optional

from .config import IntelligenceConfig
from .intelligence import PatternLibrary, UniversalOptimizer
from .logging_config import configure_logging
from .settings import AppSettings


class OptimizerFactory:
    """Factory for creating a configured UniversalOptimizer."""

    @staticmethod
    def create(settings: Optional[AppSettings] = None,
               config: Optional[IntelligenceConfig] = None,
               pattern_library: Optional[PatternLibrary] = None,
               setup_logging: bool = False) -> UniversalOptimizer:
        """
        Create an optimizer.

        Args:
            settings: Environment settings; read from the environment when omitted
            config: File-based configuration; loaded via settings when omitted
            pattern_library: Library to use instead of the built-in patterns
            setup_logging: Configure root logging from settings first

        Returns:
            UniversalOptimizer ready for concurrent optimize() calls
        """
        settings = settings or AppSettings()
        if setup_logging:
            configure_logging(settings.log_level, settings.log_format, settings.pipeline_log_level)

        config = settings.to_intelligence_config(config)
        logging.getLogger(__name__).info(
            f"Creating optimizer: {len(config.patterns.disabled)} disabled patterns, "
            f"{len(config.patterns.priority_overrides)} priority overrides"
        )
        return UniversalOptimizer(pattern_library=pattern_library, config=config)


def build_optimizer(settings: Optional[AppSettings] = None, setup_logging: bool = False) -> UniversalOptimizer:
    """Shortcut for OptimizerFactory.create()."""
    return OptimizerFactory.create(settings=settings, setup_logging=setup_logging)
