"""promptsmith - deterministic prompt analysis, rewriting and quality scoring."""

from .config import IntelligenceConfig
from .errors import ConfigError, PatternError, PromptsmithError
from .factory import OptimizerFactory, build_optimizer
from .intelligence import (
    IntentDetector,
    OptimizationMode,
    OptimizationResult,
    PatternLibrary,
    PromptIntent,
    QualityAssessor,
    UniversalOptimizer,
)

__all__ = [
    "IntelligenceConfig",
    "ConfigError",
    "PatternError",
    "PromptsmithError",
    "OptimizerFactory",
    "build_optimizer",
    "IntentDetector",
    "OptimizationMode",
    "OptimizationResult",
    "PatternLibrary",
    "PromptIntent",
    "QualityAssessor",
    "UniversalOptimizer",
]

__version__ = "1.0.0"
