"""
Prompt intelligence pipeline for promptsmith

This package provides deterministic prompt analysis and rewriting:
- Intent detection with calibrated confidence
- Pattern library with priority overrides and disabled patterns
- Dependency-aware pattern scheduling
- Multi-dimensional quality assessment
- The end-to-end UniversalOptimizer
"""

from .confidence import (
    ConfidenceResult,
    additive_confidence,
    clamp_confidence,
    competition_penalty,
    create_confidence_result,
    get_confidence_category,
    ratio_confidence,
    weighted_confidence,
)
from .intent_detector import IntentDetector
from .optimizer import UniversalOptimizer
from .pattern_library import PatternLibrary
from .pattern_scheduler import PatternScheduler, resolve_pattern_mode
from .patterns import BasePattern, PatternDependency, default_patterns
from .quality_assessor import QualityAssessor, assess_quality
from .types import (
    AmbiguityLevel,
    ImpactLevel,
    Improvement,
    IntentAnalysis,
    IntentCharacteristics,
    OptimizationMode,
    OptimizationResult,
    PatternContext,
    PatternMode,
    PatternPhase,
    PatternResult,
    PatternSummary,
    PromptIntent,
    QualityDimension,
    QualityMetrics,
    SecondaryIntent,
)

__all__ = [
    'ConfidenceResult',
    'additive_confidence',
    'clamp_confidence',
    'competition_penalty',
    'create_confidence_result',
    'get_confidence_category',
    'ratio_confidence',
    'weighted_confidence',
    'IntentDetector',
    'UniversalOptimizer',
    'PatternLibrary',
    'PatternScheduler',
    'resolve_pattern_mode',
    'BasePattern',
    'PatternDependency',
    'default_patterns',
    'QualityAssessor',
    'assess_quality',
    'AmbiguityLevel',
    'ImpactLevel',
    'Improvement',
    'IntentAnalysis',
    'IntentCharacteristics',
    'OptimizationMode',
    'OptimizationResult',
    'PatternContext',
    'PatternMode',
    'PatternPhase',
    'PatternResult',
    'PatternSummary',
    'PromptIntent',
    'QualityDimension',
    'QualityMetrics',
    'SecondaryIntent',
]
