"""
Universal optimizer: the prompt intelligence pipeline end to end.

optimize() runs, strictly in sequence:
1. intent detection
2. pattern selection and ordering for the intent, mode and phase
3. pattern application, each pattern reading the previous one's output
4. quality assessment of the original against the final text

A failing pattern is logged and skipped; it never aborts the run.
"""

import logging
import time
from typing import TYPE_CHECKING, Dict, List, Optional

from ..errors import PatternError
from .intent_detector import IntentDetector
from .pattern_library import PatternLibrary
from .pattern_scheduler import PatternScheduler
from .patterns import BasePattern
from .quality_assessor import QualityAssessor
from .types import (
    Improvement,
    IntentAnalysis,
    OptimizationMode,
    OptimizationResult,
    PatternContext,
    PatternMode,
    PatternPhase,
    PatternSummary,
    PromptIntent,
)

if TYPE_CHECKING:
    from ..config import IntelligenceConfig

DEFAULT_QUALITY_FLOOR = 65
DEFAULT_SHORT_PROMPT_LENGTH = 50
DEFAULT_COMPLETENESS_FLOOR = 70

DEEP_MODE_SUGGESTION = (
    "This prompt would benefit from comprehensive analysis. "
    "Re-run in deep mode for edge cases and a validation checklist."
)


class UniversalOptimizer:
    """Detects intent, applies transformation patterns and scores the result."""

    def __init__(self, intent_detector: Optional[IntentDetector] = None,
                 pattern_library: Optional[PatternLibrary] = None,
                 quality_assessor: Optional[QualityAssessor] = None,
                 config: Optional["IntelligenceConfig"] = None):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.config = config

        self.intent_detector = intent_detector or IntentDetector()
        library = pattern_library or PatternLibrary()
        # Startup configuration is baked into a snapshot; the passed library stays untouched
        self.pattern_library = self._configured_library(library, config) if config else library
        self.quality_assessor = quality_assessor or self._build_quality_assessor(config)

        # Statistics tracking
        self.optimizations_performed = 0
        self.pattern_failures = 0

        self.logger.info(
            f"UniversalOptimizer initialized with {self.pattern_library.get_pattern_count()} patterns"
        )

    @staticmethod
    def _configured_library(library: PatternLibrary, config: "IntelligenceConfig") -> PatternLibrary:
        return library.configured(
            disabled=config.patterns.disabled,
            priority_overrides=config.patterns.priority_overrides,
            custom_settings=config.patterns.custom_settings,
        )

    @staticmethod
    def _build_quality_assessor(config: Optional["IntelligenceConfig"]) -> QualityAssessor:
        if config is None or config.quality_weights is None:
            return QualityAssessor()
        return QualityAssessor(
            weights_by_intent=config.quality_weights.by_intent,
            default_weights=config.quality_weights.defaults,
        )

    async def optimize(self, prompt: str, mode: OptimizationMode = OptimizationMode.FAST,
                       phase: Optional[PatternPhase] = None,
                       config: Optional["IntelligenceConfig"] = None,
                       intent: Optional[PromptIntent] = None) -> OptimizationResult:
        """
        Optimize a prompt.

        Args:
            prompt: Raw prompt text; empty text is a normal input
            mode: Processing depth
            phase: Workflow phase, selects phase-restricted patterns
            config: Per-call configuration, replacing the optimizer's own for this call
            intent: Explicit intent (e.g. prd-generation) overriding detection

        Returns:
            OptimizationResult with the enhanced text and quality metrics
        """
        start_time = time.perf_counter()
        prompt = prompt or ""
        self.optimizations_performed += 1

        active_config = config or self.config
        library = self._configured_library(self.pattern_library, config) if config else self.pattern_library
        assessor = self._build_quality_assessor(config) if config and config.quality_weights else self.quality_assessor
        verbose = bool(active_config and active_config.verbose_pattern_logs)

        analysis = self.intent_detector.analyze(prompt, intent=intent)

        patterns = PatternScheduler(library).select_patterns(analysis, mode, phase)

        context = PatternContext(
            intent=analysis,
            mode=mode,
            original_prompt=prompt,
            phase=phase,
            custom_settings=library.custom_settings,
        )
        enhanced, improvements, applied_patterns = self._apply_patterns(prompt, patterns, context, verbose)

        quality = assessor.assess(prompt, enhanced, analysis)
        processing_time_ms = int((time.perf_counter() - start_time) * 1000)

        self.logger.debug(
            f"Optimized prompt in {processing_time_ms}ms: intent={analysis.primary_intent.value}, "
            f"{len(applied_patterns)}/{len(patterns)} patterns applied, overall quality {quality.overall}"
        )

        return OptimizationResult(
            original=prompt,
            enhanced=enhanced,
            intent=analysis,
            quality=quality,
            improvements=improvements,
            applied_patterns=applied_patterns,
            mode=mode,
            processing_time_ms=processing_time_ms,
        )

    def _apply_patterns(self, prompt: str, patterns: List[BasePattern], context: PatternContext,
                        verbose: bool):
        level = logging.INFO if verbose else logging.DEBUG
        enhanced = prompt
        improvements: List[Improvement] = []
        applied_patterns: List[PatternSummary] = []

        for pattern in patterns:
            try:
                result = pattern.apply(enhanced, context)
            except Exception as e:
                self.pattern_failures += 1
                self.logger.warning(str(PatternError(pattern.id, e)), extra={"pattern_id": pattern.id})
                continue

            if not result.applied:
                self.logger.log(level, f"Pattern {pattern.id} skipped: {result.improvement.description}")
                continue

            enhanced = result.enhanced_prompt
            improvements.append(result.improvement)
            applied_patterns.append(PatternSummary(
                name=pattern.name,
                description=pattern.description,
                impact=result.improvement.impact,
            ))
            self.logger.log(level, f"Pattern {pattern.id} applied: {result.improvement.description}")

        return enhanced, improvements, applied_patterns

    # ------------------------------------------------------------------
    # Recommendations
    # ------------------------------------------------------------------

    def _escalation_thresholds(self, config: Optional["IntelligenceConfig"] = None):
        active_config = config or self.config
        if active_config is None:
            return DEFAULT_QUALITY_FLOOR, DEFAULT_SHORT_PROMPT_LENGTH, DEFAULT_COMPLETENESS_FLOOR
        escalation = active_config.escalation
        return escalation.quality_floor, escalation.short_prompt_length, escalation.completeness_floor

    def should_recommend_deep_mode(self, result: OptimizationResult,
                                   config: Optional["IntelligenceConfig"] = None) -> bool:
        """Escalation thresholds come from the per-call config when given, else the optimizer's."""
        quality_floor, short_prompt_length, completeness_floor = self._escalation_thresholds(config)
        characteristics = result.intent.characteristics

        if result.intent.primary_intent == PromptIntent.PLANNING:
            return True
        if result.quality.overall < quality_floor:
            return True
        if characteristics.is_open_ended and characteristics.needs_structure:
            return True
        if len(result.original) < short_prompt_length and result.quality.completeness < completeness_floor:
            return True
        return False

    def get_recommendation(self, result: OptimizationResult,
                           config: Optional["IntelligenceConfig"] = None) -> Optional[str]:
        if result.mode == OptimizationMode.FAST and self.should_recommend_deep_mode(result, config):
            return DEEP_MODE_SUGGESTION
        if result.quality.overall >= 90:
            return "Excellent! Your prompt is AI-ready."
        if result.quality.overall >= 80:
            return "Good quality. Ready to use!"
        if result.quality.overall >= 70:
            return "Decent quality. Consider the improvements listed above."
        return None

    def analyze_intent(self, prompt: str) -> IntentAnalysis:
        """Intent detection only, without applying patterns."""
        return self.intent_detector.analyze(prompt or "")

    def get_statistics(self) -> Dict[str, int]:
        return {
            "total_patterns": self.pattern_library.get_pattern_count(),
            "fast_mode_patterns": len(self.pattern_library.get_patterns_by_mode(PatternMode.FAST)),
            "deep_mode_patterns": len(self.pattern_library.get_patterns_by_mode(PatternMode.DEEP)),
            "optimizations_performed": self.optimizations_performed,
            "pattern_failures": self.pattern_failures,
        }
