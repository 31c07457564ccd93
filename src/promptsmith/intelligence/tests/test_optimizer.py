"""
Tests for the UniversalOptimizer pipeline.

Covers:
- End-to-end optimization in fast and deep mode
- Determinism and empty input
- Failure isolation for patterns that raise
- Per-call configuration and explicit intents
- Deep-mode recommendations and statistics
"""

import asyncio
import logging

import pytest

from ...config import IntelligenceConfig
from ..optimizer import DEEP_MODE_SUGGESTION, UniversalOptimizer
from ..pattern_library import PatternLibrary
from ..patterns import BasePattern
from ..types import (
    AmbiguityLevel,
    ImpactLevel,
    IntentAnalysis,
    IntentCharacteristics,
    OptimizationMode,
    OptimizationResult,
    PatternPhase,
    PromptIntent,
    QualityDimension,
    QualityMetrics,
)


class MarkerPattern(BasePattern):
    id = 'marker'
    name = 'Marker'
    description = 'Appends a marker'
    applicable_intents = frozenset(PromptIntent)
    priority = 5

    def apply(self, prompt, context):
        return self.applied(prompt + " [marked]", QualityDimension.CLARITY, 'Marked', ImpactLevel.LOW)


class ExplodingPattern(BasePattern):
    id = 'exploding'
    name = 'Exploding'
    description = 'Always raises'
    applicable_intents = frozenset(PromptIntent)
    priority = 9

    def apply(self, prompt, context):
        raise RuntimeError("boom")


def make_result(overall=90, completeness=90, intent=PromptIntent.CODE_GENERATION,
                mode=OptimizationMode.FAST, original="x" * 80, characteristics=None):
    """Build a result with the given scores, bypassing the pipeline."""
    quality = QualityMetrics(clarity=90, efficiency=90, structure=90, completeness=completeness,
                             actionability=90, overall=overall)
    return OptimizationResult(
        original=original,
        enhanced=original,
        intent=IntentAnalysis(primary_intent=intent, confidence=90,
                              characteristics=characteristics or IntentCharacteristics()),
        quality=quality,
        improvements=[],
        applied_patterns=[],
        mode=mode,
    )


class TestUniversalOptimizer:
    """Test suite for UniversalOptimizer."""

    @pytest.fixture
    def optimizer(self):
        """Create optimizer with the built-in patterns."""
        return UniversalOptimizer()

    @pytest.mark.asyncio
    async def test_fast_mode_optimization(self, optimizer):
        """Test fast mode end to end."""
        result = await optimizer.optimize("Write a parser")

        assert result.original == "Write a parser"
        assert result.intent.primary_intent == PromptIntent.CODE_GENERATION
        assert result.mode == OptimizationMode.FAST
        assert "## Success Criteria" in result.enhanced
        assert len(result.improvements) == len(result.applied_patterns)
        assert result.applied_patterns
        assert result.quality.overall >= 0
        assert result.processing_time_ms >= 0

    @pytest.mark.asyncio
    async def test_deep_mode_adds_edge_cases_and_checklist(self, optimizer):
        """Test that deep mode adds edge cases before the checklist."""
        result = await optimizer.optimize("Write a function that parses the input file",
                                          mode=OptimizationMode.DEEP)

        assert "### Edge Cases to Consider" in result.enhanced
        assert "### Validation Checklist" in result.enhanced
        assert result.enhanced.index("### Edge Cases to Consider") < result.enhanced.index("### Validation Checklist")

    @pytest.mark.asyncio
    async def test_deterministic(self, optimizer):
        """Test that identical input gives identical output."""
        prompt = "Help me plan the architecture for a payment system"
        first = await optimizer.optimize(prompt, mode=OptimizationMode.DEEP)
        second = await UniversalOptimizer().optimize(prompt, mode=OptimizationMode.DEEP)

        assert first.enhanced == second.enhanced
        assert first.intent == second.intent
        assert first.quality == second.quality
        assert first.improvements == second.improvements
        assert first.applied_patterns == second.applied_patterns

    @pytest.mark.asyncio
    async def test_concurrent_invocations(self, optimizer):
        """Test concurrent optimize() calls on one optimizer."""
        prompts = ["Write a parser", "fix error in login", "Explain how the caching layer works"]
        results = await asyncio.gather(*(optimizer.optimize(p) for p in prompts))

        assert [r.original for r in results] == prompts
        assert optimizer.get_statistics()["optimizations_performed"] == 3

    @pytest.mark.asyncio
    async def test_empty_prompt(self, optimizer):
        """Test that empty input is a normal input."""
        result = await optimizer.optimize("")

        assert result.original == ""
        assert result.intent.primary_intent == PromptIntent.CODE_GENERATION
        assert result.intent.confidence == 50
        assert 0 <= result.quality.overall <= 100

    @pytest.mark.asyncio
    async def test_no_applicable_patterns_keeps_text(self):
        """Test that the text is unchanged when no pattern applies."""
        optimizer = UniversalOptimizer(pattern_library=PatternLibrary(patterns=[]))
        result = await optimizer.optimize("Write a parser")

        assert result.enhanced == "Write a parser"
        assert result.improvements == []
        assert result.applied_patterns == []

    @pytest.mark.asyncio
    async def test_failing_pattern_is_skipped(self, caplog):
        """Test that a raising pattern is logged and skipped."""
        library = PatternLibrary(patterns=[ExplodingPattern(), MarkerPattern()])
        optimizer = UniversalOptimizer(pattern_library=library)

        with caplog.at_level(logging.WARNING):
            result = await optimizer.optimize("Write a parser")

        assert result.enhanced == "Write a parser [marked]"
        assert [p.name for p in result.applied_patterns] == ["Marker"]
        assert optimizer.get_statistics()["pattern_failures"] == 1
        assert "Pattern exploding failed: RuntimeError: boom" in caplog.text

    @pytest.mark.asyncio
    async def test_per_call_config_disables_pattern(self, optimizer):
        """Test that a per-call config disables a pattern for that call only."""
        config = IntelligenceConfig.model_validate({"patterns": {"disabled": ["success-criteria-enforcer"]}})

        configured = await optimizer.optimize("Write a parser", config=config)
        assert "## Success Criteria" not in configured.enhanced

        # The optimizer's own library is untouched by a per-call config
        plain = await optimizer.optimize("Write a parser")
        assert "## Success Criteria" in plain.enhanced
        assert not optimizer.pattern_library.is_pattern_disabled("success-criteria-enforcer")

    @pytest.mark.asyncio
    async def test_startup_config_custom_settings(self):
        """Test custom pattern settings from the startup config."""
        config = IntelligenceConfig.model_validate({
            "patterns": {"customSettings": {"success-criteria-enforcer": {"showCheckboxes": False}}},
        })
        optimizer = UniversalOptimizer(config=config)
        result = await optimizer.optimize("Write a parser")

        assert "## Success Criteria" in result.enhanced
        assert "- Code runs without errors" in result.enhanced
        assert "- [ ] Code runs without errors" not in result.enhanced

    @pytest.mark.asyncio
    async def test_explicit_intent(self, optimizer):
        """Test that an explicit intent overrides detection."""
        result = await optimizer.optimize(
            "Build a habit tracker",
            mode=OptimizationMode.PRD,
            phase=PatternPhase.OUTPUT_GENERATION,
            intent=PromptIntent.PRD_GENERATION,
        )

        assert result.intent.primary_intent == PromptIntent.PRD_GENERATION
        assert result.intent.confidence == 100
        assert "### PRD Completeness Check" in result.enhanced

    @pytest.mark.asyncio
    async def test_explicit_intent_matching_detection(self, optimizer):
        """Test that an explicit intent equal to the detected one still gives confidence 100."""
        detected = optimizer.analyze_intent("course layout")
        assert detected.primary_intent == PromptIntent.LEARNING
        assert detected.confidence == 60

        result = await optimizer.optimize("course layout", intent=PromptIntent.LEARNING)
        assert result.intent.primary_intent == PromptIntent.LEARNING
        assert result.intent.confidence == 100
        assert result.intent.ambiguity == AmbiguityLevel.LOW

    @pytest.mark.asyncio
    async def test_explicit_intent_drives_characteristics(self, optimizer):
        """Test that intent-dependent fields follow the explicit intent."""
        prompt = "Write a function that must parse logs within one second; the goal is a fast pipeline"
        assert not optimizer.analyze_intent(prompt).characteristics.needs_structure

        result = await optimizer.optimize(prompt, intent=PromptIntent.PLANNING)
        assert result.intent.characteristics.needs_structure
        assert result.intent.suggested_mode == OptimizationMode.DEEP
        assert all(s.intent != PromptIntent.PLANNING for s in result.intent.secondary_intents)

    @pytest.mark.asyncio
    async def test_conversation_summarization(self, optimizer):
        """Test the summarization phase of conversational mode."""
        prompt = (
            "I want a tool that tracks reading habits.\n"
            "We need to support mobile and desktop.\n"
            "The goal is to help people read more.\n"
            "No more than 3 taps per entry."
        )
        result = await optimizer.optimize(
            prompt,
            mode=OptimizationMode.CONVERSATIONAL,
            phase=PatternPhase.SUMMARIZATION,
            intent=PromptIntent.SUMMARIZATION,
        )

        assert result.applied_patterns[0].name == "Conversation Summarizer"
        assert "### Extracted Requirements" in result.enhanced
        assert "**Goals:**\n- help people read more" in result.enhanced

    @pytest.mark.asyncio
    async def test_verbose_pattern_logs(self, caplog):
        """Test pattern logs at INFO with verbose_pattern_logs."""
        config = IntelligenceConfig(verbose_pattern_logs=True)
        optimizer = UniversalOptimizer(pattern_library=PatternLibrary(patterns=[MarkerPattern()]), config=config)

        with caplog.at_level(logging.INFO):
            await optimizer.optimize("Write a parser")

        assert "Pattern marker applied: Marked" in caplog.text

    @pytest.mark.asyncio
    async def test_result_to_dict(self, optimizer):
        """Test result serialization."""
        data = (await optimizer.optimize("fix error in login")).to_dict()

        assert data["intent"]["primary_intent"] == "debugging"
        assert data["mode"] == "fast"
        assert set(data["quality"]) >= {"clarity", "overall", "strengths", "remaining_issues"}

    def test_analyze_intent(self, optimizer):
        """Test intent analysis without applying patterns."""
        assert optimizer.analyze_intent("fix error in login").primary_intent == PromptIntent.DEBUGGING

    def test_statistics(self, optimizer):
        """Test optimizer statistics."""
        stats = optimizer.get_statistics()

        assert stats["total_patterns"] == 22
        assert stats["fast_mode_patterns"] == 12
        assert stats["deep_mode_patterns"] == 22
        assert stats["optimizations_performed"] == 0
        assert stats["pattern_failures"] == 0


class TestRecommendations:
    """Test suite for deep-mode recommendations."""

    @pytest.fixture
    def optimizer(self):
        """Create optimizer without patterns."""
        return UniversalOptimizer(pattern_library=PatternLibrary(patterns=[]))

    def test_planning_recommends_deep_mode(self, optimizer):
        """Test that planning prompts recommend deep mode."""
        result = make_result(intent=PromptIntent.PLANNING)
        assert optimizer.should_recommend_deep_mode(result)
        assert optimizer.get_recommendation(result) == DEEP_MODE_SUGGESTION

    def test_low_quality_recommends_deep_mode(self, optimizer):
        """Test that low quality recommends deep mode."""
        assert optimizer.should_recommend_deep_mode(make_result(overall=60))

    def test_open_ended_unstructured_recommends_deep_mode(self, optimizer):
        """Test that open-ended unstructured prompts recommend deep mode."""
        characteristics = IntentCharacteristics(is_open_ended=True, needs_structure=True)
        assert optimizer.should_recommend_deep_mode(make_result(characteristics=characteristics))

    def test_short_incomplete_prompt_recommends_deep_mode(self, optimizer):
        """Test the short incomplete prompt rule."""
        assert optimizer.should_recommend_deep_mode(make_result(original="fix it", completeness=60))
        assert not optimizer.should_recommend_deep_mode(make_result(original="fix it", completeness=80))

    def test_configured_thresholds(self):
        """Test escalation thresholds from the startup config."""
        config = IntelligenceConfig.model_validate({"escalation": {"qualityFloor": 50}})
        optimizer = UniversalOptimizer(pattern_library=PatternLibrary(patterns=[]), config=config)
        assert not optimizer.should_recommend_deep_mode(make_result(overall=60))

    def test_per_call_thresholds(self, optimizer):
        """Test escalation thresholds from a per-call config."""
        config = IntelligenceConfig.model_validate({"escalation": {"qualityFloor": 50}})
        result = make_result(overall=60)

        assert optimizer.should_recommend_deep_mode(result)
        assert not optimizer.should_recommend_deep_mode(result, config)
        assert optimizer.get_recommendation(result, config) is None

    def test_deep_mode_results_get_band_messages(self, optimizer):
        """Test that deep results get quality band messages."""
        result = make_result(intent=PromptIntent.PLANNING, mode=OptimizationMode.DEEP, overall=92)
        assert optimizer.get_recommendation(result) == "Excellent! Your prompt is AI-ready."

    @pytest.mark.parametrize("overall,message", [
        (90, "Excellent! Your prompt is AI-ready."),
        (85, "Good quality. Ready to use!"),
        (72, "Decent quality. Consider the improvements listed above."),
    ])
    def test_quality_bands(self, optimizer, overall, message):
        """Test the quality band messages."""
        assert optimizer.get_recommendation(make_result(overall=overall)) == message

    def test_no_recommendation(self, optimizer):
        """Test that low-quality deep results get no message."""
        result = make_result(overall=60, mode=OptimizationMode.DEEP)
        assert optimizer.get_recommendation(result) is None
