"""
Tests for the pattern library and the pattern scheduler.

Covers:
- Registration, mode queries and configuration snapshots
- Disabled patterns and priority overrides
- excludesWith resolution and runAfter ordering
- Composite mode mapping and phase filtering
"""

import pytest

from ..pattern_library import PatternLibrary
from ..pattern_scheduler import PatternScheduler, resolve_pattern_mode
from ..patterns import BasePattern, PatternDependency
from ..types import (
    ImpactLevel,
    IntentAnalysis,
    OptimizationMode,
    PatternMode,
    PatternPhase,
    PromptIntent,
    QualityDimension,
)


def fake_pattern(pattern_id, priority=5, mode=PatternMode.BOTH, run_after=(), excludes_with=(),
                 phases=(PatternPhase.ALL,), intents=(PromptIntent.CODE_GENERATION,)):
    """Build a pattern that appends its id to the prompt."""

    def apply(self, prompt, context):
        return self.applied(f"{prompt}[{self.id}]", QualityDimension.CLARITY,
                            f"{self.id} ran", ImpactLevel.LOW)

    cls = type(f"Fake_{pattern_id}", (BasePattern,), {
        "id": pattern_id,
        "name": pattern_id.title(),
        "description": f"Test pattern {pattern_id}",
        "applicable_intents": frozenset(intents),
        "mode": mode,
        "priority": priority,
        "phases": frozenset(phases),
        "dependencies": PatternDependency(run_after=tuple(run_after), excludes_with=tuple(excludes_with)),
        "apply": apply,
    })
    return cls()


def ids(patterns):
    """Ids of the given patterns, in order."""
    return [p.id for p in patterns]


@pytest.fixture
def analysis():
    """Create a code-generation analysis."""
    return IntentAnalysis(primary_intent=PromptIntent.CODE_GENERATION, confidence=80)


class TestPatternLibrary:
    """Test suite for PatternLibrary."""

    def test_default_library(self):
        """Test the built-in pattern set."""
        library = PatternLibrary()

        assert library.get_pattern_count() == 22
        assert len(library.get_patterns_by_mode(PatternMode.FAST)) == 12
        assert len(library.get_patterns_by_mode(PatternMode.DEEP)) == 22
        assert library.get("objective-clarifier") is not None

    def test_reregistering_replaces(self):
        """Test that registering an existing id replaces it."""
        library = PatternLibrary(patterns=[fake_pattern("a", priority=3)])
        library.register(fake_pattern("a", priority=6))

        assert library.get_pattern_count() == 1
        assert library.get("a").priority == 6

    def test_invalid_priority_overrides_are_ignored(self):
        """Test that out-of-range and non-integer overrides are ignored."""
        library = PatternLibrary(patterns=[fake_pattern("a"), fake_pattern("b"), fake_pattern("c")])
        library.apply_config(priority_overrides={"a": 11, "b": "high", "c": 3, "d": True})

        assert library.priority_overrides == {"c": 3}
        assert library.get_effective_priority(library.get("a")) == 5
        assert library.get_effective_priority(library.get("c")) == 3

    def test_overrides_do_not_mutate_patterns(self):
        """Test that overrides leave pattern metadata untouched."""
        library = PatternLibrary(patterns=[fake_pattern("a", priority=4)])
        library.apply_config(priority_overrides={"a": 9})

        assert library.get("a").priority == 4
        assert library.get_effective_priority(library.get("a")) == 9

    def test_configured_snapshot_is_independent(self):
        """Test that a configured snapshot does not change the library."""
        library = PatternLibrary(patterns=[fake_pattern("a"), fake_pattern("b")])
        snapshot = library.configured(disabled=["a"], priority_overrides={"b": 2})

        assert snapshot.is_pattern_disabled("a")
        assert not library.is_pattern_disabled("a")
        assert library.priority_overrides == {}
        assert snapshot.get_pattern_count() == 2

    def test_statistics(self):
        """Test library statistics."""
        library = PatternLibrary(patterns=[fake_pattern("a"), fake_pattern("b", mode=PatternMode.DEEP)])
        library.apply_config(disabled=["b"])

        assert library.get_statistics() == {"total": 2, "fast": 1, "deep": 2, "disabled": 1}


class TestPatternScheduler:
    """Test suite for PatternScheduler."""

    def test_priority_order_with_id_tiebreak(self, analysis):
        """Test priority ordering with id as the tie-break."""
        library = PatternLibrary(patterns=[
            fake_pattern("low", priority=2),
            fake_pattern("zeta", priority=7),
            fake_pattern("alpha", priority=7),
        ])
        selected = PatternScheduler(library).select_patterns(analysis, OptimizationMode.FAST)
        assert ids(selected) == ["alpha", "zeta", "low"]

    def test_intent_and_mode_filtering(self, analysis):
        """Test filtering by intent and mode."""
        library = PatternLibrary(patterns=[
            fake_pattern("generic"),
            fake_pattern("deep-only", mode=PatternMode.DEEP),
            fake_pattern("debug-only", intents=(PromptIntent.DEBUGGING,)),
        ])
        scheduler = PatternScheduler(library)

        assert ids(scheduler.select_patterns(analysis, OptimizationMode.FAST)) == ["generic"]
        assert ids(scheduler.select_patterns(analysis, OptimizationMode.DEEP)) == ["deep-only", "generic"]

    def test_disabled_pattern_is_never_selected(self, analysis):
        """Test that disabled patterns are never selected."""
        library = PatternLibrary(patterns=[fake_pattern("a"), fake_pattern("b")])
        library.apply_config(disabled=["a"])

        assert ids(PatternScheduler(library).select_patterns(analysis, OptimizationMode.FAST)) == ["b"]

    def test_priority_override_changes_order(self, analysis):
        """Test that a priority override changes the order."""
        library = PatternLibrary(patterns=[fake_pattern("a", priority=8), fake_pattern("b", priority=3)])
        library.apply_config(priority_overrides={"b": 10})

        assert ids(PatternScheduler(library).select_patterns(analysis, OptimizationMode.FAST)) == ["b", "a"]

    def test_exclusion_keeps_higher_priority(self, analysis):
        """Test that exclusion keeps the higher-priority pattern."""
        library = PatternLibrary(patterns=[
            fake_pattern("a", priority=8, excludes_with=("b",)),
            fake_pattern("b", priority=5),
            fake_pattern("c", priority=1),
        ])
        assert ids(PatternScheduler(library).select_patterns(analysis, OptimizationMode.FAST)) == ["a", "c"]

    def test_exclusion_declared_by_lower_priority(self, analysis):
        """Test exclusion declared by the lower-priority pattern."""
        library = PatternLibrary(patterns=[
            fake_pattern("a", priority=8),
            fake_pattern("b", priority=5, excludes_with=("a",)),
        ])
        assert ids(PatternScheduler(library).select_patterns(analysis, OptimizationMode.FAST)) == ["a"]

    def test_exclusion_of_unselected_pattern_is_harmless(self, analysis):
        """Test exclusion naming a pattern that was not selected."""
        library = PatternLibrary(patterns=[
            fake_pattern("a", priority=8, excludes_with=("b",)),
            fake_pattern("b", priority=5, intents=(PromptIntent.DEBUGGING,)),
            fake_pattern("c", priority=3),
        ])
        assert ids(PatternScheduler(library).select_patterns(analysis, OptimizationMode.FAST)) == ["a", "c"]

    def test_run_after_places_dependency_first(self, analysis):
        """Test that runAfter places the dependency first."""
        library = PatternLibrary(patterns=[
            fake_pattern("x", priority=9, run_after=("y",)),
            fake_pattern("y", priority=2),
            fake_pattern("z", priority=5),
        ])
        assert ids(PatternScheduler(library).select_patterns(analysis, OptimizationMode.FAST)) == ["y", "x", "z"]

    def test_unselected_dependency_is_ignored(self, analysis):
        """Test that a missing runAfter dependency is ignored."""
        library = PatternLibrary(patterns=[
            fake_pattern("x", priority=9, run_after=("missing",)),
            fake_pattern("z", priority=5),
        ])
        assert ids(PatternScheduler(library).select_patterns(analysis, OptimizationMode.FAST)) == ["x", "z"]

    def test_cycle_terminates(self, analysis):
        """Test that a runAfter cycle still places every pattern once."""
        library = PatternLibrary(patterns=[
            fake_pattern("p", priority=9, run_after=("q",)),
            fake_pattern("q", priority=5, run_after=("p",)),
        ])
        selected = PatternScheduler(library).select_patterns(analysis, OptimizationMode.FAST)

        assert sorted(ids(selected)) == ["p", "q"]
        assert len(selected) == 2

    def test_phase_restricted_pattern_needs_matching_phase(self, analysis):
        """Test phase filtering."""
        library = PatternLibrary(patterns=[
            fake_pattern("always"),
            fake_pattern("output-only", phases=(PatternPhase.OUTPUT_GENERATION,)),
        ])
        scheduler = PatternScheduler(library)

        assert ids(scheduler.select_patterns(analysis, OptimizationMode.DEEP)) == ["always"]
        assert ids(scheduler.select_patterns(
            analysis, OptimizationMode.DEEP, PatternPhase.OUTPUT_GENERATION
        )) == ["always", "output-only"]
        assert ids(scheduler.select_patterns(
            analysis, OptimizationMode.DEEP, PatternPhase.QUESTION_VALIDATION
        )) == ["always"]

    def test_builtin_prd_selection(self):
        """Test built-in selection for each PRD phase."""
        analysis = IntentAnalysis(primary_intent=PromptIntent.PRD_GENERATION, confidence=100)
        scheduler = PatternScheduler(PatternLibrary())

        output_phase = ids(scheduler.select_patterns(
            analysis, OptimizationMode.PRD, PatternPhase.OUTPUT_GENERATION
        ))
        assert "prd-structure-enforcer" in output_phase
        assert "requirement-prioritizer" in output_phase
        assert "structure-organizer" not in output_phase

        # Question validation maps onto fast mode, so deep-only patterns drop out
        question_phase = ids(scheduler.select_patterns(
            analysis, OptimizationMode.PRD, PatternPhase.QUESTION_VALIDATION
        ))
        assert "prd-structure-enforcer" not in question_phase
        assert "ambiguity-detector" in question_phase

    def test_builtin_run_after_ordering(self, analysis):
        """Test runAfter ordering among built-in patterns."""
        selected = ids(PatternScheduler(PatternLibrary()).select_patterns(analysis, OptimizationMode.DEEP))

        assert selected.index("objective-clarifier") < selected.index("structure-organizer")
        assert selected.index("success-criteria-enforcer") < selected.index("completeness-validator")
        assert selected.index("edge-case-identifier") < selected.index("validation-checklist-creator")

    def test_builtin_conversational_selection(self):
        """Test built-in selection for each conversational phase."""
        analysis = IntentAnalysis(primary_intent=PromptIntent.SUMMARIZATION, confidence=100)
        scheduler = PatternScheduler(PatternLibrary())

        assert ids(scheduler.select_patterns(
            analysis, OptimizationMode.CONVERSATIONAL, PatternPhase.SUMMARIZATION
        )) == ["conversation-summarizer", "topic-coherence-analyzer", "implicit-requirement-extractor"]

        # Tracking maps onto fast mode, so the summarizer waits for the summary phase
        assert ids(scheduler.select_patterns(
            analysis, OptimizationMode.CONVERSATIONAL, PatternPhase.CONVERSATION_TRACKING
        )) == ["topic-coherence-analyzer", "implicit-requirement-extractor"]


class TestModeResolution:
    """Test suite for resolve_pattern_mode."""

    @pytest.mark.parametrize("mode,phase,expected", [
        (OptimizationMode.FAST, None, PatternMode.FAST),
        (OptimizationMode.DEEP, None, PatternMode.DEEP),
        (OptimizationMode.PRD, PatternPhase.QUESTION_VALIDATION, PatternMode.FAST),
        (OptimizationMode.PRD, PatternPhase.OUTPUT_GENERATION, PatternMode.DEEP),
        (OptimizationMode.PRD, None, PatternMode.DEEP),
        (OptimizationMode.CONVERSATIONAL, PatternPhase.CONVERSATION_TRACKING, PatternMode.FAST),
        (OptimizationMode.CONVERSATIONAL, PatternPhase.SUMMARIZATION, PatternMode.DEEP),
    ])
    def test_resolve_pattern_mode(self, mode, phase, expected):
        """Test composite mode mapping."""
        assert resolve_pattern_mode(mode, phase) == expected
