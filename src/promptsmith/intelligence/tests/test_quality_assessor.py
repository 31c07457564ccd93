"""
Tests for the quality assessor.

Scores are heuristic; the expected values below follow directly from the
deductions documented in quality_assessor.
"""

import pytest

from ..quality_assessor import QualityAssessor, assess_quality
from ..types import IntentAnalysis, PromptIntent


def analysis(intent=PromptIntent.CODE_GENERATION):
    """Build an explicit analysis for the given intent."""
    return IntentAnalysis(primary_intent=intent, confidence=100)


class TestQualityAssessor:
    """Test suite for QualityAssessor."""

    @pytest.fixture
    def assessor(self):
        """Create quality assessor instance."""
        return QualityAssessor()

    def test_clarity_penalizes_missing_objective_and_criteria(self, assessor):
        """Test clarity deductions for a bare prompt."""
        score = assessor.assess_clarity("Write a parser", PromptIntent.CODE_GENERATION)
        assert score <= 70
        assert score == 40

    def test_clarity_with_objective_and_criteria(self, assessor):
        """Test clarity with an objective and criteria."""
        prompt = "Goal: write a Python parser that returns a dict; verify it with tests"
        assert assessor.assess_clarity(prompt, PromptIntent.CODE_GENERATION) == 100

    def test_scores_are_clamped(self, assessor):
        """Test that scores are clamped."""
        assert assessor.assess_clarity("something " * 15, PromptIntent.PLANNING) == 0
        assert assessor.assess_structure("## Context\nWe currently need output", PromptIntent.PLANNING) == 100

    def test_efficiency_deductions(self, assessor):
        """Test efficiency deductions."""
        # one pleasantry (-5), one filler word (-3), signal ratio of 0.75 costs nothing
        assert assessor.assess_efficiency("Please just write it") == 92

    def test_structure_of_empty_prompt(self, assessor):
        """Test structure of an empty prompt."""
        assert assessor.assess_structure("", PromptIntent.CODE_GENERATION) == 40

    def test_completeness_per_intent(self, assessor):
        """Test completeness per intent."""
        assert assessor.assess_completeness("Write a parser", PromptIntent.CODE_GENERATION) == 50
        assert assessor.assess_completeness(
            "The parser throws an error but it should return a list", PromptIntent.DEBUGGING
        ) == 100
        assert assessor.assess_completeness("anything", PromptIntent.SUMMARIZATION) == 100

    def test_question_overload(self, assessor):
        """Test the question overload deduction."""
        # no success criteria (-20), three questions over the limit (-15)
        assert assessor.assess_actionability("a? b? c? d? e? f?", PromptIntent.LEARNING) == 65

    def test_full_assessment(self, assessor):
        """Test a full assessment."""
        metrics = assessor.assess("Write a parser", "Write a parser", analysis())

        assert metrics.scores() == {
            "clarity": 40,
            "efficiency": 85,
            "structure": 40,
            "completeness": 50,
            "actionability": 65,
            "overall": 54,
        }
        assert metrics.strengths == ["Concise and focused"]
        assert len(metrics.remaining_issues) == 4
        assert metrics.improvements == []

    def test_empty_text_does_not_raise(self, assessor):
        """Test that empty text is assessed without error."""
        metrics = assessor.assess("", "", analysis())
        assert 0 <= metrics.overall <= 100


class TestQualityWeights:
    """Test suite for per-intent quality weights."""

    def test_valid_override_replaces_intent_weights(self):
        """Test that a valid override replaces intent weights."""
        assessor = QualityAssessor(weights_by_intent={
            "code-generation": {
                "clarity": 100, "efficiency": 0, "structure": 0, "completeness": 0, "actionability": 0,
            },
        })
        metrics = assessor.assess("Write a parser", "Write a parser", analysis())
        assert metrics.overall == metrics.clarity == 40

    @pytest.mark.parametrize("weights", [
        {"clarity": 50, "efficiency": 40},
        {"clarity": 30, "efficiency": 30, "structure": 10, "completeness": 10, "actionability": 10},
        {"clarity": -10, "efficiency": 50, "structure": 20, "completeness": 20, "actionability": 20},
        "heavy on clarity",
    ])
    def test_invalid_override_is_ignored(self, weights):
        """Test that invalid overrides are ignored."""
        assessor = QualityAssessor(weights_by_intent={"code-generation": weights})
        metrics = assessor.assess("Write a parser", "Write a parser", analysis())
        assert metrics.overall == 54

    def test_unknown_intent_is_ignored(self):
        """Test that unknown intents are ignored."""
        assessor = QualityAssessor(weights_by_intent={"poetry": {"clarity": 100}})
        assert PromptIntent.CODE_GENERATION in assessor.weights

    def test_default_weights_apply_to_unlisted_intents(self):
        """Test default weights for unlisted intents."""
        assessor = QualityAssessor(default_weights={
            "clarity": 0, "efficiency": 0, "structure": 0, "completeness": 100, "actionability": 0,
        })
        metrics = assessor.assess("Summarize this", "Summarize this", analysis(PromptIntent.SUMMARIZATION))
        assert metrics.overall == metrics.completeness == 100


class TestImprovements:
    """Test suite for improvement detection."""

    def test_new_sections_are_reported(self):
        """Test that added sections are reported."""
        original = "Write a parser"
        enhanced = "# Objective\nParse logs\n\nWrite a parser\n\n## Success Criteria\n\n- [ ] Tests pass"

        assert QualityAssessor.identify_improvements(original, enhanced) == [
            "Added missing context and specifications",
            "Added Objective section",
            "Added Success Criteria section",
        ]

    def test_existing_sections_are_not_reported(self):
        """Test that existing sections are not reported."""
        original = "## Objective\nParse logs"
        assert QualityAssessor.identify_improvements(original, original) == []


def test_assess_quality_helper():
    """Test the assess_quality helper."""

    """Test the assess_quality helper."""
    scores = assess_quality("Write a parser", PromptIntent.CODE_GENERATION)
    assert scores["overall"] == 54
    assert scores["clarity"] == 40
