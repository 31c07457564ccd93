"""
Quality assessment for prompts.

Scores a prompt on five dimensions, each clamped to 0-100:
- clarity: objective, tech stack, output format, success criteria, vague terms
- efficiency: pleasantries, filler words, signal-to-noise ratio
- structure: context, requirements and output sections, header bonus
- completeness: intent-specific checklist
- actionability: ambiguous terms, examples, success criteria, question overload

The overall score is an intent-weighted sum of the five.
"""

import logging
import re
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .confidence import round_half_up
from .types import IntentAnalysis, PromptIntent, QualityMetrics

DIMENSIONS = ('clarity', 'efficiency', 'structure', 'completeness', 'actionability')

DEFAULT_WEIGHTS: Dict[Optional[PromptIntent], Dict[str, float]] = {
    PromptIntent.CODE_GENERATION: {
        'clarity': 0.25, 'completeness': 0.30, 'actionability': 0.25, 'efficiency': 0.10, 'structure': 0.10,
    },
    PromptIntent.PLANNING: {
        'structure': 0.30, 'completeness': 0.30, 'clarity': 0.25, 'efficiency': 0.10, 'actionability': 0.05,
    },
    PromptIntent.DEBUGGING: {
        'actionability': 0.35, 'completeness': 0.30, 'clarity': 0.20, 'structure': 0.10, 'efficiency': 0.05,
    },
    None: {
        'clarity': 0.20, 'efficiency': 0.15, 'structure': 0.20, 'completeness': 0.25, 'actionability': 0.20,
    },
}

STRENGTH_THRESHOLD = 85
ISSUE_THRESHOLD = 70
GROWTH_RATIO = 1.2

VAGUE_TERMS = ['something', 'somehow', 'maybe', 'kind of', 'sort of', 'stuff', 'things']
PLEASANTRIES = ['please', 'thank you', 'thanks', 'could you', 'would you']
FILLER_WORDS = ['very', 'really', 'just', 'basically', 'simply', 'actually', 'literally']
AMBIGUOUS_TERMS = ['etc', 'and so on', 'or something', 'whatever', 'anything']
TECH_TERMS = [
    'python', 'javascript', 'typescript', 'java', 'rust', 'golang', 'php',
    'react', 'vue', 'angular', 'django', 'flask', 'fastapi', 'express', 'spring',
]
STOP_WORDS = frozenset({
    'the', 'a', 'an', 'and', 'or', 'but', 'in', 'on', 'at', 'to', 'for',
    'of', 'with', 'by', 'from', 'as', 'is', 'was', 'are', 'were', 'been',
    'be', 'have', 'has', 'had', 'do', 'does', 'did', 'will', 'would', 'could',
    'should', 'may', 'might', 'can', 'this', 'that', 'these', 'those',
})

OBJECTIVE = re.compile(r"objective|goal|purpose|need to|want to", re.IGNORECASE)
OUTPUT_FORMAT = re.compile(r"output|return|result|format|structure|response", re.IGNORECASE)
SUCCESS_CRITERIA = re.compile(r"success|criteria|metric|measure|test|verify|validate", re.IGNORECASE)
EXAMPLES = re.compile(r"example|for instance|such as|\blike\b|e\.g\.|```", re.IGNORECASE)
HEADER = re.compile(r"^#{1,6}\s+(.+?)\s*$", re.MULTILINE)

# (deduction, regex that must match) per intent
COMPLETENESS_CHECKS: Dict[PromptIntent, List[Tuple[int, re.Pattern]]] = {
    PromptIntent.CODE_GENERATION: [
        (20, re.compile("|".join(TECH_TERMS), re.IGNORECASE)),
        (20, re.compile(r"input|output|parameter|argument|return", re.IGNORECASE)),
        (10, re.compile(r"edge case|empty|null|zero|negative|invalid|error", re.IGNORECASE)),
    ],
    PromptIntent.PLANNING: [
        (25, re.compile(r"problem|issue|challenge|currently|pain point", re.IGNORECASE)),
        (25, re.compile(r"goal|objective|aim|purpose|achieve|accomplish", re.IGNORECASE)),
        (15, re.compile(r"constraint|limit|must not|cannot|within|maximum|minimum", re.IGNORECASE)),
    ],
    PromptIntent.DEBUGGING: [
        (20, re.compile(r"error", re.IGNORECASE)),
        (15, re.compile(r"expected|should|supposed to|intended", re.IGNORECASE)),
        (15, re.compile(r"actual|currently|instead|\bbut\b|however|getting", re.IGNORECASE)),
    ],
    PromptIntent.TESTING: [
        (20, re.compile(r"pytest|unittest|jest|vitest|mocha|junit|rspec|framework", re.IGNORECASE)),
        (15, re.compile(r"coverage|\d+\s*%", re.IGNORECASE)),
        (15, re.compile(r"scenario|edge case|happy path|failure case|test case", re.IGNORECASE)),
    ],
    PromptIntent.MIGRATION: [
        (25, re.compile(r"\bfrom\b.+\bto\b", re.IGNORECASE | re.DOTALL)),
        (20, re.compile(r"rollback|roll back|revert|fallback", re.IGNORECASE)),
        (15, re.compile(r"data|schema|record", re.IGNORECASE)),
    ],
    PromptIntent.SECURITY_REVIEW: [
        (20, re.compile(r"endpoint|module|file|service|\bapi\b|scope|component", re.IGNORECASE)),
        (15, re.compile(r"owasp|cwe|threat|standard|compliance", re.IGNORECASE)),
        (15, re.compile(r"severity|priorit|critical|risk", re.IGNORECASE)),
    ],
    PromptIntent.DOCUMENTATION: [
        (20, re.compile(r"audience|reader|developer|beginner|user", re.IGNORECASE)),
        (20, re.compile(r"example|sample|snippet|```", re.IGNORECASE)),
    ],
}

STRENGTH_MESSAGES = {
    'clarity': 'Clear objective and goals',
    'efficiency': 'Concise and focused',
    'structure': 'Well-structured with logical flow',
    'completeness': 'Comprehensive with all necessary details',
    'actionability': 'Immediately actionable',
}

ISSUE_MESSAGES = {
    'clarity': 'Clarity is low: state the objective, output format and success criteria',
    'efficiency': 'Efficiency is low: remove pleasantries and filler words',
    'structure': 'Structure is low: add context, requirements and expected output sections',
    'completeness': 'Completeness is low: add the details this kind of task needs',
    'actionability': 'Actionability is low: replace vague terms with concrete examples and criteria',
}


def _clamp(score: float) -> int:
    return max(0, min(100, round_half_up(score)))


def _count_occurrences(lower_text: str, terms: List[str]) -> int:
    """Whole-word occurrences of each term, summed."""
    return sum(len(re.findall(rf"\b{re.escape(term)}\b", lower_text)) for term in terms)


def _valid_weights(raw: Any) -> Optional[Dict[str, float]]:
    """Convert a percentage mapping to fractions, or None when incomplete or not summing to 100."""
    if not isinstance(raw, Mapping) or set(raw.keys()) != set(DIMENSIONS):
        return None
    values = raw.values()
    if not all(isinstance(v, (int, float)) and not isinstance(v, bool) and v >= 0 for v in values):
        return None
    if abs(sum(values) - 100) > 1e-6:
        return None
    return {dimension: raw[dimension] / 100 for dimension in DIMENSIONS}


class QualityAssessor:
    """Heuristic, deterministic multi-dimensional prompt scoring."""

    def __init__(self, weights_by_intent: Optional[Mapping[str, Mapping[str, Any]]] = None,
                 default_weights: Optional[Mapping[str, Any]] = None):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.weights = self._build_weights(weights_by_intent or {}, default_weights)

    def _build_weights(self, weights_by_intent: Mapping[str, Mapping[str, Any]],
                       default_weights: Optional[Mapping[str, Any]]) -> Dict[Optional[PromptIntent], Dict[str, float]]:
        weights = {intent: dict(values) for intent, values in DEFAULT_WEIGHTS.items()}

        if default_weights is not None:
            parsed = _valid_weights(default_weights)
            if parsed:
                weights[None] = parsed
            else:
                self.logger.debug("Ignoring default quality weights: need all five dimensions summing to 100")

        for intent_name, raw in weights_by_intent.items():
            try:
                intent = PromptIntent(intent_name)
            except ValueError:
                self.logger.debug(f"Ignoring quality weights for unknown intent {intent_name!r}")
                continue
            parsed = _valid_weights(raw)
            if parsed:
                weights[intent] = parsed
            else:
                self.logger.debug(f"Ignoring quality weights for {intent_name}: need all five dimensions summing to 100")

        return weights

    def assess(self, original: str, enhanced: str, intent: IntentAnalysis) -> QualityMetrics:
        """Score the enhanced text; compare with the original for improvements."""
        original = original or ""
        enhanced = enhanced or ""
        primary = intent.primary_intent

        scores = {
            'clarity': self.assess_clarity(enhanced, primary),
            'efficiency': self.assess_efficiency(enhanced),
            'structure': self.assess_structure(enhanced, primary),
            'completeness': self.assess_completeness(enhanced, primary),
            'actionability': self.assess_actionability(enhanced, primary),
        }
        overall = self.calculate_overall(scores, primary)

        return QualityMetrics(
            overall=overall,
            strengths=[STRENGTH_MESSAGES[d] for d in DIMENSIONS if scores[d] >= STRENGTH_THRESHOLD],
            improvements=self.identify_improvements(original, enhanced),
            remaining_issues=[ISSUE_MESSAGES[d] for d in DIMENSIONS if scores[d] < ISSUE_THRESHOLD],
            **scores,
        )

    # ------------------------------------------------------------------
    # Dimensions
    # ------------------------------------------------------------------

    def assess_clarity(self, prompt: str, intent: PromptIntent) -> int:
        score = 100
        if not OBJECTIVE.search(prompt):
            score -= 20
        if intent == PromptIntent.CODE_GENERATION:
            if not self._has_tech_stack(prompt):
                score -= 15
            if not OUTPUT_FORMAT.search(prompt):
                score -= 15
        if not SUCCESS_CRITERIA.search(prompt):
            score -= 10
        score -= _count_occurrences(prompt.lower(), VAGUE_TERMS) * 5
        return _clamp(score)

    def assess_efficiency(self, prompt: str) -> int:
        score = 100
        lower_prompt = prompt.lower()
        score -= _count_occurrences(lower_prompt, PLEASANTRIES) * 5
        score -= _count_occurrences(lower_prompt, FILLER_WORDS) * 3

        words = lower_prompt.split()
        if words:
            signal = sum(1 for word in words if word not in STOP_WORDS and len(word) > 2)
            ratio = signal / len(words)
            if ratio < 0.6:
                score -= 30
            elif ratio < 0.75:
                score -= 15
        return _clamp(score)

    def assess_structure(self, prompt: str, intent: PromptIntent) -> int:
        score = 100
        lower_prompt = prompt.lower()

        if intent != PromptIntent.REFINEMENT and not self._has_any(lower_prompt, ['context', 'background', 'currently']):
            score -= 20
        if not self._has_any(lower_prompt, ['requirement', 'need', 'should', 'must']):
            score -= 25
        if not self._has_any(lower_prompt, ['output', 'result', 'deliverable', 'expected']):
            score -= 15
        if HEADER.search(prompt):
            score += 10
        return _clamp(score)

    def assess_completeness(self, prompt: str, intent: PromptIntent) -> int:
        score = 100
        for deduction, check in COMPLETENESS_CHECKS.get(intent, []):
            if not check.search(prompt):
                score -= deduction
        return _clamp(score)

    def assess_actionability(self, prompt: str, intent: PromptIntent) -> int:
        score = 100
        score -= _count_occurrences(prompt.lower(), AMBIGUOUS_TERMS) * 10
        if intent == PromptIntent.CODE_GENERATION and not EXAMPLES.search(prompt):
            score -= 15
        if not SUCCESS_CRITERIA.search(prompt):
            score -= 20
        questions = prompt.count('?')
        if questions > 3:
            score -= (questions - 3) * 5
        return _clamp(score)

    def calculate_overall(self, scores: Mapping[str, int], intent: PromptIntent) -> int:
        weights = self.weights.get(intent, self.weights[None])
        return _clamp(sum(scores[dimension] * weights[dimension] for dimension in DIMENSIONS))

    # ------------------------------------------------------------------
    # Improvements
    # ------------------------------------------------------------------

    @staticmethod
    def identify_improvements(original: str, enhanced: str) -> List[str]:
        improvements = []
        if len(enhanced) > len(original) * GROWTH_RATIO:
            improvements.append('Added missing context and specifications')

        original_headers = {header.lower() for header in HEADER.findall(original)}
        for header in HEADER.findall(enhanced):
            message = f"Added {header} section"
            if header.lower() not in original_headers and message not in improvements:
                improvements.append(message)
        return improvements

    @staticmethod
    def _has_any(lower_prompt: str, keywords: List[str]) -> bool:
        return any(keyword in lower_prompt for keyword in keywords)

    @staticmethod
    def _has_tech_stack(prompt: str) -> bool:
        lower_prompt = prompt.lower()
        return any(term in lower_prompt for term in TECH_TERMS)


def assess_quality(text: str, intent: PromptIntent,
                   assessor: Optional[QualityAssessor] = None) -> Dict[str, int]:
    """Score a text against itself and return the numeric scores only."""
    assessor = assessor or QualityAssessor()
    analysis = IntentAnalysis(primary_intent=intent, confidence=100)
    return assessor.assess(text, text, analysis).scores()
