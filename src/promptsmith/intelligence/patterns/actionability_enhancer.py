"""Actionability Enhancer - turns vague wording into specific, measurable asks."""

import re

from ..types import PatternContext, PatternResult, PromptIntent, QualityDimension
from .base import BasePattern

# vague word -> first concrete suggestion
VAGUE_WORDS = {
    'better': 'faster',
    'improve': 'optimize performance',
    'good': 'high-performing',
    'nice': 'polished',
    'something': '[specify what]',
    'somehow': '[specify method]',
    'maybe': '[decide: yes/no]',
    'enhance': 'add features to',
    'update': 'modify',
}

# Placeholders are appended without the "e.g." wrapper
PLACEHOLDER_WORDS = {'something', 'somehow', 'maybe'}

MEASURABLE_TERMS = [
    (re.compile(r"\bfast(?:er)?\b", re.IGNORECASE), ' (specify: < 100ms, < 1s, etc.)'),
    (re.compile(r"\bslow(?:er)?\b", re.IGNORECASE), ' (specify: > 2s, > 5s, etc.)'),
    (re.compile(r"\befficient\b", re.IGNORECASE), ' (specify metrics: time, memory, CPU)'),
    (re.compile(r"\bscalable\b", re.IGNORECASE), ' (specify: handle 1K, 10K, 100K users)'),
    (re.compile(r"\breliable\b", re.IGNORECASE), ' (specify: 99.9% uptime, < 0.1% error rate)'),
    (re.compile(r"\bsecure\b", re.IGNORECASE), ' (specify: HTTPS, auth required, encrypted)'),
]

METRIC_PATTERNS = [
    re.compile(r"\d+\s*(?:ms|s|min|hours?)\b", re.IGNORECASE),
    re.compile(r"\d+\s*(?:kb|mb|gb)\b", re.IGNORECASE),
    re.compile(r"\d+\s*(?:%|percent)", re.IGNORECASE),
    re.compile(r"[<>]\s*\d+"),
    re.compile(r"\d+k?\s*(?:users?|requests?)", re.IGNORECASE),
]

ABSTRACT_GOALS = [
    (re.compile(r"make\s+it\s+better", re.IGNORECASE), 'improve by [specify: performance, UX, reliability, etc.]'),
    (re.compile(r"should\s+be\s+nice", re.IGNORECASE), 'should have [specify: polished UI, intuitive UX, etc.]'),
    (re.compile(r"want\s+it\s+to\s+be\s+good", re.IGNORECASE),
     'should meet [specify: quality standards, performance targets, etc.]'),
    (re.compile(r"less\s+complex", re.IGNORECASE),
     'less complex (reduce from [X] to [Y] components/lines/dependencies)'),
]


class ActionabilityEnhancer(BasePattern):
    id = 'actionability-enhancer'
    name = 'Actionability Enhancer'
    description = 'Converts vague requests into specific, measurable actions'
    applicable_intents = frozenset({
        PromptIntent.CODE_GENERATION, PromptIntent.PLANNING,
        PromptIntent.REFINEMENT, PromptIntent.DEBUGGING,
    })
    priority = 7

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        enhanced = prompt
        changes = 0

        # Abstract goals first so their wording is rewritten before single words
        for step in (self._concretize_goals, self._replace_vague_words, self._add_measurable_criteria):
            updated = step(enhanced)
            if updated != enhanced:
                changes += 1
            enhanced = updated

        if enhanced == prompt:
            return self.skipped(prompt, QualityDimension.ACTIONABILITY, 'Prompt is already specific')

        return self.applied(
            enhanced,
            QualityDimension.ACTIONABILITY,
            f"Made {changes} improvements to increase specificity",
            self.impact_for(changes, high=3, medium=2),
        )

    @staticmethod
    def _concretize_goals(prompt: str) -> str:
        for pattern, replacement in ABSTRACT_GOALS:
            prompt = pattern.sub(replacement, prompt)
        return prompt

    @staticmethod
    def _replace_vague_words(prompt: str) -> str:
        for word, suggestion in VAGUE_WORDS.items():
            # Skip words already followed by a suggestion
            pattern = re.compile(rf"\b{word}\b(?! \(e\.g\.| \[)", re.IGNORECASE)
            if word in PLACEHOLDER_WORDS:
                prompt = pattern.sub(lambda m, s=suggestion: f"{m.group(0)} {s}", prompt)
            else:
                prompt = pattern.sub(lambda m, s=suggestion: f"{m.group(0)} (e.g., {s})", prompt)
        return prompt

    @staticmethod
    def _add_measurable_criteria(prompt: str) -> str:
        if any(pattern.search(prompt) for pattern in METRIC_PATTERNS):
            return prompt
        for pattern, suggestion in MEASURABLE_TERMS:
            prompt = pattern.sub(lambda m, s=suggestion: m.group(0) + s, prompt)
        return prompt
