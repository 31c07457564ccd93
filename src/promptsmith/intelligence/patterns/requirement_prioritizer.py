"""Requirement Prioritizer - separates must-haves from nice-to-haves."""

import re

from ..types import (
    ImpactLevel,
    PatternContext,
    PatternMode,
    PatternPhase,
    PatternResult,
    PromptIntent,
    QualityDimension,
)
from .base import BasePattern

FEATURE_KEYWORDS = [
    'feature', 'requirement', 'functionality', 'capability',
    'should', 'must', 'need', 'want', 'implement',
]

PRIORITY_KEYWORDS = [
    'must-have', 'must have', 'nice-to-have', 'nice to have', 'p0', 'p1', 'p2',
    'priority:', 'mvp', 'phase 1', 'phase 2', 'critical', 'optional',
]

FEATURE_SECTION = re.compile(
    r"(?:features?|requirements?|what we(?:'re| are) building):?\s*\n([\s\S]*?)(?=\n##|\n\*\*[A-Z]|$)",
    re.IGNORECASE,
)


class RequirementPrioritizer(BasePattern):
    id = 'requirement-prioritizer'
    name = 'Requirement Prioritizer'
    description = 'Distinguishes must-have from nice-to-have requirements'
    applicable_intents = frozenset({PromptIntent.PRD_GENERATION, PromptIntent.PLANNING})
    mode = PatternMode.DEEP
    priority = 7
    phases = frozenset({PatternPhase.QUESTION_VALIDATION, PatternPhase.OUTPUT_GENERATION})
    default_settings = {'usePriorityLabels': True}

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        if not self.has_section(prompt, FEATURE_KEYWORDS):
            return self.skipped(prompt, QualityDimension.STRUCTURE, 'No feature content to prioritize')
        if self.has_section(prompt, PRIORITY_KEYWORDS):
            return self.skipped(prompt, QualityDimension.STRUCTURE, 'Requirements already prioritized')

        if FEATURE_SECTION.search(prompt):
            if self.get_setting(context, 'usePriorityLabels'):
                labels = ('Must-Have (P0)', 'Should-Have (P1)', 'Nice-to-Have (P2)')
            else:
                labels = ('Must-Have', 'Should-Have', 'Nice-to-Have')
            enhanced = (
                prompt
                + "\n\n> **Priority Framework:** Consider categorizing features as:\n"
                + f"> - **{labels[0]}:** Required for MVP, blocking issues\n"
                + f"> - **{labels[1]}:** Important but not blocking\n"
                + f"> - **{labels[2]}:** Enhancements for future iterations"
            )
        else:
            enhanced = (
                prompt
                + "\n\n### Requirement Priorities\n"
                + "**Must-Have (MVP):**\n- [Core features required for launch]\n\n"
                + "**Nice-to-Have (Post-MVP):**\n- [Features to add after initial release]"
            )

        return self.applied(
            enhanced,
            QualityDimension.STRUCTURE,
            'Added requirement prioritization (must-have vs nice-to-have)',
            ImpactLevel.HIGH,
        )
