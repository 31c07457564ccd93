"""Conciseness Filter - strips pleasantries, filler words and wordy phrases."""

import re

from ..types import ImpactLevel, PatternContext, PatternResult, PromptIntent, QualityDimension
from .base import BasePattern

PLEASANTRY_PATTERNS = [
    re.compile(r"^(please|could you|would you mind|i would appreciate if you could|kindly)\s+", re.IGNORECASE),
    re.compile(r"thanks in advance[.!]?", re.IGNORECASE),
    re.compile(r"thank you[.!]?", re.IGNORECASE),
    re.compile(r"i appreciate your help[.!]?", re.IGNORECASE),
]

FILLER_WORDS = ['very', 'really', 'just', 'basically', 'simply', 'actually', 'literally']

WORDY_PHRASES = [
    (re.compile(r"in order to", re.IGNORECASE), "to"),
    (re.compile(r"at this point in time", re.IGNORECASE), "now"),
    (re.compile(r"due to the fact that", re.IGNORECASE), "because"),
    (re.compile(r"for the purpose of", re.IGNORECASE), "for"),
    (re.compile(r"in the event that", re.IGNORECASE), "if"),
]


class ConcisenessFilter(BasePattern):
    id = 'conciseness-filter'
    name = 'Conciseness Filter'
    description = 'Removes unnecessary pleasantries, fluff words, and redundancy'
    applicable_intents = frozenset({
        PromptIntent.CODE_GENERATION, PromptIntent.PLANNING, PromptIntent.REFINEMENT,
        PromptIntent.DEBUGGING, PromptIntent.DOCUMENTATION, PromptIntent.TESTING,
        PromptIntent.MIGRATION, PromptIntent.SECURITY_REVIEW, PromptIntent.LEARNING,
    })
    priority = 10  # run early

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        cleaned = prompt
        changes = 0

        for pattern in PLEASANTRY_PATTERNS:
            cleaned, count = pattern.subn('', cleaned)
            changes += count

        for word in FILLER_WORDS:
            cleaned, count = re.subn(rf"\b{word}\b", '', cleaned, flags=re.IGNORECASE)
            changes += count

        for pattern, replacement in WORDY_PHRASES:
            cleaned, count = pattern.subn(replacement, cleaned)
            changes += count

        # Collapse runs of spaces but keep line structure intact
        cleaned = "\n".join(re.sub(r"[ \t]{2,}", " ", line).strip() for line in cleaned.splitlines()).strip()

        if changes == 0 or cleaned == prompt:
            return self.skipped(prompt, QualityDimension.EFFICIENCY, 'Prompt is already concise')

        return self.applied(
            cleaned,
            QualityDimension.EFFICIENCY,
            f"Removed {changes} unnecessary phrases for conciseness",
            ImpactLevel.HIGH if changes > 3 else ImpactLevel.MEDIUM if changes > 1 else ImpactLevel.LOW,
        )
