"""Objective Clarifier - extracts or infers a clear goal statement."""

import re
from typing import Optional

from ..types import ImpactLevel, PatternContext, PatternResult, PromptIntent, QualityDimension
from .base import BasePattern

OBJECTIVE_MARKERS = [
    re.compile(r"^#+ objective", re.IGNORECASE | re.MULTILINE),
    re.compile(r"^objective:", re.IGNORECASE | re.MULTILINE),
    re.compile(r"^goal:", re.IGNORECASE | re.MULTILINE),
    re.compile(r"^purpose:", re.IGNORECASE | re.MULTILINE),
]

GOAL_PATTERNS = [
    re.compile(r"(?:i need to|i want to|i'm trying to|goal is to|objective is to|purpose is to)\s+(.+?)(?:\.|$)",
               re.IGNORECASE | re.MULTILINE),
    re.compile(r"(?:create|build|make|implement|develop|write)\s+(.+?)(?:\.|$)", re.IGNORECASE | re.MULTILINE),
]

INFERRED_OBJECTIVES = {
    PromptIntent.DEBUGGING: 'Fix the identified error or bug',
    PromptIntent.REFINEMENT: 'Improve and optimize the existing code',
    PromptIntent.DOCUMENTATION: 'Provide clear documentation and explanation',
    PromptIntent.PLANNING: 'Plan and design the described system or feature',
    PromptIntent.TESTING: 'Write tests that verify the described behavior',
    PromptIntent.MIGRATION: 'Migrate the existing system without losing functionality',
    PromptIntent.SECURITY_REVIEW: 'Identify and prioritize security vulnerabilities',
    PromptIntent.LEARNING: 'Explain the concept so it can be applied in practice',
}


class ObjectiveClarifier(BasePattern):
    id = 'objective-clarifier'
    name = 'Objective Clarifier'
    description = 'Extracts or infers clear goal statement'
    applicable_intents = frozenset({
        PromptIntent.CODE_GENERATION, PromptIntent.PLANNING, PromptIntent.REFINEMENT,
        PromptIntent.DEBUGGING, PromptIntent.DOCUMENTATION, PromptIntent.TESTING,
        PromptIntent.MIGRATION, PromptIntent.SECURITY_REVIEW, PromptIntent.LEARNING,
    })
    priority = 9

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        if any(marker.search(prompt) for marker in OBJECTIVE_MARKERS):
            return self.skipped(prompt, QualityDimension.CLARITY, 'Objective already clearly stated')

        objective = self._extract_objective(prompt, context.intent.primary_intent)
        if not objective:
            return self.skipped(prompt, QualityDimension.CLARITY, 'Could not infer clear objective')

        return self.applied(
            f"# Objective\n{objective}\n\n{prompt}",
            QualityDimension.CLARITY,
            'Added clear objective statement',
            ImpactLevel.HIGH,
        )

    def _extract_objective(self, prompt: str, intent: PromptIntent) -> Optional[str]:
        for pattern in GOAL_PATTERNS:
            match = pattern.search(prompt)
            if match and match.group(1).strip():
                goal = match.group(1).strip()
                return goal[0].upper() + goal[1:]

        lower_prompt = prompt.lower()
        if intent == PromptIntent.CODE_GENERATION:
            if 'function' in lower_prompt:
                return 'Create a function that meets the specified requirements'
            if 'component' in lower_prompt:
                return 'Build a component with the described functionality'
            if 'api' in lower_prompt:
                return 'Implement an API endpoint as specified'
            return None

        if not prompt.strip():
            return None
        return INFERRED_OBJECTIVES.get(intent)
