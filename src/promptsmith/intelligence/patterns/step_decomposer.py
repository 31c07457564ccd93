"""Step Decomposer - breaks multi-part requests into ordered steps."""

import re
from typing import List

from ..types import ImpactLevel, PatternContext, PatternResult, PromptIntent, QualityDimension
from .base import BasePattern

MULTI_ACTION = re.compile(r"\b(and|then|also|after|next|finally|additionally)\b", re.IGNORECASE)
BULLET = re.compile(r"[-•*]\s+")

EXISTING_STEPS = [
    re.compile(r"step\s*[1-9]", re.IGNORECASE),
    re.compile(r"^\s*[1-9]\.\s+", re.MULTILINE),
    re.compile(r"first[\s,].*second[\s,]", re.IGNORECASE | re.DOTALL),
    re.compile(r"phase\s*[1-9]", re.IGNORECASE),
]

# Code generation steps keyed by the keywords that select them
CODE_GENERATION_STEPS = [
    (['component', 'ui', 'interface'], [
        'Define component interface and props',
        'Implement core component logic',
        'Add styling and responsive design',
        'Add error handling and edge cases',
        'Write unit tests',
    ]),
    (['api', 'endpoint', 'route'], [
        'Define API contract (request/response)',
        'Implement endpoint handler',
        'Add input validation',
        'Implement error handling',
        'Add authentication/authorization if needed',
        'Write tests',
    ]),
    (['function', 'utility', 'helper'], [
        'Define function signature and types',
        'Implement core logic',
        'Handle edge cases',
        'Add documentation',
        'Write tests',
    ]),
]

INTENT_STEPS = {
    PromptIntent.CODE_GENERATION: [
        'Understand requirements and define interface',
        'Implement core functionality',
        'Add error handling',
        'Test and validate',
    ],
    PromptIntent.PLANNING: [
        'Clarify goals and success criteria',
        'Identify key components and dependencies',
        'Define architecture and data flow',
        'Break down into implementable tasks',
        'Identify risks and mitigation strategies',
        'Create timeline and milestones',
    ],
    PromptIntent.MIGRATION: [
        'Assess current state and document existing behavior',
        'Define target state and requirements',
        'Create migration plan with rollback strategy',
        'Set up parallel environment for testing',
        'Migrate data in stages',
        'Validate functionality and performance',
        'Switch traffic and monitor',
        'Decommission old system after stabilization',
    ],
    PromptIntent.TESTING: [
        'Identify test cases from requirements',
        'Set up test environment and fixtures',
        'Write happy path tests',
        'Write edge case tests',
        'Write error scenario tests',
        'Verify coverage meets requirements',
        'Review and refactor tests for maintainability',
    ],
    PromptIntent.DEBUGGING: [
        'Reproduce the bug consistently',
        'Gather error logs and stack traces',
        'Isolate the problem area',
        'Form hypothesis about root cause',
        'Test hypothesis with targeted changes',
        'Implement fix',
        'Verify fix resolves issue without regression',
        'Add test to prevent recurrence',
    ],
    PromptIntent.DOCUMENTATION: [
        'Identify target audience and their needs',
        'Outline document structure',
        'Write introduction and overview',
        'Document main content with examples',
        'Add troubleshooting/FAQ section',
        'Review for accuracy and clarity',
    ],
}

GENERIC_STEPS = [
    'Understand and clarify requirements',
    'Plan approach and identify dependencies',
    'Execute main task',
    'Validate results',
    'Document and finalize',
]


class StepDecomposer(BasePattern):
    id = 'step-decomposer'
    name = 'Step Decomposer'
    description = 'Breaks complex tasks into sequential, actionable steps'
    applicable_intents = frozenset({
        PromptIntent.CODE_GENERATION, PromptIntent.PLANNING, PromptIntent.MIGRATION,
        PromptIntent.TESTING, PromptIntent.DEBUGGING, PromptIntent.DOCUMENTATION,
    })
    priority = 5
    default_settings = {'minWordsForDecomposition': 100}

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        if not self._needs_decomposition(prompt, context):
            return self.skipped(prompt, QualityDimension.STRUCTURE,
                                'Prompt is simple enough, no decomposition needed')
        if any(pattern.search(prompt) for pattern in EXISTING_STEPS):
            return self.skipped(prompt, QualityDimension.STRUCTURE, 'Prompt already has step structure')

        steps = self.decompose(prompt, context.intent.primary_intent)
        if len(steps) < 2:
            return self.skipped(prompt, QualityDimension.STRUCTURE, 'Could not identify multiple steps')

        section = "### Implementation Steps\n\n" + "\n".join(
            f"{number}. {step}" for number, step in enumerate(steps, start=1)
        )
        return self.applied(
            f"{prompt}\n\n{section}",
            QualityDimension.STRUCTURE,
            f"Decomposed into {len(steps)} sequential steps",
            ImpactLevel.HIGH,
        )

    def _needs_decomposition(self, prompt: str, context: PatternContext) -> bool:
        min_words = self.get_setting(context, 'minWordsForDecomposition')
        return (
            self.count_words(prompt) > min_words
            or bool(MULTI_ACTION.search(prompt))
            or len(BULLET.findall(prompt)) >= 2
        )

    def decompose(self, prompt: str, intent: PromptIntent) -> List[str]:
        if intent == PromptIntent.CODE_GENERATION:
            for keywords, steps in CODE_GENERATION_STEPS:
                if self.has_section(prompt, keywords):
                    return list(steps)
        return list(INTENT_STEPS.get(intent, GENERIC_STEPS))
