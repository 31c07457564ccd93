"""Output Format Enforcer - suggests an explicit output format."""

from ..types import ImpactLevel, PatternContext, PatternResult, PromptIntent, QualityDimension
from .base import BasePattern

FORMAT_INDICATORS = [
    'output format', 'expected output', 'return format', 'response format',
    'should return', 'must return', 'will output', 'produces', 'generates',
    'in the format', 'formatted as', 'as json', 'as markdown', 'as yaml',
    'as xml', 'as csv', 'as html', 'code block', 'typescript', 'javascript',
    'python', 'react component', 'vue component',
]

INTENT_FORMATS = {
    PromptIntent.CODE_GENERATION: [
        'Function with type annotations',
        'Component with a typed props interface',
        'Module with exports',
        'Class with methods',
        'API endpoint implementation',
    ],
    PromptIntent.PLANNING: [
        'Markdown task list with checkboxes',
        'Phased implementation plan',
        'Architecture decision record (ADR)',
        'Technical specification document',
    ],
    PromptIntent.DOCUMENTATION: [
        'Docstrings or doc comments',
        'README.md section',
        'API documentation (OpenAPI/Swagger)',
        'Code comments',
        'Tutorial/guide format',
    ],
    PromptIntent.PRD_GENERATION: [
        'Full PRD document with sections',
        'Quick PRD (2-3 paragraphs)',
        'User story format',
        'Requirements matrix',
    ],
    PromptIntent.TESTING: [
        'Test suite for the project test runner',
        'Test file grouped by behavior',
        'Test cases with assertions',
        'Mock implementations',
    ],
    PromptIntent.DEBUGGING: [
        'Root cause analysis',
        'Fix with explanation',
        'Code diff/patch',
        'Step-by-step debugging guide',
    ],
    PromptIntent.REFINEMENT: ['Refactored code', 'Optimized implementation', 'Before/after comparison'],
    PromptIntent.MIGRATION: ['Migration script', 'Step-by-step migration guide', 'Compatibility layer'],
    PromptIntent.SECURITY_REVIEW: [
        'Security audit report',
        'Vulnerability list with severity',
        'Remediation recommendations',
    ],
    PromptIntent.LEARNING: ['Educational explanation', 'Code examples with comments', 'Concept breakdown'],
}


class OutputFormatEnforcer(BasePattern):
    id = 'output-format-enforcer'
    name = 'Output Format Enforcer'
    description = 'Specifies expected output format and structure'
    applicable_intents = frozenset({
        PromptIntent.CODE_GENERATION, PromptIntent.PLANNING, PromptIntent.DOCUMENTATION,
        PromptIntent.PRD_GENERATION, PromptIntent.TESTING,
    })
    priority = 7
    default_settings = {'showFormatSuggestions': True}

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        lower_prompt = prompt.lower()
        if any(indicator in lower_prompt for indicator in FORMAT_INDICATORS):
            return self.skipped(prompt, QualityDimension.ACTIONABILITY, 'Output format already specified')
        if not self.get_setting(context, 'showFormatSuggestions'):
            return self.skipped(prompt, QualityDimension.ACTIONABILITY, 'Format suggestions disabled')

        intent = context.intent.primary_intent
        suggestions = INTENT_FORMATS.get(intent, INTENT_FORMATS[PromptIntent.CODE_GENERATION])
        section = (
            "\n\n## Expected Output Format\n\nSpecify the desired output format:\n"
            + "\n".join(f"- {suggestion}" for suggestion in suggestions)
            + "\n\n**Note**: Explicit output format helps ensure consistent, usable results."
        )

        return self.applied(
            prompt + section,
            QualityDimension.ACTIONABILITY,
            f"Added output format guidance for {intent.value} intent",
            ImpactLevel.MEDIUM,
        )
