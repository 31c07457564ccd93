"""Success Criteria Enforcer - adds measurable completion criteria per intent."""

from ..types import ImpactLevel, PatternContext, PatternResult, PromptIntent, QualityDimension
from .base import BasePattern

SUCCESS_INDICATORS = [
    'success criteria', 'acceptance criteria', 'done when', 'complete when',
    'must pass', 'should pass', 'test coverage', 'meets requirements',
    'criteria:', 'requirements:', 'must have', 'must include', 'validation:',
    'verify that', 'ensure that', 'should be able to',
]

INTENT_CRITERIA = {
    PromptIntent.CODE_GENERATION: [
        'Code runs without errors',
        'All tests pass (if tests are written)',
        'Follows project coding standards',
        'No type checker or linting errors',
        'Functionality matches requirements',
        'Edge cases are handled',
    ],
    PromptIntent.PLANNING: [
        'All requirements are addressed',
        'Tasks are atomic and actionable',
        'Dependencies are identified',
        'Timeline/phases are realistic',
        'Risks are documented',
    ],
    PromptIntent.REFINEMENT: [
        'Improved metrics (specify: performance, readability, etc.)',
        'No regression in functionality',
        'Tests still pass',
        'Code review approved',
    ],
    PromptIntent.DEBUGGING: [
        'Bug is reproducible and root cause identified',
        'Fix addresses root cause, not symptom',
        'No new bugs introduced',
        'Regression test added',
    ],
    PromptIntent.TESTING: [
        'Test coverage meets threshold (e.g., >80%)',
        'All critical paths tested',
        'Edge cases covered',
        'Tests are deterministic (no flaky tests)',
        'Test execution time is reasonable',
    ],
    PromptIntent.MIGRATION: [
        'All features work as before',
        'No data loss',
        'Performance is not degraded',
        'Rollback plan exists',
        'Documentation is updated',
    ],
    PromptIntent.PRD_GENERATION: [
        'All sections are complete',
        'Requirements are unambiguous',
        'Technical constraints are specified',
        'Success metrics are measurable',
        'Scope is clearly defined',
    ],
    PromptIntent.DOCUMENTATION: [
        'All public APIs are documented',
        'Examples are provided',
        'Instructions are testable',
        'No broken links',
    ],
    PromptIntent.SECURITY_REVIEW: [
        'All OWASP Top 10 checked',
        'Vulnerabilities are prioritized',
        'Remediation steps are provided',
        'No false positives',
    ],
    PromptIntent.LEARNING: [
        'Concept is explained clearly',
        'Examples demonstrate the concept',
        'Reader can apply knowledge',
    ],
}


class SuccessCriteriaEnforcer(BasePattern):
    id = 'success-criteria-enforcer'
    name = 'Success Criteria Enforcer'
    description = 'Adds measurable success criteria and completion conditions'
    applicable_intents = frozenset({
        PromptIntent.CODE_GENERATION, PromptIntent.PLANNING, PromptIntent.REFINEMENT,
        PromptIntent.DEBUGGING, PromptIntent.TESTING, PromptIntent.MIGRATION,
        PromptIntent.PRD_GENERATION,
    })
    priority = 7
    default_settings = {'showCheckboxes': True}

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        lower_prompt = prompt.lower()
        if any(indicator in lower_prompt for indicator in SUCCESS_INDICATORS):
            return self.skipped(prompt, QualityDimension.COMPLETENESS, 'Success criteria already specified')

        intent = context.intent.primary_intent
        criteria = INTENT_CRITERIA.get(intent, INTENT_CRITERIA[PromptIntent.CODE_GENERATION])
        bullet = "- [ ]" if self.get_setting(context, 'showCheckboxes') else "-"

        section = "\n\n## Success Criteria\n\nThis task is complete when:\n"
        section += "\n".join(f"{bullet} {criterion}" for criterion in criteria)
        if self.get_setting(context, 'showCheckboxes'):
            section += "\n\n**Tip**: Check off criteria as you complete them to track progress."

        return self.applied(
            prompt + section,
            QualityDimension.COMPLETENESS,
            f"Added {len(criteria)} measurable success criteria for {intent.value}",
            ImpactLevel.MEDIUM,
        )
