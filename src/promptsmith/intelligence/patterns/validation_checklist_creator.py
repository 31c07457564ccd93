"""Validation Checklist Creator - adds a verification checklist for the task."""

from collections import OrderedDict
from typing import List, Tuple

from ..types import ImpactLevel, PatternContext, PatternMode, PatternResult, PromptIntent, QualityDimension
from .base import BasePattern, PatternDependency

ChecklistItem = Tuple[str, str]  # (description, category)

CODE_GENERATION_ITEMS = [
    ([], [
        ('Code compiles/runs without errors', 'functionality'),
        ('All requirements from prompt are implemented', 'functionality'),
        ('Edge cases are handled gracefully', 'robustness'),
    ]),
    (['api', 'endpoint', 'route'], [
        ('API returns correct status codes', 'functionality'),
        ('API handles invalid requests gracefully', 'robustness'),
    ]),
    (['ui', 'component', 'form', 'page'], [
        ('UI renders correctly on different screen sizes', 'ux'),
        ('Keyboard navigation works correctly', 'accessibility'),
    ]),
    (['test', 'coverage'], [
        ('Unit tests pass', 'testing'),
        ('Test coverage meets requirements', 'testing'),
    ]),
]

INTENT_ITEMS = {
    PromptIntent.TESTING: [
        ('All test cases pass consistently', 'functionality'),
        ('Tests are independent (no shared state)', 'quality'),
        ('Edge cases have dedicated tests', 'coverage'),
        ('Error scenarios are tested', 'coverage'),
        ('Tests run in reasonable time', 'performance'),
        ('Test names clearly describe what they test', 'maintainability'),
        ('Mocks/stubs are appropriately scoped', 'quality'),
    ],
    PromptIntent.MIGRATION: [
        ('Data migrated correctly (spot check sample records)', 'data'),
        ('All functionality works in new system', 'functionality'),
        ('Performance is acceptable (equal or better)', 'performance'),
        ('Rollback procedure tested and documented', 'safety'),
        ('No data loss during migration', 'data'),
        ('Integrations with other systems still work', 'integration'),
        ('Users can perform all previous workflows', 'functionality'),
    ],
    PromptIntent.SECURITY_REVIEW: [
        ('Authentication required for protected resources', 'auth'),
        ('Authorization checks prevent privilege escalation', 'auth'),
        ('User input is sanitized (no injection vulnerabilities)', 'input'),
        ('Sensitive data is encrypted in transit (HTTPS)', 'data'),
        ('Sensitive data is encrypted at rest', 'data'),
        ("Error messages don't leak sensitive information", 'info-disclosure'),
        ('Rate limiting prevents abuse', 'protection'),
        ('Security headers are properly configured', 'headers'),
    ],
    PromptIntent.DEBUGGING: [
        ('Root cause identified and documented', 'analysis'),
        ('Bug is consistently reproducible before fix', 'verification'),
        ('Fix resolves the original issue', 'functionality'),
        ("Fix doesn't introduce new bugs (regression)", 'regression'),
        ('Related areas tested for side effects', 'regression'),
        ('Test added to prevent recurrence', 'prevention'),
    ],
}

DOMAIN_ITEMS = [
    (['payment', 'transaction', 'checkout'], [
        ('Payment processing works correctly', 'functionality'),
        ('Duplicate transactions prevented', 'safety'),
    ]),
    (['email', 'notification', 'message'], [
        ('Notifications sent to correct recipients', 'functionality'),
        ('Notification content is correct', 'content'),
    ]),
    (['upload', 'file', 'image'], [
        ('File uploads work for valid files', 'functionality'),
        ('Invalid/large files are rejected gracefully', 'validation'),
    ]),
    (['database', 'query', 'schema'], [
        ('Database queries perform well', 'performance'),
        ('Database constraints are enforced', 'data'),
    ]),
]

GENERAL_ITEMS = [
    ('Code follows project conventions/style guide', 'quality'),
    ('No runtime errors or warnings in logs', 'quality'),
    ('Documentation updated if needed', 'documentation'),
]


class ValidationChecklistCreator(BasePattern):
    id = 'validation-checklist-creator'
    name = 'Validation Checklist Creator'
    description = 'Creates a verification checklist for task completion'
    applicable_intents = frozenset({
        PromptIntent.CODE_GENERATION, PromptIntent.TESTING, PromptIntent.MIGRATION,
        PromptIntent.SECURITY_REVIEW, PromptIntent.DEBUGGING,
    })
    mode = PatternMode.DEEP
    priority = 3
    dependencies = PatternDependency(run_after=('success-criteria-enforcer', 'edge-case-identifier'))
    default_settings = {'maxChecklistItems': 12, 'groupByCategory': True}

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        limit = max(0, int(self.get_setting(context, 'maxChecklistItems')))
        items = self.create_checklist(prompt, context.intent.primary_intent)[:limit]

        if not items:
            return self.skipped(prompt, QualityDimension.ACTIONABILITY, 'No validation checklist needed')

        section = self._format(items, group=bool(self.get_setting(context, 'groupByCategory')))
        return self.applied(
            f"{prompt}\n\n{section}",
            QualityDimension.ACTIONABILITY,
            f"Created validation checklist with {len(items)} items",
            ImpactLevel.HIGH,
        )

    def create_checklist(self, prompt: str, intent: PromptIntent) -> List[ChecklistItem]:
        items: List[ChecklistItem] = []
        if intent == PromptIntent.CODE_GENERATION:
            items.extend(self._matching(prompt, CODE_GENERATION_ITEMS))
        items.extend(INTENT_ITEMS.get(intent, []))
        items.extend(self._matching(prompt, DOMAIN_ITEMS))
        items.extend(GENERAL_ITEMS)
        return items

    def _matching(self, prompt: str, groups) -> List[ChecklistItem]:
        items = []
        for keywords, group in groups:
            if not keywords or self.has_section(prompt, keywords):
                items.extend(group)
        return items

    @staticmethod
    def _format(items: List[ChecklistItem], group: bool) -> str:
        lines = ['### Validation Checklist', '', 'Before considering this task complete, verify:']

        by_category = OrderedDict()
        for description, category in items:
            by_category.setdefault(category, []).append(description)

        # Grouping only helps once there are enough categories
        if group and len(by_category) > 3:
            for category, descriptions in by_category.items():
                label = category[0].upper() + category[1:].replace('-', ' ')
                lines.extend(['', f"**{label}:**"])
                lines.extend(f"- [ ] {description}" for description in descriptions)
        else:
            lines.append('')
            lines.extend(f"- [ ] {description}" for description, _ in items)

        return "\n".join(lines)
