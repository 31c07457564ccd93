"""Implicit Requirement Extractor - surfaces needs a discussion implies but never states."""

import re
from collections import OrderedDict
from typing import List, Tuple

from ..types import ImpactLevel, PatternContext, PatternMode, PatternPhase, PatternResult, PromptIntent, QualityDimension
from .base import BasePattern

ImplicitRequirement = Tuple[str, str]  # (requirement, category)

# (trigger keywords, requirement, category)
KEYWORD_REQUIREMENTS = [
    (['mobile'], 'Mobile-responsive design required', 'infrastructure'),
    (['real-time', 'realtime'], 'Real-time updates infrastructure needed', 'infrastructure'),
    (['scale', 'thousands', 'millions'], 'Scalability architecture required', 'infrastructure'),
    (['offline', 'without internet'], 'Offline-capable architecture needed', 'infrastructure'),
    (['multi-tenant', 'multiple organizations'], 'Multi-tenancy support required', 'infrastructure'),
    (['secure', 'security'], 'Security audit and compliance requirements', 'security'),
    (['gdpr', 'privacy', 'compliant'], 'Data privacy and compliance infrastructure', 'security'),
    (['encrypt', 'sensitive'], 'Data encryption requirements', 'security'),
    (['fast', 'quick'], 'Performance optimization requirements', 'performance'),
    (['responsive', 'instant'], 'Low-latency response requirements', 'performance'),
    (['easy', 'simple', 'intuitive'], 'User experience priority (simplicity mentioned)', 'ux'),
    (['accessible', 'a11y'], 'Accessibility (WCAG) compliance required', 'ux'),
    (['notify', 'alert', 'email', 'notification'], 'Notification system infrastructure', 'integration'),
    (['search', 'find'], 'Search functionality and indexing', 'integration'),
    (['report', 'analytics', 'dashboard'], 'Analytics and reporting infrastructure', 'integration'),
    (['integrate', 'connect', 'sync'], 'Integration APIs and webhooks', 'integration'),
    (['import', 'export', 'csv'], 'Data import/export functionality', 'integration'),
]

CATEGORY_LABELS = {
    'infrastructure': 'Infrastructure',
    'security': 'Security',
    'performance': 'Performance',
    'ux': 'User Experience',
    'integration': 'Integration',
    'feature': 'Feature',
    'business': 'Business Rules',
}

# "like Slack" implies parity; "would like to" is a wish, not a comparison
PARITY_PATTERN = re.compile(r"(?<!would )(?<!'d )\b(?:like|similar to|same as)\s+([A-Za-z0-9 ]+)", re.IGNORECASE)
BUSINESS_RULE_PATTERN = re.compile(r"\b(?:must always|must never|always|never)\s+([^.!?\n]+)", re.IGNORECASE)


class ImplicitRequirementExtractor(BasePattern):
    id = 'implicit-requirement-extractor'
    name = 'Implicit Requirement Extractor'
    description = 'Surfaces requirements mentioned indirectly'
    applicable_intents = frozenset({PromptIntent.SUMMARIZATION, PromptIntent.PLANNING, PromptIntent.PRD_GENERATION})
    # Runs while a conversation is tracked (fast) and when it is summarized (deep)
    mode = PatternMode.BOTH
    priority = 5
    phases = frozenset({PatternPhase.CONVERSATION_TRACKING, PatternPhase.SUMMARIZATION})
    default_settings = {'maxImplicitRequirements': 10, 'groupByCategory': True}

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        limit = max(0, int(self.get_setting(context, 'maxImplicitRequirements')))
        requirements = self.extract_requirements(prompt)[:limit]

        if not requirements:
            return self.skipped(prompt, QualityDimension.COMPLETENESS, 'No implicit requirements detected')

        section = self._format(requirements, group=bool(self.get_setting(context, 'groupByCategory')))
        return self.applied(
            prompt + section,
            QualityDimension.COMPLETENESS,
            f"Surfaced {len(requirements)} implicit requirements",
            ImpactLevel.MEDIUM,
        )

    def extract_requirements(self, prompt: str) -> List[ImplicitRequirement]:
        """Implied requirements in detection order, de-duplicated by text."""
        lower_prompt = prompt.lower()
        found: List[ImplicitRequirement] = []

        for match in PARITY_PATTERN.finditer(prompt):
            target = match.group(1).strip()
            if target:
                found.append((f'Feature parity with "{target}" (implied)', 'feature'))

        for keywords, requirement, category in KEYWORD_REQUIREMENTS:
            if self.mentions(prompt, keywords):
                found.append((requirement, category))

        if self.mentions(prompt, ['user', 'admin']) and 'authentication' not in lower_prompt:
            found.append(('User authentication system (implied by user roles)', 'security'))

        if self.mentions(prompt, ['save', 'store', 'data']) and 'database' not in lower_prompt:
            found.append(('Data persistence/storage (implied by data operations)', 'infrastructure'))

        for match in BUSINESS_RULE_PATTERN.finditer(prompt):
            found.append((f'Business rule: "{match.group(1).strip()}" (implied constraint)', 'business'))

        seen = set()
        unique = []
        for requirement, category in found:
            if requirement not in seen:
                seen.add(requirement)
                unique.append((requirement, category))
        return unique

    @staticmethod
    def _format(requirements: List[ImplicitRequirement], group: bool) -> str:
        lines = [
            '',
            '',
            '### Implicit Requirements (Inferred)',
            '*The following requirements are implied by the discussion:*',
            '',
        ]

        by_category = OrderedDict()
        for requirement, category in requirements:
            by_category.setdefault(category, []).append(requirement)

        # Category headers only pay off beyond two categories
        if group and len(by_category) > 2:
            for category, items in by_category.items():
                lines.append(f"**{CATEGORY_LABELS.get(category, category)}:**")
                lines.extend(f"- {item}" for item in items)
                lines.append('')
        else:
            lines.extend(f"- {requirement}" for requirement, _ in requirements)
            lines.append('')

        lines.append('> **Note:** Please verify these inferred requirements are accurate.')
        return "\n".join(lines)
