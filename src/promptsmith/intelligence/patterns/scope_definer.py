"""Scope Definer - states what a request covers and what it leaves out."""

import re
from typing import List

from ..types import ImpactLevel, PatternContext, PatternMode, PatternPhase, PatternResult, PromptIntent, QualityDimension
from .base import BasePattern

SCOPE_INDICATORS = [
    'out of scope', 'not included', 'scope:', 'in scope', 'excluded', 'will not',
    "won't include", 'not part of',
]

IN_SCOPE_PATTERNS = [
    re.compile(r"\b(?:need|want|require|should have|must have)\s+(.+?)(?:\.|,|$)", re.IGNORECASE | re.MULTILINE),
    re.compile(r"\b(?:create|build|implement|add)\s+(?:a\s+)?(.+?)(?:\.|,|$)", re.IGNORECASE | re.MULTILINE),
]

IN_SCOPE_BY_INTENT = {
    PromptIntent.PLANNING: ['High-level architecture design', 'Task breakdown and sequencing'],
    PromptIntent.MIGRATION: ['Data migration from source to target', 'Functionality preservation'],
}

OUT_OF_SCOPE_BY_INTENT = {
    PromptIntent.PLANNING: [
        'Actual implementation code',
        'Detailed technical specifications',
        'Resource allocation and team assignments',
    ],
    PromptIntent.MIGRATION: [
        'New feature development',
        'Performance optimization beyond parity',
        'Refactoring unrelated code',
    ],
    PromptIntent.DOCUMENTATION: ['Code implementation changes', 'Architectural modifications'],
    PromptIntent.PRD_GENERATION: [
        'Technical implementation details',
        'Code or pseudocode',
        'Database schema design',
    ],
}

BOUNDARY_BY_INTENT = {
    PromptIntent.CODE_GENERATION: 'Following existing project conventions and patterns',
    PromptIntent.MIGRATION: 'Maintaining backward compatibility where specified',
    PromptIntent.TESTING: 'Testing within unit/integration test scope',
}

MAX_BOUNDARIES = 4

FRONTEND_KEYWORDS = ['frontend', 'ui', 'component']
BACKEND_KEYWORDS = ['backend', 'api', 'server']


def _unique(items: List[str]) -> List[str]:
    return list(dict.fromkeys(items))


class ScopeDefiner(BasePattern):
    id = 'scope-definer'
    name = 'Scope Definer'
    description = 'Add explicit scope boundaries to prevent scope creep'
    applicable_intents = frozenset({
        PromptIntent.CODE_GENERATION,
        PromptIntent.PLANNING,
        PromptIntent.PRD_GENERATION,
        PromptIntent.MIGRATION,
        PromptIntent.DOCUMENTATION,
    })
    mode = PatternMode.DEEP
    priority = 5
    phases = frozenset({PatternPhase.ALL})
    default_settings = {'maxInScopeItems': 5, 'maxOutOfScopeItems': 5}

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        lower_prompt = prompt.lower()
        if any(indicator in lower_prompt for indicator in SCOPE_INDICATORS):
            return self.skipped(prompt, QualityDimension.COMPLETENESS, 'Scope already defined')

        intent = context.intent.primary_intent
        in_scope = self.in_scope(prompt, intent)[:max(1, int(self.get_setting(context, 'maxInScopeItems')))]
        out_of_scope = self.out_of_scope(prompt, intent)[:max(1, int(self.get_setting(context, 'maxOutOfScopeItems')))]
        boundaries = self.boundaries(prompt, intent)[:MAX_BOUNDARIES]

        lines = ['### Scope Definition', '']
        for title, items in (('In Scope', in_scope), ('Out of Scope', out_of_scope),
                             ('Boundaries & Assumptions', boundaries)):
            if items:
                lines.append(f"**{title}:**")
                lines.extend(f"- {item}" for item in items)
                lines.append('')
        section = "\n".join(lines).rstrip()

        return self.applied(
            f"{prompt}\n\n{section}",
            QualityDimension.COMPLETENESS,
            'Added explicit scope boundaries',
            ImpactLevel.MEDIUM,
        )

    def in_scope(self, prompt: str, intent: PromptIntent) -> List[str]:
        items: List[str] = []
        for pattern in IN_SCOPE_PATTERNS:
            for match in pattern.finditer(prompt):
                requirement = match.group(1).strip()
                if 3 < len(requirement) < 100:
                    items.append(requirement)

        if intent == PromptIntent.CODE_GENERATION:
            if self.mentions(prompt, ['component', 'ui']):
                items.append('Component implementation with specified functionality')
            if self.mentions(prompt, ['api', 'endpoint']):
                items.append('API endpoint implementation')
        items.extend(IN_SCOPE_BY_INTENT.get(intent, []))
        return _unique(items)

    def out_of_scope(self, prompt: str, intent: PromptIntent) -> List[str]:
        if intent == PromptIntent.CODE_GENERATION:
            items = ['Deployment and CI/CD configuration', 'Production infrastructure setup']
            if not self.mentions(prompt, ['test']):
                items.append('Comprehensive test suite (basic tests only)')
            if not self.mentions(prompt, ['doc', 'readme']):
                items.append('Extensive documentation')
        else:
            items = list(OUT_OF_SCOPE_BY_INTENT.get(intent, []))

        frontend = self.mentions(prompt, FRONTEND_KEYWORDS)
        backend = self.mentions(prompt, BACKEND_KEYWORDS)
        if frontend and not backend:
            items.append('Backend/API implementation')
        if backend and not self.mentions(prompt, ['frontend', 'ui']):
            items.append('Frontend/UI implementation')
        return _unique(items)

    def boundaries(self, prompt: str, intent: PromptIntent) -> List[str]:
        items: List[str] = []
        if self.mentions(prompt, ['component', 'module', 'service']):
            items.append('Limited to specified component/module boundaries')
        if self.mentions(prompt, ['integration', 'third-party', 'external']):
            items.append('External integrations assumed to be available and configured')
        if self.mentions(prompt, ['database', 'data', 'storage']):
            items.append('Database schema assumed to exist or specified separately')
        if self.mentions(prompt, ['auth', 'user', 'login']):
            items.append('Authentication system assumed to be in place')
        if intent in BOUNDARY_BY_INTENT:
            items.append(BOUNDARY_BY_INTENT[intent])
        return _unique(items)
