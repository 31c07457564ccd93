"""Edge Case Identifier - lists scenarios the request should account for."""

from typing import List, Tuple

from ..types import ImpactLevel, PatternContext, PatternMode, PatternResult, PromptIntent, QualityDimension
from .base import BasePattern

EdgeCase = Tuple[str, str]

# (trigger keywords, edge cases) checked for every intent
GENERAL_CASES = [
    (['input', 'data', 'form', 'field'], [
        ('Empty or null inputs', 'How should the system handle missing or undefined values?'),
        ('Invalid input types', 'What happens if input is wrong type (string vs number)?'),
    ]),
    (['api', 'request', 'fetch', 'call'], [
        ('Network failures', 'How to handle timeouts, connection errors, and retries?'),
    ]),
]

CODE_GENERATION_CASES = [
    ([], [('Boundary conditions', 'What happens at min/max values, empty collections, or single items?')]),
    (['list', 'array', 'collection'], [('Empty collections', 'How to handle lists with 0 or 1 elements?')]),
    (['user', 'auth', 'login', 'session'], [
        ('Session expiration', 'What happens when user session expires mid-operation?'),
    ]),
    (['concurrent', 'parallel', 'async'], [
        ('Race conditions', 'What if multiple operations access shared state simultaneously?'),
    ]),
]

INTENT_CASES = {
    PromptIntent.DEBUGGING: [
        ('Intermittent failures', 'Can you reproduce the bug consistently? What conditions affect it?'),
        ('Environment differences', 'Does it only happen in certain environments (dev/prod/test)?'),
        ('Data-dependent bugs', 'Does specific data or data volume trigger the issue?'),
    ],
    PromptIntent.TESTING: [
        ('Test isolation', 'Are tests independent or do they share state/data?'),
        ('Flaky tests', 'Are there timing-dependent tests that may fail intermittently?'),
        ('Mock boundaries', 'Are mocks accurately representing real dependencies?'),
    ],
    PromptIntent.MIGRATION: [
        ('Data incompatibility', 'Can all existing data be converted to new format?'),
        ('Rollback strategy', 'How to revert if migration fails midway?'),
        ('Feature parity gaps', 'Are there features in old system not supported in new?'),
        ('Downtime requirements', 'What is acceptable downtime during migration?'),
    ],
    PromptIntent.SECURITY_REVIEW: [
        ('Authentication bypass', 'Can attackers access resources without proper credentials?'),
        ('Privilege escalation', "Can users gain access to resources they shouldn't have?"),
        ('Input injection', 'Is user input properly sanitized before use (SQL, XSS, command)?'),
        ('Sensitive data exposure', 'Is sensitive data encrypted in transit and at rest?'),
    ],
}

DOMAIN_CASES = [
    (['payment', 'transaction', 'money', 'price', 'cart'], [
        ('Duplicate transactions', 'How to prevent accidental double charges?'),
        ('Currency/rounding issues', 'How to handle different currencies and decimal precision?'),
    ]),
    (['file', 'upload', 'download', 'image', 'document'], [
        ('Large files', 'What are size limits? How to handle files that exceed limits?'),
        ('Malicious files', 'How to validate file types and scan for malware?'),
    ]),
    (['date', 'time', 'schedule', 'calendar', 'timezone'], [
        ('Timezone handling', 'How to handle users in different timezones?'),
        ('Date boundaries', 'What about daylight saving, leap years, month boundaries?'),
    ]),
]


class EdgeCaseIdentifier(BasePattern):
    id = 'edge-case-identifier'
    name = 'Edge Case Identifier'
    description = 'Identifies potential edge cases and error scenarios'
    applicable_intents = frozenset({
        PromptIntent.CODE_GENERATION, PromptIntent.DEBUGGING, PromptIntent.TESTING,
        PromptIntent.MIGRATION, PromptIntent.SECURITY_REVIEW,
    })
    mode = PatternMode.DEEP
    priority = 4
    default_settings = {'maxEdgeCases': 8}

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        edge_cases = self.identify_edge_cases(prompt, context.intent.primary_intent)
        edge_cases = edge_cases[:max(0, int(self.get_setting(context, 'maxEdgeCases')))]

        if not edge_cases:
            return self.skipped(prompt, QualityDimension.COMPLETENESS, 'No edge cases identified')

        section = "### Edge Cases to Consider\n\n" + "\n".join(
            f"- **{scenario}**: {consideration}" for scenario, consideration in edge_cases
        )
        return self.applied(
            f"{prompt}\n\n{section}",
            QualityDimension.COMPLETENESS,
            f"Identified {len(edge_cases)} potential edge cases",
            ImpactLevel.HIGH,
        )

    def identify_edge_cases(self, prompt: str, intent: PromptIntent) -> List[EdgeCase]:
        """All matching edge cases in order, de-duplicated by scenario."""
        candidates: List[EdgeCase] = self._matching(prompt, GENERAL_CASES)
        if intent == PromptIntent.CODE_GENERATION:
            candidates.extend(self._matching(prompt, CODE_GENERATION_CASES))
        candidates.extend(INTENT_CASES.get(intent, []))
        candidates.extend(self._matching(prompt, DOMAIN_CASES))

        seen = set()
        unique = []
        for scenario, consideration in candidates:
            if scenario.lower() in seen:
                continue
            seen.add(scenario.lower())
            unique.append((scenario, consideration))
        return unique

    def _matching(self, prompt: str, groups) -> List[EdgeCase]:
        cases = []
        for keywords, group in groups:
            if not keywords or self.has_section(prompt, keywords):
                cases.extend(group)
        return cases
