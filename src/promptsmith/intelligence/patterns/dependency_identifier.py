"""Dependency Identifier - surfaces technical and external dependencies."""

from typing import List

from ..types import ImpactLevel, PatternContext, PatternMode, PatternPhase, PatternResult, PromptIntent, QualityDimension
from .base import BasePattern

DOCUMENTED_KEYWORDS = [
    'dependencies', 'depends on', 'prerequisite', 'requires', 'blocked by', 'blocker',
    'external service', 'third-party', 'integration with',
]

# (trigger keywords, dependency, technical?)
DEPENDENCY_RULES = [
    (['api'], 'API availability and documentation', True),
    (['database', 'db'], 'Database schema and migrations', True),
    (['authentication', 'auth'], 'Authentication system integration', True),
    (['payment', 'stripe', 'billing'], 'Payment provider integration', False),
    (['email', 'notification'], 'Email/notification service', True),
    (['storage', 's3', 'file'], 'File storage service', True),
    (['search', 'elasticsearch'], 'Search infrastructure', True),
    (['analytics', 'tracking'], 'Analytics platform', False),
    (['ci/cd', 'deploy'], 'CI/CD pipeline', True),
    (['cache', 'redis'], 'Caching infrastructure', True),
    (['third-party', 'external'], 'Third-party service availability', False),
    (['team', 'collaboration'], 'Cross-team coordination', False),
    (['approval', 'sign-off'], 'Stakeholder approvals', False),
    (['legal', 'compliance'], 'Legal/compliance review', False),
    (['design', 'ui', 'ux'], 'Design specifications', False),
]


class DependencyIdentifier(BasePattern):
    id = 'dependency-identifier'
    name = 'Dependency Identifier'
    description = 'Identifies technical and external dependencies'
    applicable_intents = frozenset({PromptIntent.PRD_GENERATION, PromptIntent.PLANNING, PromptIntent.MIGRATION})
    mode = PatternMode.DEEP
    priority = 5
    phases = frozenset({PatternPhase.QUESTION_VALIDATION, PatternPhase.OUTPUT_GENERATION})
    default_settings = {'categorizeDependencies': True}

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        if self.mentions(prompt, DOCUMENTED_KEYWORDS):
            return self.skipped(prompt, QualityDimension.COMPLETENESS, 'Dependencies already documented')

        technical = self.identify(prompt, technical=True)
        external = self.identify(prompt, technical=False)
        count = len(technical) + len(external)
        if not count:
            return self.skipped(prompt, QualityDimension.COMPLETENESS, 'No clear dependencies identified')

        if self.get_setting(context, 'categorizeDependencies'):
            blocks = []
            if technical:
                blocks.append("**Technical Dependencies:**\n" + self._bullets(technical))
            if external:
                blocks.append("**External Dependencies:**\n" + self._bullets(external))
        else:
            blocks = [self._bullets(self.identify_all(prompt))]
        blocks.append("**Dependency Status:** [Track status of each dependency]")

        return self.applied(
            prompt + "\n\n### Dependencies\n" + "\n\n".join(blocks),
            QualityDimension.COMPLETENESS,
            f"Identified {count} dependencies (technical/external)",
            ImpactLevel.MEDIUM,
        )

    def identify(self, prompt: str, technical: bool) -> List[str]:
        return [dependency for keywords, dependency, is_technical in DEPENDENCY_RULES
                if is_technical == technical and self.mentions(prompt, keywords)]

    def identify_all(self, prompt: str) -> List[str]:
        return [dependency for keywords, dependency, _ in DEPENDENCY_RULES if self.mentions(prompt, keywords)]

    @staticmethod
    def _bullets(items: List[str]) -> str:
        return "\n".join(f"- {item}" for item in items)
