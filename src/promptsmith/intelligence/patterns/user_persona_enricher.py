"""User Persona Enricher - adds the "who" to feature descriptions."""

from ..types import ImpactLevel, PatternContext, PatternMode, PatternPhase, PatternResult, PromptIntent, QualityDimension
from .base import BasePattern

USER_CONTEXT_KEYWORDS = [
    'user persona', 'target user', 'end user', 'user profile', 'audience', 'stakeholder',
    'as a user', 'users can', 'users will', 'for users', 'customer', 'developer', 'admin',
    'target audience',
]

FEATURE_KEYWORDS = ['feature', 'build', 'create', 'implement', 'functionality', 'should', 'must', 'requirement']

# First match wins
USER_TYPES = [
    (['api', 'sdk', 'library'], 'Developers integrating with the system'),
    (['admin', 'manage', 'dashboard'], 'Administrators managing the system'),
    (['e-commerce', 'shop', 'buy'], 'Customers making purchases'),
    (['content', 'blog', 'cms'], 'Content creators and editors'),
    (['mobile', 'app'], 'Mobile app users'),
]

UNKNOWN_USER_TYPE = '[Define primary user type]'


class UserPersonaEnricher(BasePattern):
    id = 'user-persona-enricher'
    name = 'User Persona Enricher'
    description = 'Adds missing user context and personas'
    applicable_intents = frozenset({PromptIntent.PRD_GENERATION, PromptIntent.PLANNING})
    mode = PatternMode.DEEP
    priority = 6
    phases = frozenset({PatternPhase.QUESTION_VALIDATION, PatternPhase.OUTPUT_GENERATION})
    default_settings = {'inferUserType': True}

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        if self.mentions(prompt, USER_CONTEXT_KEYWORDS):
            return self.skipped(prompt, QualityDimension.COMPLETENESS, 'User context already present')
        if not self.mentions(prompt, FEATURE_KEYWORDS):
            return self.skipped(prompt, QualityDimension.COMPLETENESS, 'Content does not require user persona')

        user_type = self.infer_user_type(prompt) if self.get_setting(context, 'inferUserType') else UNKNOWN_USER_TYPE
        section = (
            "\n\n### Target Users\n"
            f"**Primary User:** {user_type}\n"
            "- Goals: [What they want to achieve]\n"
            "- Pain Points: [Current frustrations]\n"
            "- Context: [When and how they'll use this]"
        )
        return self.applied(
            prompt + section,
            QualityDimension.COMPLETENESS,
            'Added user persona context (who will use this)',
            ImpactLevel.MEDIUM,
        )

    def infer_user_type(self, prompt: str) -> str:
        for keywords, user_type in USER_TYPES:
            if self.mentions(prompt, keywords):
                return user_type
        return UNKNOWN_USER_TYPE
