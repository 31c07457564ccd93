"""
Assumption Explicitizer - lists the assumptions a request silently relies on.

Each assumption is paired with the question that would settle it, so the
reader can confirm or correct it before work starts.
"""

from typing import List, Tuple

from ..types import ImpactLevel, PatternContext, PatternMode, PatternPhase, PatternResult, PromptIntent, QualityDimension
from .base import BasePattern

Assumption = Tuple[str, str]  # (assumption, clarifying question)

FRONTEND_FRAMEWORKS = ['react', 'vue', 'angular', 'svelte', 'next', 'nuxt']
LANGUAGES = ['typescript', 'javascript', 'python', 'java', 'golang', 'rust']
DATABASES = ['postgres', 'mysql', 'mongodb', 'sqlite', 'redis']


class AssumptionExplicitizer(BasePattern):
    id = 'assumption-explicitizer'
    name = 'Assumption Explicitizer'
    description = 'Make implicit assumptions explicit to prevent misunderstandings'
    applicable_intents = frozenset({
        PromptIntent.CODE_GENERATION,
        PromptIntent.PLANNING,
        PromptIntent.MIGRATION,
        PromptIntent.TESTING,
        PromptIntent.DEBUGGING,
        PromptIntent.PRD_GENERATION,
    })
    mode = PatternMode.DEEP
    priority = 6
    phases = frozenset({PatternPhase.ALL})
    default_settings = {'maxAssumptions': 8, 'checkDomainAssumptions': True}

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        assumptions = self.identify_assumptions(
            prompt,
            context.intent.primary_intent,
            check_domain=bool(self.get_setting(context, 'checkDomainAssumptions')),
        )[:max(1, int(self.get_setting(context, 'maxAssumptions')))]

        if not assumptions:
            return self.skipped(prompt, QualityDimension.CLARITY, 'No implicit assumptions detected')

        lines = [
            '### Implicit Assumptions',
            '',
            'The following assumptions are being made. Please clarify if any are incorrect:',
            '',
        ]
        for index, (assumption, question) in enumerate(assumptions, 1):
            lines.append(f"**{index}. {assumption}**")
            lines.append(f"   Clarify: {question}")
            lines.append('')
        section = "\n".join(lines).rstrip()

        return self.applied(
            f"{prompt}\n\n{section}",
            QualityDimension.CLARITY,
            f"Identified {len(assumptions)} implicit assumptions to clarify",
            ImpactLevel.HIGH,
        )

    def identify_assumptions(self, prompt: str, intent: PromptIntent, check_domain: bool = True) -> List[Assumption]:
        assumptions = self._missing_context(prompt)
        by_intent = {
            PromptIntent.CODE_GENERATION: self._code,
            PromptIntent.PLANNING: self._planning,
            PromptIntent.MIGRATION: self._migration,
            PromptIntent.TESTING: self._testing,
            PromptIntent.DEBUGGING: self._debugging,
        }
        if intent in by_intent:
            assumptions.extend(by_intent[intent](prompt))
        if check_domain:
            assumptions.extend(self._domain(prompt))

        seen = set()
        unique = []
        for assumption, question in assumptions:
            if assumption.lower() not in seen:
                seen.add(assumption.lower())
                unique.append((assumption, question))
        return unique

    def _missing_context(self, prompt: str) -> List[Assumption]:
        found = []
        if not self.mentions(prompt, FRONTEND_FRAMEWORKS) and self.mentions(prompt, ['component', 'frontend', 'ui']):
            found.append(('Frontend framework matches the existing project',
                          'Which frontend framework should be used?'))
        if not self.mentions(prompt, LANGUAGES) and self.mentions(prompt, ['function', 'class', 'code', 'implement']):
            found.append(('Language matches the existing codebase',
                          'Which programming language should be used?'))
        if not self.mentions(prompt, DATABASES) and self.mentions(prompt, ['database', 'store', 'persist', 'save']):
            found.append(('Database type is flexible', 'Which database technology is being used?'))
        return found

    def _code(self, prompt: str) -> List[Assumption]:
        found = []
        if not self.mentions(prompt, ['error', 'exception', 'catch', 'handle']):
            found.append(('Basic error handling is expected',
                          'What error handling strategy should be used? (raise, return None, default value, etc.)'))
        if self.mentions(prompt, ['api', 'fetch', 'request', 'call']) and \
                not self.mentions(prompt, ['async', 'await', 'promise', 'callback']):
            found.append(('Calls are asynchronous', 'Should this be synchronous or asynchronous?'))
        if self.mentions(prompt, ['state', 'store', 'context']) and \
                not self.mentions(prompt, ['redux', 'zustand', 'mobx', 'context api']):
            found.append(("Using the framework's built-in state handling",
                          'Which state management approach is preferred?'))
        return found

    def _planning(self, prompt: str) -> List[Assumption]:
        found = []
        if not self.mentions(prompt, ['team', 'developer', 'person']):
            found.append(('Small team (1-3 developers)', 'How many people will work on this?'))
        if not self.mentions(prompt, ['deadline', 'timeline', 'sprint', 'week', 'month']):
            found.append(('Flexible timeline', 'What are the timeline constraints?'))
        if not self.mentions(prompt, ['users', 'traffic', 'scale', 'load']):
            found.append(('Starting with low-moderate scale', 'What is the expected scale (users, requests/sec)?'))
        return found

    def _migration(self, prompt: str) -> List[Assumption]:
        found = []
        if not self.mentions(prompt, ['downtime', 'zero-downtime', 'maintenance']):
            found.append(('Some downtime is acceptable', 'Is zero-downtime migration required?'))
        if not self.mentions(prompt, ['rollback', 'revert', 'backup']):
            found.append(('Rollback capability is needed', 'What is the rollback strategy if migration fails?'))
        found.append(('All existing data must be preserved',
                      'Can any data be discarded or archived during migration?'))
        return found

    def _testing(self, prompt: str) -> List[Assumption]:
        found = []
        if not self.mentions(prompt, ['jest', 'vitest', 'mocha', 'pytest', 'junit']):
            found.append(("Using project's existing test framework", 'Which test framework should be used?'))
        if not self.mentions(prompt, ['coverage', 'percent']) and '%' not in prompt:
            found.append(('Standard coverage target (80%+)', 'What is the target code coverage percentage?'))
        if not self.mentions(prompt, ['mock', 'stub', 'fake', 'spy']):
            found.append(('External dependencies should be mocked', 'Should tests use real dependencies or mocks?'))
        return found

    def _debugging(self, prompt: str) -> List[Assumption]:
        found = []
        if not self.mentions(prompt, ['production', 'staging', 'development', 'local']):
            found.append(('Bug occurs in development environment', 'In which environment does this bug occur?'))
        if not self.mentions(prompt, ['always', 'sometimes', 'intermittent', 'random']):
            found.append(('Bug is consistently reproducible', 'Does this bug occur every time or intermittently?'))
        return found

    def _domain(self, prompt: str) -> List[Assumption]:
        found = []
        if self.mentions(prompt, ['user', 'login', 'auth']) and \
                not self.mentions(prompt, ['jwt', 'session', 'oauth', 'cookie']):
            found.append(('Using token-based authentication', 'Which authentication mechanism is in use?'))
        if self.mentions(prompt, ['api', 'endpoint']) and \
                not self.mentions(prompt, ['rest', 'graphql', 'grpc', 'websocket']):
            found.append(('Building REST API', 'Which API style? (REST, GraphQL, gRPC, etc.)'))
        return found
