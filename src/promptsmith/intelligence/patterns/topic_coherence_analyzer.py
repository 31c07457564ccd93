"""Topic Coherence Analyzer - groups a multi-topic discussion by theme."""

import re
from typing import List

from ..types import ImpactLevel, PatternContext, PatternMode, PatternPhase, PatternResult, PromptIntent, QualityDimension
from .base import BasePattern

TOPIC_KEYWORDS = {
    'User Interface': ['ui', 'interface', 'design', 'layout', 'button', 'form', 'page', 'screen',
                       'component', 'modal', 'dialog', 'navigation', 'menu', 'sidebar', 'header', 'footer'],
    'Backend/API': ['api', 'backend', 'server', 'endpoint', 'route', 'controller', 'service',
                    'middleware', 'rest', 'graphql', 'websocket'],
    'Database': ['database', 'db', 'schema', 'table', 'query', 'migration', 'model', 'orm', 'sql',
                 'nosql', 'index', 'relationship'],
    'Authentication': ['auth', 'login', 'password', 'session', 'token', 'permission', 'role', 'oauth',
                       'jwt', 'sso', 'mfa', '2fa'],
    'Performance': ['performance', 'speed', 'cache', 'optimize', 'latency', 'load time', 'bundle',
                    'lazy', 'memory', 'cpu'],
    'Testing': ['test', 'spec', 'coverage', 'qa', 'validation', 'unit test', 'integration', 'e2e',
                'mock', 'fixture'],
    'Deployment': ['deploy', 'ci/cd', 'pipeline', 'release', 'environment', 'production', 'staging',
                   'docker', 'kubernetes'],
    'User Experience': ['ux', 'usability', 'accessibility', 'user flow', 'journey', 'experience',
                        'onboarding', 'feedback'],
    'Business Logic': ['business', 'workflow', 'process', 'rule', 'logic', 'requirement', 'feature',
                       'use case'],
    'Integration': ['integration', 'third-party', 'external', 'webhook', 'sync', 'connect', 'import', 'export'],
    'Security': ['security', 'encryption', 'vulnerability', 'xss', 'csrf', 'injection', 'sanitize', 'audit'],
    'Analytics': ['analytics', 'tracking', 'metrics', 'dashboard', 'report', 'insight', 'data', 'statistics'],
    'Error Handling': ['error', 'exception', 'fallback', 'retry', 'timeout', 'failure', 'recovery', 'logging'],
    'Documentation': ['documentation', 'docs', 'readme', 'guide', 'tutorial', 'api docs', 'comment', 'docstring'],
    'State Management': ['state', 'store', 'redux', 'context', 'global state', 'local state', 'persist', 'hydrate'],
}

TOPIC_HEADER = re.compile(r"##\s*(?:user interface|backend|database|auth|performance|testing|deploy)", re.IGNORECASE)

MAX_SENTENCES_PER_TOPIC = 3


class TopicCoherenceAnalyzer(BasePattern):
    id = 'topic-coherence-analyzer'
    name = 'Topic Coherence Analyzer'
    description = 'Detects topic shifts and multi-topic conversations'
    applicable_intents = frozenset({PromptIntent.SUMMARIZATION, PromptIntent.PLANNING})
    # Runs while a conversation is tracked (fast) and when it is summarized (deep)
    mode = PatternMode.BOTH
    priority = 6
    phases = frozenset({PatternPhase.CONVERSATION_TRACKING, PatternPhase.SUMMARIZATION})
    default_settings = {'minTopicsForOrganization': 2}

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        topics = self.detect_topics(prompt)
        minimum = max(2, int(self.get_setting(context, 'minTopicsForOrganization')))

        if len(topics) < minimum:
            return self.skipped(prompt, QualityDimension.STRUCTURE, 'Single coherent topic detected')
        if TOPIC_HEADER.search(prompt):
            return self.skipped(prompt, QualityDimension.STRUCTURE, 'Topics already organized')

        return self.applied(
            self._organize(prompt, topics),
            QualityDimension.STRUCTURE,
            f"Organized {len(topics)} distinct topics for clarity",
            ImpactLevel.MEDIUM,
        )

    def detect_topics(self, prompt: str) -> List[str]:
        return [topic for topic, keywords in TOPIC_KEYWORDS.items() if self.mentions(prompt, keywords)]

    def _organize(self, prompt: str, topics: List[str]) -> str:
        lines = ['### Topics Covered', 'This conversation touches on multiple areas:']
        lines.extend(f"{index}. **{topic}**" for index, topic in enumerate(topics, 1))
        lines.extend(['', '---', '', '### Discussion by Topic', ''])

        sentences = self.extract_sentences(prompt)
        for topic in topics:
            relevant = [s.strip() for s in sentences if self.mentions(s, TOPIC_KEYWORDS[topic])]
            lines.append(f"#### {topic}")
            if relevant:
                lines.extend(f"- {sentence}" for sentence in relevant[:MAX_SENTENCES_PER_TOPIC])
            else:
                lines.append(f"- Discussion related to {topic}")
            lines.append('')

        lines.extend(['---', '', '**Full Context:**', prompt])
        return "\n".join(lines)
