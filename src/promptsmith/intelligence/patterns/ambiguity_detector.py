"""Ambiguity Detector - flags vague terms and phrases that need clarification."""

import re

from ..types import PatternContext, PatternResult, PromptIntent, QualityDimension
from .base import BasePattern

# term -> qualified alternatives that make the term unambiguous
AMBIGUOUS_TERMS = {
    'app': ['web app', 'mobile app', 'desktop app', 'CLI tool'],
    'system': ['backend system', 'frontend system', 'full-stack system', 'microservice'],
    'feature': ['user-facing feature', 'backend feature', 'API endpoint', 'UI component'],
    'component': ['React component', 'Vue component', 'service component', 'module'],
    'service': ['REST API', 'GraphQL API', 'background worker', 'microservice'],
    'database': ['PostgreSQL', 'MongoDB', 'MySQL', 'SQLite', 'Redis'],
    'authentication': ['OAuth', 'JWT', 'session-based', 'API keys', 'social login'],
    'cache': ['in-memory cache', 'Redis cache', 'CDN cache', 'browser cache'],
    'storage': ['local storage', 'cloud storage', 'file system', 'object storage'],
    'user': ['end user', 'admin user', 'API consumer', 'authenticated user'],
    'some': ['specific subset', 'all matching', 'first N', 'random sample'],
    'many': ['more than 10', 'more than 100', 'more than 1000', 'unlimited'],
    'few': ['2-3', '5-10', 'less than 10'],
    'large': ['>1MB', '>100MB', '>1GB', 'unbounded'],
    'small': ['<1KB', '<100KB', '<1MB'],
    'fast': ['<100ms', '<1s', '<5s', 'real-time'],
    'slow': ['>1s', '>5s', '>30s'],
    'good': ['>80% coverage', '>90% accuracy', 'production-ready', 'MVP-quality'],
    'better': ['improved by X%', 'faster than current', 'more readable'],
    'simple': ['single function', 'minimal dependencies', 'no external calls'],
    'complex': ['multi-step', 'with dependencies', 'requiring state'],
}

VAGUE_PATTERNS = [
    (re.compile(r"\bshould work\b", re.IGNORECASE), 'Define specific success criteria and test cases'),
    (re.compile(r"\bproperly\b", re.IGNORECASE), 'Specify exact behavior or standards to follow'),
    (re.compile(r"\bcorrectly\b", re.IGNORECASE), 'Define what "correct" means with specific criteria'),
    (re.compile(r"\bappropriate(ly)?\b", re.IGNORECASE), 'Specify the exact behavior or standards expected'),
    (re.compile(r"\bas needed\b", re.IGNORECASE), 'Define when and what is needed specifically'),
    (re.compile(r"\bif necessary\b", re.IGNORECASE), 'Define the conditions that trigger this action'),
    (re.compile(r"\betc\b", re.IGNORECASE), 'List all items explicitly or define a complete category'),
    (re.compile(r"\band so on\b", re.IGNORECASE), 'Enumerate all items or define the pattern explicitly'),
    (re.compile(r"\bwhatever\b", re.IGNORECASE), 'Specify the exact options or constraints'),
    (re.compile(r"\bsomething like\b", re.IGNORECASE), 'Provide the exact specification or reference'),
    (re.compile(r"\bmaybe\b", re.IGNORECASE), 'Decide if this is a requirement or not'),
    (re.compile(r"\bprobably\b", re.IGNORECASE), 'Confirm if this is a requirement or not'),
]

# Pronouns only count when they open a sentence
PRONOUN_PATTERNS = [
    (re.compile(r"(?:^|[.!?]\s*)(it|they)\b", re.IGNORECASE | re.MULTILINE), 'unclear pronoun reference'),
    (re.compile(r"(?:^|[.!?]\s*)(this|that|those)(?=[.!?,]|\s*$)", re.IGNORECASE | re.MULTILINE),
     'unclear demonstrative reference'),
]


class AmbiguityDetector(BasePattern):
    id = 'ambiguity-detector'
    name = 'Ambiguity Detector'
    description = 'Identifies and clarifies ambiguous terms and vague references'
    applicable_intents = frozenset({
        PromptIntent.CODE_GENERATION, PromptIntent.PLANNING, PromptIntent.REFINEMENT,
        PromptIntent.DEBUGGING, PromptIntent.DOCUMENTATION, PromptIntent.PRD_GENERATION,
        PromptIntent.TESTING, PromptIntent.MIGRATION,
    })
    priority = 9
    default_settings = {
        'checkVaguePatterns': True,
        'checkUndefinedPronouns': True,
        'maxClarifications': 10,
    }

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        findings = []
        clarifications = []

        for term, options in AMBIGUOUS_TERMS.items():
            if not re.search(rf"\b{term}\b", prompt, re.IGNORECASE):
                continue
            # Any qualifying option in the prompt ("mobile app", "PostgreSQL") settles the term
            qualifiers = "|".join(re.escape(option) for option in options)
            if not re.search(rf"(?<!\w)(?:{qualifiers})(?!\w)", prompt, re.IGNORECASE):
                findings.append(f'"{term}" is ambiguous')
                clarifications.append(f'[CLARIFY: "{term}" - specify: {", ".join(options[:3])}?]')

        if self.get_setting(context, 'checkVaguePatterns'):
            for pattern, suggestion in VAGUE_PATTERNS:
                if pattern.search(prompt):
                    findings.append(f"vague phrase: {pattern.pattern}")
                    clarifications.append(f"[CLARIFY: {suggestion}]")

        if self.get_setting(context, 'checkUndefinedPronouns'):
            for pattern, issue in PRONOUN_PATTERNS:
                if pattern.search(prompt):
                    findings.append(issue)

        if not findings:
            return self.skipped(prompt, QualityDimension.CLARITY, 'No significant ambiguities detected')

        enhanced = prompt
        max_clarifications = int(self.get_setting(context, 'maxClarifications') or 0)
        shown = clarifications[:max_clarifications] if max_clarifications > 0 else []
        if shown:
            enhanced = prompt + "\n\n## Clarifications Needed\n" + "\n".join(shown)

        count = len(findings)
        return self.applied(
            enhanced,
            QualityDimension.CLARITY,
            f"Identified {count} ambiguous terms/phrases requiring clarification",
            self.impact_for(count, high=4, medium=2),
        )
