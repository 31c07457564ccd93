"""Technical Context Enricher - adds missing language and framework context."""

import re
from typing import Optional

from ..types import ImpactLevel, PatternContext, PatternResult, PromptIntent, QualityDimension
from .base import BasePattern, PatternDependency

CONTEXT_MARKERS = [
    re.compile(r"version|v\d+\.\d+", re.IGNORECASE),
    re.compile(r"technical (context|constraints|requirements)", re.IGNORECASE),
    re.compile(r"language:.*framework:", re.IGNORECASE | re.DOTALL),
    re.compile(r"using (python|javascript|typescript|java|rust|go) \d", re.IGNORECASE),
]

LANGUAGES = {
    'python': 'Python',
    'javascript': 'JavaScript',
    'typescript': 'TypeScript',
    'java': 'Java',
    'rust': 'Rust',
    'golang': 'Go',
    'php': 'PHP',
    'ruby': 'Ruby',
    'swift': 'Swift',
    'kotlin': 'Kotlin',
    'c++': 'C++',
    'csharp': 'C#',
    'c#': 'C#',
}

# framework keyword -> (framework name, implied language)
FRAMEWORKS = {
    'react': ('React', 'JavaScript/TypeScript'),
    'vue': ('Vue.js', 'JavaScript/TypeScript'),
    'angular': ('Angular', 'TypeScript'),
    'svelte': ('Svelte', 'JavaScript/TypeScript'),
    'nextjs': ('Next.js', 'JavaScript/TypeScript'),
    'django': ('Django', 'Python'),
    'flask': ('Flask', 'Python'),
    'fastapi': ('FastAPI', 'Python'),
    'express': ('Express.js', 'JavaScript/TypeScript'),
    'nestjs': ('NestJS', 'TypeScript'),
    'spring': ('Spring Boot', 'Java'),
    'rails': ('Ruby on Rails', 'Ruby'),
    'laravel': ('Laravel', 'PHP'),
}


class TechnicalContextEnricher(BasePattern):
    id = 'technical-context-enricher'
    name = 'Technical Context Enricher'
    description = 'Adds missing technical context (language, framework, versions)'
    applicable_intents = frozenset({
        PromptIntent.CODE_GENERATION, PromptIntent.REFINEMENT, PromptIntent.DEBUGGING,
        PromptIntent.TESTING, PromptIntent.MIGRATION,
    })
    priority = 5
    dependencies = PatternDependency(run_after=('objective-clarifier',))
    default_settings = {'detectFrameworks': True, 'suggestVersions': True}

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        if any(marker.search(prompt) for marker in CONTEXT_MARKERS):
            return self.skipped(prompt, QualityDimension.COMPLETENESS, 'Technical context already specified')

        lower_prompt = prompt.lower()
        enhancements = []

        language = self._detect_language(lower_prompt)
        if language and self.get_setting(context, 'suggestVersions') and not self._has_version_info(prompt):
            enhancements.append(f"Language: {language} (please specify version if critical)")

        if context.intent.primary_intent == PromptIntent.CODE_GENERATION and self.get_setting(context, 'detectFrameworks'):
            framework = self._detect_framework(lower_prompt)
            if framework:
                enhancements.append(f"Framework: {framework}")

        if not enhancements:
            return self.skipped(prompt, QualityDimension.COMPLETENESS, 'No additional technical context needed')

        section = "\n\n# Technical Constraints\n" + "\n".join(f"- {e}" for e in enhancements)
        return self.applied(
            prompt + section,
            QualityDimension.COMPLETENESS,
            f"Added {len(enhancements)} technical context specifications",
            ImpactLevel.MEDIUM,
        )

    def _detect_language(self, lower_prompt: str) -> Optional[str]:
        for key, name in LANGUAGES.items():
            if re.search(rf"(?<!\w){re.escape(key)}(?!\w)", lower_prompt):
                return name
        for key, (_, language) in FRAMEWORKS.items():
            if re.search(rf"\b{key}\b", lower_prompt):
                return language
        return None

    def _detect_framework(self, lower_prompt: str) -> Optional[str]:
        for key, (framework, _) in FRAMEWORKS.items():
            if re.search(rf"\b{key}\b", lower_prompt):
                return framework
        return None

    @staticmethod
    def _has_version_info(prompt: str) -> bool:
        return bool(re.search(r"\d+\.\d+", prompt) or re.search(r"v\d+", prompt))
