"""Conversation Summarizer - turns free-form discussion into structured requirements."""

import re
from typing import List

from ..confidence import additive_confidence
from ..types import ImpactLevel, PatternContext, PatternMode, PatternPhase, PatternResult, PromptIntent, QualityDimension
from .base import BasePattern

CONVERSATIONAL_MARKERS = [
    # intent expressions
    'i want', 'i need', 'we need', 'we want', 'i would like', 'we would like',
    'would like to', 'should be able to', 'needs to',
    # thinking out loud
    'thinking about', 'maybe we could', 'what if', 'how about', 'perhaps we',
    'considering', 'wondering if',
    # connectors
    "let's", 'let me', 'also', 'and then', 'plus', 'another thing', 'oh and', 'by the way',
    # informal
    'basically', 'so basically', 'essentially', 'kind of like', 'sort of', 'something like',
    # collaborative
    'can we', 'could we', 'shall we',
]

STRUCTURE_INDICATORS = ['##', '###', '**Requirements:**', '**Features:**', '- [ ]', '1.', '2.', '3.']

# Matched per sentence; every pattern may contribute
REQUIREMENT_PATTERNS = [
    re.compile(r"(?:i |we )?(?:need|want|should|must|require)\s+(?:to\s+)?(.+)", re.IGNORECASE),
    re.compile(r"(?:should be able to|needs to|has to|have to)\s+(.+)", re.IGNORECASE),
    re.compile(r"(?:feature|functionality|capability):\s*(.+)", re.IGNORECASE),
    re.compile(r"(?:it should|it must|it needs to)\s+(.+)", re.IGNORECASE),
    re.compile(r"(?:users? (?:can|should|will|must))\s+(.+)", re.IGNORECASE),
    re.compile(r"(?:the system (?:should|must|will))\s+(.+)", re.IGNORECASE),
    re.compile(r"(?:support(?:s|ing)?)\s+(.+)", re.IGNORECASE),
    re.compile(r"(?:provides?|enables?|allows?)\s+(.+)", re.IGNORECASE),
]

CONSTRAINT_PATTERNS = [
    re.compile(r"(?:can't|cannot|shouldn't|must not)\s+(.+)", re.IGNORECASE),
    re.compile(r"(?:limited to|restricted to|only)\s+(.+)", re.IGNORECASE),
    re.compile(r"(?:within|budget|deadline|timeline):\s*(.+)", re.IGNORECASE),
    re.compile(r"(?:no more than|at most|maximum)\s+(.+)", re.IGNORECASE),
]

GOAL_PATTERNS = [
    re.compile(r"(?:goal is to|aim(?:ing)? to|objective is to)\s+(.+)", re.IGNORECASE),
    re.compile(r"(?:trying to|looking to|hoping to|want(?:ing)? to)\s+(.+)", re.IGNORECASE),
    re.compile(r"(?:so that|in order to|to achieve)\s+(.+)", re.IGNORECASE),
    re.compile(r"(?:the purpose is|main purpose|key purpose)\s+(.+)", re.IGNORECASE),
    re.compile(r"(?:ultimately|end goal|final goal|main goal)\s+(.+)", re.IGNORECASE),
    re.compile(r"(?:we're building this to|this will help)\s+(.+)", re.IGNORECASE),
]

MAX_CONSTRAINTS = 5
VERIFY_BELOW_CONFIDENCE = 80


class ConversationSummarizer(BasePattern):
    id = 'conversation-summarizer'
    name = 'Conversation Summarizer'
    description = 'Extracts structured requirements from messages'
    applicable_intents = frozenset({PromptIntent.SUMMARIZATION, PromptIntent.PLANNING, PromptIntent.PRD_GENERATION})
    mode = PatternMode.DEEP
    priority = 8
    phases = frozenset({PatternPhase.SUMMARIZATION})
    default_settings = {'maxRequirements': 10, 'maxGoals': 3, 'showConfidence': True}

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        if self.is_structured(prompt):
            return self.skipped(prompt, QualityDimension.STRUCTURE, 'Content already well-structured')
        if not self.is_conversational(prompt):
            return self.skipped(prompt, QualityDimension.STRUCTURE, 'Not conversational content')

        return self.applied(
            self._structure(prompt, context),
            QualityDimension.STRUCTURE,
            'Extracted structured requirements from conversation',
            ImpactLevel.HIGH,
        )

    @staticmethod
    def is_structured(prompt: str) -> bool:
        return sum(1 for indicator in STRUCTURE_INDICATORS if indicator in prompt) >= 3

    def is_conversational(self, prompt: str) -> bool:
        lower_prompt = prompt.lower()
        markers = sum(1 for marker in CONVERSATIONAL_MARKERS if marker in lower_prompt)
        has_bullets = '- ' in prompt or '* ' in prompt
        return markers >= 2 or (len(self.extract_sentences(prompt)) > 3 and not has_bullets)

    def _structure(self, prompt: str, context: PatternContext) -> str:
        requirements = self.extract_requirements(prompt)[:max(0, int(self.get_setting(context, 'maxRequirements')))]
        goals = self.extract_goals(prompt)[:max(0, int(self.get_setting(context, 'maxGoals')))]
        constraints = self.extract_constraints(prompt)
        confidence = additive_confidence(50, [
            (bool(requirements), 20),
            (bool(goals), 15),
            (bool(constraints), 15),
        ])

        parts = ["### Extracted Requirements\n\n"]
        if self.get_setting(context, 'showConfidence'):
            parts.append(f"*Extraction confidence: {confidence}%*\n\n")
        for title, items in (('Goals', goals), ('Requirements', requirements), ('Constraints', constraints)):
            if items:
                parts.append(f"**{title}:**\n" + "\n".join(f"- {item}" for item in items) + "\n\n")
        if confidence < VERIFY_BELOW_CONFIDENCE:
            parts.append("> **Note:** Please verify these extracted requirements are complete and accurate.\n\n")
        parts.append("---\n\n**Original Context:**\n" + prompt)
        return "".join(parts)

    def extract_requirements(self, prompt: str) -> List[str]:
        requirements: List[str] = []
        for sentence in self.extract_sentences(prompt):
            for pattern in REQUIREMENT_PATTERNS:
                match = pattern.search(sentence)
                if match:
                    self._add_unique(requirements, match.group(1))
        return requirements

    def extract_constraints(self, prompt: str) -> List[str]:
        constraints: List[str] = []
        for pattern in CONSTRAINT_PATTERNS:
            for match in pattern.finditer(prompt):
                self._add_unique(constraints, match.group(1))

        lower_prompt = prompt.lower()
        if 'performance' in lower_prompt:
            constraints.append('Performance requirements to be defined')
        if 'security' in lower_prompt:
            constraints.append('Security requirements to be defined')
        if 'mobile' in lower_prompt and 'desktop' in lower_prompt:
            constraints.append('Must work on both mobile and desktop')
        return constraints[:MAX_CONSTRAINTS]

    def extract_goals(self, prompt: str) -> List[str]:
        goals: List[str] = []
        for pattern in GOAL_PATTERNS:
            for match in pattern.finditer(prompt):
                self._add_unique(goals, match.group(1))
        return goals

    def _add_unique(self, items: List[str], text: str) -> None:
        cleaned = self.clean_whitespace(re.sub(r"[.!?,;:]+$", "", text.strip()))[:200]
        if cleaned and cleaned not in items:
            items.append(cleaned)
