"""Structure Organizer - reorders content into logical sections.

Target flow: Objective, Requirements, Technical Constraints, Constraints,
Expected Output, Success Criteria.
"""

import re
from typing import List

from ..types import ImpactLevel, PatternContext, PatternResult, PromptIntent, QualityDimension
from .base import BasePattern, PatternDependency

SECTION_MARKERS = [
    re.compile(r"^#+\s+.+$", re.MULTILINE),
    re.compile(r"^[A-Z][^.!?\n]+:$", re.MULTILINE),
    re.compile(r"^\d+\.\s+[A-Z].*$", re.MULTILINE),
    re.compile(r"^[-*]\s+.*$", re.MULTILINE),
]

IDEAL_ORDER = ['objective', 'requirement', 'technical', 'constraint', 'output', 'success']

# (header, extraction regex) in output order
SECTION_EXTRACTORS = [
    ('Objective', re.compile(r"(?:objective|goal|purpose)\s*:\s*(.+?)(?:\n\n|$)", re.IGNORECASE | re.DOTALL)),
    ('Requirements', re.compile(r"(?:requirements?|must have)\s*:\s*(.+?)(?:\n\n|##|$)", re.IGNORECASE | re.DOTALL)),
    ('Technical Constraints',
     re.compile(r"(?:technical|tech stack|technology|built with)\s*:\s*(.+?)(?:\n\n|##|$)", re.IGNORECASE | re.DOTALL)),
    ('Constraints', re.compile(r"(?:constraints?|limitations?)\s*:\s*(.+?)(?:\n\n|##|$)", re.IGNORECASE | re.DOTALL)),
    ('Expected Output',
     re.compile(r"(?:expected output|output|deliverables?)\s*:\s*(.+?)(?:\n\n|##|$)", re.IGNORECASE | re.DOTALL)),
    ('Success Criteria',
     re.compile(r"(?:success criteria|acceptance criteria)\s*:\s*(.+?)(?:\n\n|##|$)", re.IGNORECASE | re.DOTALL)),
]


class StructureOrganizer(BasePattern):
    id = 'structure-organizer'
    name = 'Structure Organizer'
    description = 'Reorders information into logical sections'
    applicable_intents = frozenset({
        PromptIntent.CODE_GENERATION, PromptIntent.PLANNING, PromptIntent.REFINEMENT,
        PromptIntent.DEBUGGING, PromptIntent.DOCUMENTATION,
    })
    priority = 8
    dependencies = PatternDependency(run_after=('objective-clarifier',))
    default_settings = {'addHeadersIfMissing': True, 'reorderSections': True}

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        sections = self._detect_sections(prompt)

        if not sections or self._is_well_ordered(sections) or not self.get_setting(context, 'reorderSections'):
            enhanced = prompt
            if self.get_setting(context, 'addHeadersIfMissing') and prompt.strip():
                enhanced = self._add_section_headers(prompt)
            if enhanced == prompt:
                return self.skipped(prompt, QualityDimension.STRUCTURE, 'Structure already clear')
            return self.applied(enhanced, QualityDimension.STRUCTURE,
                                'Added section headers for clarity', ImpactLevel.LOW)

        structured = []
        remaining = prompt
        for header, pattern in SECTION_EXTRACTORS:
            match = pattern.search(prompt)
            if not match or not match.group(1).strip():
                continue
            structured.append(f"## {header}\n\n{match.group(1).strip()}")
            remaining = remaining.replace(match.group(0), '', 1)

        if not structured:
            return self.skipped(prompt, QualityDimension.STRUCTURE, 'No reorderable sections found')

        remaining = re.sub(r"^#{1,6}\s*.+\n?", '', remaining, flags=re.MULTILINE)
        remaining = re.sub(r"\n{3,}", "\n\n", remaining).strip()
        if remaining:
            structured.append(remaining)

        count = len(structured) - (1 if remaining else 0)
        return self.applied(
            "\n\n".join(structured),
            QualityDimension.STRUCTURE,
            f"Reorganized content into {count} logical sections",
            self.impact_for(count, high=4, medium=2),
        )

    @staticmethod
    def _detect_sections(prompt: str) -> List[str]:
        sections = []
        for marker in SECTION_MARKERS:
            sections.extend(marker.findall(prompt))
        return sections

    @staticmethod
    def _is_well_ordered(sections: List[str]) -> bool:
        last_index = -1
        for section in sections:
            lower_section = section.lower()
            index = next((i for i, keyword in enumerate(IDEAL_ORDER) if keyword in lower_section), -1)
            if index == -1:
                continue
            if index < last_index:
                return False
            last_index = index
        return True

    @staticmethod
    def _add_section_headers(prompt: str) -> str:
        if re.search(r"^#+\s+", prompt, re.MULTILINE):
            return prompt
        return "## Objective\n\n" + prompt
