"""PRD Structure Enforcer - checks a PRD request against the standard sections."""

from dataclasses import dataclass
from typing import List, Tuple

from ..confidence import round_half_up
from ..types import (
    ImpactLevel,
    PatternContext,
    PatternMode,
    PatternPhase,
    PatternResult,
    PromptIntent,
    QualityDimension,
)
from .base import BasePattern, PatternDependency


@dataclass(frozen=True)
class PRDSection:
    name: str
    keywords: Tuple[str, ...]
    question: str


PRD_SECTIONS = (
    PRDSection('Problem Statement', ('problem', 'issue', 'pain point', 'challenge', 'need'),
               'What problem does this solve? What pain points are being addressed?'),
    PRDSection('Target Users', ('user', 'audience', 'persona', 'customer', 'stakeholder', 'who'),
               'Who are the target users? What are their characteristics and needs?'),
    PRDSection('Goals & Success Metrics', ('goal', 'objective', 'success', 'metric', 'kpi', 'measure', 'outcome'),
               'What are the measurable goals? How will success be measured?'),
    PRDSection('Functional Requirements', ('feature', 'requirement', 'must', 'should', 'functionality', 'capability'),
               'What specific functionality is required? List the features.'),
    PRDSection('Scope & Boundaries', ('scope', 'boundary', 'included', 'excluded', 'out of scope', 'limitation'),
               'What is in scope and out of scope? What are the boundaries?'),
    PRDSection('Constraints & Dependencies', ('constraint', 'dependency', 'limitation', 'assumption', 'prerequisite'),
               'What technical or business constraints exist? What dependencies are there?'),
    PRDSection('Timeline & Milestones', ('timeline', 'deadline', 'milestone', 'phase', 'sprint', 'release'),
               'What is the timeline? What are key milestones?'),
    PRDSection('Risks & Mitigations', ('risk', 'mitigation', 'concern', 'blocker', 'issue'),
               'What are potential risks? How will they be mitigated?'),
)

BEST_PRACTICES = [
    'Be specific about user personas and their needs',
    'Include measurable success criteria',
    'Clearly define what is NOT in scope',
    'Prioritize requirements (must-have vs nice-to-have)',
    'Consider edge cases and error scenarios',
]


class PRDStructureEnforcer(BasePattern):
    id = 'prd-structure-enforcer'
    name = 'PRD Structure Enforcer'
    description = 'Ensures PRD requests cover the standard PRD sections'
    applicable_intents = frozenset({PromptIntent.PRD_GENERATION})
    mode = PatternMode.DEEP
    priority = 9
    phases = frozenset({PatternPhase.QUESTION_VALIDATION, PatternPhase.OUTPUT_GENERATION})
    dependencies = PatternDependency(excludes_with=('structure-organizer',))
    default_settings = {'showCompletenessScore': True, 'includeBestPractices': True}

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        present, weak, missing = self.analyze_sections(prompt)
        if not missing:
            return self.skipped(prompt, QualityDimension.COMPLETENESS, 'PRD prompt already includes key sections')

        coverage = round_half_up((len(present) + len(weak) * 0.5) / len(PRD_SECTIONS) * 100)
        lines = ['### PRD Completeness Check', '']
        if self.get_setting(context, 'showCompletenessScore'):
            lines.extend([f"**Current coverage:** {coverage}%", ''])

        lines.extend(['**Missing sections to consider:**', ''])
        for section in missing:
            lines.extend([f"#### {section.name}", f"_{section.question}_", ''])

        if weak:
            lines.extend(['**Sections that could be expanded:**', ''])
            lines.extend(f"- **{section.name}**: {section.question}" for section in weak)
            lines.append('')

        if self.get_setting(context, 'includeBestPractices'):
            lines.extend(['---', '', '**PRD Best Practices:**'])
            lines.extend(f"- {practice}" for practice in BEST_PRACTICES)

        return self.applied(
            f"{prompt}\n\n" + "\n".join(lines).rstrip(),
            QualityDimension.COMPLETENESS,
            f"Added {len(missing)} PRD sections for consideration",
            ImpactLevel.HIGH,
        )

    @staticmethod
    def analyze_sections(prompt: str) -> Tuple[List[PRDSection], List[PRDSection], List[PRDSection]]:
        """Split sections into (present, weak, missing) by keyword hits."""
        lower_prompt = prompt.lower()
        present, weak, missing = [], [], []
        for section in PRD_SECTIONS:
            hits = sum(1 for keyword in section.keywords if keyword in lower_prompt)
            if hits >= 2:
                present.append(section)
            elif hits == 1:
                weak.append(section)
            else:
                missing.append(section)
        return present, weak, missing
