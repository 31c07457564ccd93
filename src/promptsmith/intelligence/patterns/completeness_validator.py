"""Completeness Validator - asks for the core elements a prompt is missing."""

from typing import List

from ..confidence import round_half_up
from ..types import PatternContext, PatternResult, PromptIntent, QualityDimension
from .base import BasePattern, PatternDependency

# element -> (keywords proving presence, request shown when missing)
REQUIRED_ELEMENTS = {
    'objective': (
        ['objective', 'goal', 'purpose', 'need to', 'want to', 'trying to', 'aim', 'intend'],
        '- **Objective**: What is the primary goal? What problem are you solving?',
    ),
    'tech-stack': (
        ['javascript', 'typescript', 'python', 'java', 'rust', 'golang', 'php', 'ruby', 'swift',
         'kotlin', 'c++', 'c#', 'react', 'vue', 'angular', 'svelte', 'express', 'fastapi',
         'django', 'flask', 'spring', 'rails', 'postgres', 'mysql', 'mongodb', 'redis',
         'sqlite', 'docker', 'kubernetes', 'aws', 'azure', 'gcp', 'tech stack', 'technology',
         'framework', 'library', 'using', 'built with'],
        '- **Tech Stack**: Which technologies/frameworks? (e.g., Django, Node.js, PostgreSQL)',
    ),
    'success-criteria': (
        ['success', 'criteria', 'measure', 'metric', 'kpi', 'expected to', 'result in', 'achieve'],
        '- **Success Criteria**: How will you know it works? What metrics matter?',
    ),
    'constraints': (
        ['constraint', 'limit', 'must not', 'cannot', 'should not', 'avoid', 'within',
         'budget', 'deadline'],
        '- **Constraints**: Any limitations? (time, budget, performance, compatibility)',
    ),
    'output-format': (
        ['output', 'format', 'return', 'result', 'deliverable', 'component', 'function',
         'class', 'api', 'endpoint', 'file', 'document', 'report'],
        '- **Expected Output**: What should the result look like? (component, API, file, etc.)',
    ),
}


class CompletenessValidator(BasePattern):
    id = 'completeness-validator'
    name = 'Completeness Validator'
    description = 'Ensures all required elements are present in the prompt'
    applicable_intents = frozenset({
        PromptIntent.CODE_GENERATION, PromptIntent.PLANNING, PromptIntent.REFINEMENT,
    })
    priority = 6
    dependencies = PatternDependency(run_after=('success-criteria-enforcer',))

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        missing = self.find_missing_elements(prompt)
        if not missing:
            return self.skipped(prompt, QualityDimension.COMPLETENESS, 'All required elements present')

        total = len(REQUIRED_ELEMENTS)
        present = total - len(missing)
        score = round_half_up(present / total * 100)

        lines = [
            prompt,
            "",
            "---",
            "",
            f"**Completeness Check**: {score}% ({present}/{total} elements present)",
            "",
            "**Missing Information** (please specify):",
            "",
        ]
        lines.extend(REQUIRED_ELEMENTS[element][1] for element in missing)

        return self.applied(
            "\n".join(lines).strip(),
            QualityDimension.COMPLETENESS,
            f"Added {len(missing)} missing element prompts ({score}% complete)",
            self.impact_for(len(missing), high=3, medium=2),
        )

    @staticmethod
    def find_missing_elements(prompt: str) -> List[str]:
        lower_prompt = prompt.lower()
        return [
            element
            for element, (keywords, _) in REQUIRED_ELEMENTS.items()
            if not any(keyword in lower_prompt for keyword in keywords)
        ]
