"""Success Metrics Enforcer - adds measurable KPIs to product requirements."""

from typing import List

from ..types import ImpactLevel, PatternContext, PatternMode, PatternPhase, PatternResult, PromptIntent, QualityDimension
from .base import BasePattern

METRICS_KEYWORDS = [
    'success metric', 'success criteria', 'kpi', 'measure success', 'acceptance criteria',
    '% increase', '% decrease', 'conversion rate', 'completion rate', 'response time',
    'latency', 'uptime', 'sla', 'benchmark',
]

PRODUCT_KEYWORDS = ['feature', 'build', 'implement', 'goal', 'objective', 'product', 'launch', 'release']

# (trigger keywords, suggested KPIs)
METRIC_SUGGESTIONS = [
    (['performance', 'fast', 'speed'], ['Response time < [X]ms (p95)', 'Page load time improvement by [X]%']),
    (['user', 'engagement', 'retention'], ['User engagement increase by [X]%', 'Task completion rate > [X]%']),
    (['conversion', 'sales', 'revenue'], ['Conversion rate improvement by [X]%', 'Revenue impact of $[X]']),
    (['quality', 'bug', 'error'], ['Error rate < [X]%', 'Test coverage > [X]%']),
    (['api', 'integration'], ['API availability > [X]%', 'Integration success rate > [X]%']),
]

PLACEHOLDER_METRICS = [
    '[Define primary success metric]',
    '[Define secondary success metric]',
    '[Define timeline for measurement]',
]


class SuccessMetricsEnforcer(BasePattern):
    id = 'success-metrics-enforcer'
    name = 'Success Metrics Enforcer'
    description = 'Ensures measurable success criteria exist'
    applicable_intents = frozenset({PromptIntent.PRD_GENERATION, PromptIntent.PLANNING})
    mode = PatternMode.DEEP
    priority = 7
    phases = frozenset({PatternPhase.QUESTION_VALIDATION, PatternPhase.OUTPUT_GENERATION})
    default_settings = {'maxKPIs': 4, 'includeMeasurementGuidance': True}

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        if self.mentions(prompt, METRICS_KEYWORDS):
            return self.skipped(prompt, QualityDimension.COMPLETENESS, 'Success metrics already present')
        if not self.mentions(prompt, PRODUCT_KEYWORDS):
            return self.skipped(prompt, QualityDimension.COMPLETENESS, 'Content does not require success metrics')

        metrics = self.infer_metrics(prompt)[:max(1, int(self.get_setting(context, 'maxKPIs')))]
        section = "\n\n### Success Metrics\n**Primary KPIs:**\n" + "\n".join(f"- {m}" for m in metrics)
        if self.get_setting(context, 'includeMeasurementGuidance'):
            section += (
                "\n\n**Measurement Approach:**\n"
                "- Baseline: [Current state before implementation]\n"
                "- Target: [Specific, measurable goals]\n"
                "- Timeline: [When to measure success]"
            )

        return self.applied(
            prompt + section,
            QualityDimension.COMPLETENESS,
            'Added measurable success criteria and KPIs',
            ImpactLevel.HIGH,
        )

    def infer_metrics(self, prompt: str) -> List[str]:
        metrics: List[str] = []
        for keywords, suggestions in METRIC_SUGGESTIONS:
            if self.mentions(prompt, keywords):
                metrics.extend(suggestions)
        return metrics or list(PLACEHOLDER_METRICS)
