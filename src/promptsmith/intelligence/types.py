"""
Core types for the prompt intelligence pipeline.

Defines the closed vocabularies (intents, quality dimensions, modes, phases)
and the plain result values passed between the detector, the pattern
scheduler, the quality assessor and the optimizer.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class PromptIntent(Enum):
    """Inferred purpose of a prompt."""
    CODE_GENERATION = "code-generation"    # "Build a React component"
    PLANNING = "planning"                  # "Help me plan a feature"
    REFINEMENT = "refinement"              # "Make this faster"
    DEBUGGING = "debugging"                # "Fix this error"
    DOCUMENTATION = "documentation"        # "Explain this code"
    TESTING = "testing"                    # "Write unit tests for..."
    MIGRATION = "migration"                # "Upgrade from Vue 2 to 3"
    SECURITY_REVIEW = "security-review"    # "Audit this endpoint"
    LEARNING = "learning"                  # "Teach me closures"
    PRD_GENERATION = "prd-generation"      # explicit command only
    SUMMARIZATION = "summarization"        # explicit command only


# Intents the detector may infer from text; the rest are only set explicitly.
INFERRED_INTENTS = (
    PromptIntent.CODE_GENERATION,
    PromptIntent.PLANNING,
    PromptIntent.REFINEMENT,
    PromptIntent.DEBUGGING,
    PromptIntent.DOCUMENTATION,
    PromptIntent.TESTING,
    PromptIntent.MIGRATION,
    PromptIntent.SECURITY_REVIEW,
    PromptIntent.LEARNING,
)

EXPLICIT_INTENTS = (PromptIntent.PRD_GENERATION, PromptIntent.SUMMARIZATION)


class QualityDimension(Enum):
    """Heuristic quality dimensions."""
    CLARITY = "clarity"
    EFFICIENCY = "efficiency"
    STRUCTURE = "structure"
    COMPLETENESS = "completeness"
    ACTIONABILITY = "actionability"


class ImpactLevel(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class OptimizationMode(Enum):
    """Processing depth requested by the caller."""
    FAST = "fast"
    DEEP = "deep"
    PRD = "prd"
    CONVERSATIONAL = "conversational"


class PatternMode(Enum):
    """Modes a pattern declares itself applicable to."""
    FAST = "fast"
    DEEP = "deep"
    BOTH = "both"


class PatternPhase(Enum):
    """Workflow phases a pattern can be restricted to."""
    ALL = "all"
    QUESTION_VALIDATION = "question-validation"
    OUTPUT_GENERATION = "output-generation"
    CONVERSATION_TRACKING = "conversation-tracking"
    SUMMARIZATION = "summarization"


MIN_PATTERN_PRIORITY = 1
MAX_PATTERN_PRIORITY = 10


def is_valid_priority(value: Any) -> bool:
    """Priorities are plain integers in 1..10 (bools are rejected)."""
    return (
        isinstance(value, int)
        and not isinstance(value, bool)
        and MIN_PATTERN_PRIORITY <= value <= MAX_PATTERN_PRIORITY
    )


class AmbiguityLevel(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class IntentCharacteristics:
    """Independent textual traits of a prompt."""
    has_code_context: bool = False
    has_technical_terms: bool = False
    is_open_ended: bool = False
    needs_structure: bool = False


@dataclass(frozen=True)
class SecondaryIntent:
    intent: PromptIntent
    confidence: int


@dataclass
class IntentAnalysis:
    """Result of intent detection."""
    primary_intent: PromptIntent
    confidence: int = 50  # 0-100
    characteristics: IntentCharacteristics = field(default_factory=IntentCharacteristics)
    suggested_mode: Optional[OptimizationMode] = None
    secondary_intents: List[SecondaryIntent] = field(default_factory=list)
    ambiguity: Optional[AmbiguityLevel] = None
    scores: Dict[PromptIntent, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "primary_intent": self.primary_intent.value,
            "confidence": self.confidence,
            "characteristics": {
                "has_code_context": self.characteristics.has_code_context,
                "has_technical_terms": self.characteristics.has_technical_terms,
                "is_open_ended": self.characteristics.is_open_ended,
                "needs_structure": self.characteristics.needs_structure,
            },
            "suggested_mode": self.suggested_mode.value if self.suggested_mode else None,
            "secondary_intents": [
                {"intent": s.intent.value, "confidence": s.confidence}
                for s in self.secondary_intents
            ],
            "ambiguity": self.ambiguity.value if self.ambiguity else None,
        }


@dataclass(frozen=True)
class Improvement:
    """A single improvement reported by a pattern."""
    dimension: QualityDimension
    description: str
    impact: ImpactLevel

    def to_dict(self) -> Dict[str, str]:
        return {
            "dimension": self.dimension.value,
            "description": self.description,
            "impact": self.impact.value,
        }


@dataclass(frozen=True)
class PatternContext:
    """Read-only context handed to every pattern application."""
    intent: IntentAnalysis
    mode: OptimizationMode
    original_prompt: str
    phase: Optional[PatternPhase] = None
    custom_settings: Dict[str, Dict[str, Any]] = field(default_factory=dict)


@dataclass(frozen=True)
class PatternResult:
    enhanced_prompt: str
    improvement: Improvement
    applied: bool


@dataclass(frozen=True)
class PatternSummary:
    name: str
    description: str
    impact: ImpactLevel

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "description": self.description, "impact": self.impact.value}


@dataclass
class QualityMetrics:
    """Five heuristic sub-scores plus their intent-weighted combination."""
    clarity: int
    efficiency: int
    structure: int
    completeness: int
    actionability: int
    overall: int
    strengths: List[str] = field(default_factory=list)
    improvements: List[str] = field(default_factory=list)
    remaining_issues: List[str] = field(default_factory=list)

    def scores(self) -> Dict[str, int]:
        return {
            "clarity": self.clarity,
            "efficiency": self.efficiency,
            "structure": self.structure,
            "completeness": self.completeness,
            "actionability": self.actionability,
            "overall": self.overall,
        }

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = self.scores()
        data["strengths"] = list(self.strengths)
        data["improvements"] = list(self.improvements)
        data["remaining_issues"] = list(self.remaining_issues)
        return data


@dataclass
class OptimizationResult:
    """Outcome of one optimize() invocation."""
    original: str
    enhanced: str
    intent: IntentAnalysis
    quality: QualityMetrics
    improvements: List[Improvement]
    applied_patterns: List[PatternSummary]
    mode: OptimizationMode
    processing_time_ms: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "original": self.original,
            "enhanced": self.enhanced,
            "intent": self.intent.to_dict(),
            "quality": self.quality.to_dict(),
            "improvements": [i.to_dict() for i in self.improvements],
            "applied_patterns": [p.to_dict() for p in self.applied_patterns],
            "mode": self.mode.value,
            "processing_time_ms": self.processing_time_ms,
        }
