"""
Transformation patterns applied by the optimizer.

Each pattern is a BasePattern subclass with class-level metadata; the
default set is registered into a PatternLibrary by the optimizer.
"""

from typing import List

from .actionability_enhancer import ActionabilityEnhancer
from .ambiguity_detector import AmbiguityDetector
from .assumption_explicitizer import AssumptionExplicitizer
from .base import BasePattern, PatternDependency
from .completeness_validator import CompletenessValidator
from .conciseness_filter import ConcisenessFilter
from .conversation_summarizer import ConversationSummarizer
from .dependency_identifier import DependencyIdentifier
from .edge_case_identifier import EdgeCaseIdentifier
from .implicit_requirement_extractor import ImplicitRequirementExtractor
from .objective_clarifier import ObjectiveClarifier
from .output_format_enforcer import OutputFormatEnforcer
from .prd_structure_enforcer import PRDStructureEnforcer
from .requirement_prioritizer import RequirementPrioritizer
from .scope_definer import ScopeDefiner
from .step_decomposer import StepDecomposer
from .structure_organizer import StructureOrganizer
from .success_criteria_enforcer import SuccessCriteriaEnforcer
from .success_metrics_enforcer import SuccessMetricsEnforcer
from .technical_context_enricher import TechnicalContextEnricher
from .topic_coherence_analyzer import TopicCoherenceAnalyzer
from .user_persona_enricher import UserPersonaEnricher
from .validation_checklist_creator import ValidationChecklistCreator

DEFAULT_PATTERN_CLASSES = (
    ConcisenessFilter,
    ObjectiveClarifier,
    AmbiguityDetector,
    PRDStructureEnforcer,
    StructureOrganizer,
    ActionabilityEnhancer,
    SuccessCriteriaEnforcer,
    OutputFormatEnforcer,
    RequirementPrioritizer,
    CompletenessValidator,
    TechnicalContextEnricher,
    StepDecomposer,
    EdgeCaseIdentifier,
    ValidationChecklistCreator,
    ConversationSummarizer,
    TopicCoherenceAnalyzer,
    ImplicitRequirementExtractor,
    SuccessMetricsEnforcer,
    UserPersonaEnricher,
    AssumptionExplicitizer,
    DependencyIdentifier,
    ScopeDefiner,
)


def default_patterns() -> List[BasePattern]:
    """Fresh instances of every built-in pattern."""
    return [pattern_class() for pattern_class in DEFAULT_PATTERN_CLASSES]


__all__ = [
    "BasePattern",
    "PatternDependency",
    "ActionabilityEnhancer",
    "AmbiguityDetector",
    "AssumptionExplicitizer",
    "CompletenessValidator",
    "ConcisenessFilter",
    "ConversationSummarizer",
    "DependencyIdentifier",
    "EdgeCaseIdentifier",
    "ImplicitRequirementExtractor",
    "ObjectiveClarifier",
    "OutputFormatEnforcer",
    "PRDStructureEnforcer",
    "RequirementPrioritizer",
    "ScopeDefiner",
    "StepDecomposer",
    "StructureOrganizer",
    "SuccessCriteriaEnforcer",
    "SuccessMetricsEnforcer",
    "TechnicalContextEnricher",
    "TopicCoherenceAnalyzer",
    "UserPersonaEnricher",
    "ValidationChecklistCreator",
    "DEFAULT_PATTERN_CLASSES",
    "default_patterns",
]
