"""Base class shared by all transformation patterns."""

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, FrozenSet, List, Tuple

from ..types import (
    ImpactLevel,
    Improvement,
    PatternContext,
    PatternMode,
    PatternPhase,
    PatternResult,
    PromptIntent,
    QualityDimension,
)


@dataclass(frozen=True)
class PatternDependency:
    """Ordering constraints between patterns."""
    run_after: Tuple[str, ...] = field(default_factory=tuple)
    excludes_with: Tuple[str, ...] = field(default_factory=tuple)


class BasePattern(ABC):
    """
    A named rule that may rewrite a prompt and report one improvement.

    Metadata lives on the class and is never changed after registration;
    priority overrides and disabled ids are tracked by the PatternLibrary.
    """

    id: ClassVar[str]
    name: ClassVar[str]
    description: ClassVar[str]
    applicable_intents: ClassVar[FrozenSet[PromptIntent]]
    mode: ClassVar[PatternMode] = PatternMode.BOTH
    priority: ClassVar[int] = 5  # 1-10, 10 runs first
    phases: ClassVar[FrozenSet[PatternPhase]] = frozenset({PatternPhase.ALL})
    dependencies: ClassVar[PatternDependency] = PatternDependency()
    default_settings: ClassVar[Dict[str, Any]] = {}

    def __init__(self):
        self.logger = logging.getLogger(f"{self.__class__.__module__}.{self.__class__.__name__}")

    @abstractmethod
    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        """Apply the pattern to the current prompt text."""

    def get_setting(self, context: PatternContext, key: str) -> Any:
        """Read a setting from the caller's custom settings, else the default."""
        custom = context.custom_settings.get(self.id) or {}
        if key in custom:
            return custom[key]
        return self.default_settings.get(key)

    # ------------------------------------------------------------------
    # Result helpers
    # ------------------------------------------------------------------

    def applied(self, enhanced: str, dimension: QualityDimension,
                description: str, impact: ImpactLevel) -> PatternResult:
        return PatternResult(
            enhanced_prompt=enhanced,
            improvement=Improvement(dimension=dimension, description=description, impact=impact),
            applied=True,
        )

    def skipped(self, prompt: str, dimension: QualityDimension, description: str) -> PatternResult:
        return PatternResult(
            enhanced_prompt=prompt,
            improvement=Improvement(dimension=dimension, description=description, impact=ImpactLevel.LOW),
            applied=False,
        )

    # ------------------------------------------------------------------
    # Text utilities
    # ------------------------------------------------------------------

    @staticmethod
    def clean_whitespace(text: str) -> str:
        return re.sub(r"\s+", " ", text).strip()

    @staticmethod
    def has_section(prompt: str, keywords: List[str]) -> bool:
        lower_prompt = prompt.lower()
        return any(keyword.lower() in lower_prompt for keyword in keywords)

    @staticmethod
    def mentions(prompt: str, keywords: List[str]) -> bool:
        """Keywords match at word starts: 'test' finds "tests", 'ui' does not find "build"."""
        lower_prompt = prompt.lower()
        for keyword in keywords:
            keyword = keyword.lower()
            # '% increase' has no word start to anchor on
            anchor = r"(?<![a-z0-9])" if keyword[:1].isalnum() else ""
            if re.search(anchor + re.escape(keyword), lower_prompt):
                return True
        return False

    @staticmethod
    def count_words(text: str) -> int:
        return len(text.split())

    @staticmethod
    def extract_sentences(text: str) -> List[str]:
        return [s for s in re.split(r"[.!?]+", text) if s.strip()]

    @staticmethod
    def impact_for(count: int, high: int, medium: int) -> ImpactLevel:
        """HIGH when count >= high, MEDIUM when count >= medium, else LOW."""
        if count >= high:
            return ImpactLevel.HIGH
        if count >= medium:
            return ImpactLevel.MEDIUM
        return ImpactLevel.LOW

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} id={self.id!r} priority={self.priority}>"
