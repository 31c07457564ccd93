"""
Pattern scheduling: which patterns run, and in what order.

select_patterns() works in three steps:
1. filter by disabled ids, mode (after mapping composite modes), intent and phase
2. resolve excludesWith conflicts, highest effective priority wins
3. order by effective priority, placing runAfter dependencies first

runAfter cycles do not fail: the edge closing a cycle is skipped, so
every selected pattern is still placed exactly once.
"""

import logging
from typing import Dict, List, Optional, Set

from .pattern_library import PatternLibrary
from .patterns import BasePattern
from .types import IntentAnalysis, OptimizationMode, PatternMode, PatternPhase


def resolve_pattern_mode(mode: OptimizationMode, phase: Optional[PatternPhase] = None) -> PatternMode:
    """Map a requested optimization mode onto the fast/deep pattern mode."""
    if mode == OptimizationMode.FAST:
        return PatternMode.FAST
    if mode == OptimizationMode.DEEP:
        return PatternMode.DEEP
    if mode == OptimizationMode.PRD:
        return PatternMode.FAST if phase == PatternPhase.QUESTION_VALIDATION else PatternMode.DEEP
    if mode == OptimizationMode.CONVERSATIONAL:
        return PatternMode.FAST if phase == PatternPhase.CONVERSATION_TRACKING else PatternMode.DEEP
    return PatternMode.DEEP


class PatternScheduler:
    """Selects and orders applicable patterns from a PatternLibrary."""

    def __init__(self, library: PatternLibrary):
        self.library = library
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def select_patterns(self, intent_analysis: IntentAnalysis, mode: OptimizationMode,
                        phase: Optional[PatternPhase] = None) -> List[BasePattern]:
        pattern_mode = resolve_pattern_mode(mode, phase)

        candidates = [
            pattern for pattern in self.library.get_all_patterns()
            if self._is_selectable(pattern, intent_analysis, pattern_mode, phase)
        ]
        candidates = self.resolve_exclusions(candidates)
        ordered = self.order_with_dependencies(candidates)

        self.logger.debug(
            f"Selected {len(ordered)} patterns for {intent_analysis.primary_intent.value} "
            f"in {mode.value} mode: {[p.id for p in ordered]}"
        )
        return ordered

    def _is_selectable(self, pattern: BasePattern, intent_analysis: IntentAnalysis,
                       pattern_mode: PatternMode, phase: Optional[PatternPhase]) -> bool:
        if self.library.is_pattern_disabled(pattern.id):
            return False
        if pattern.mode not in (pattern_mode, PatternMode.BOTH):
            return False
        if intent_analysis.primary_intent not in pattern.applicable_intents:
            return False
        return PatternPhase.ALL in pattern.phases or (phase is not None and phase in pattern.phases)

    def _by_priority(self, patterns: List[BasePattern]) -> List[BasePattern]:
        # Id breaks priority ties so the order never depends on registration order
        return sorted(patterns, key=lambda p: (-self.library.get_effective_priority(p), p.id))

    def resolve_exclusions(self, patterns: List[BasePattern]) -> List[BasePattern]:
        """Drop patterns excluded by a higher-priority selected pattern."""
        excluded: Set[str] = set()
        kept: Set[str] = set()
        for pattern in self._by_priority(patterns):
            if pattern.id in excluded:
                continue
            # Exclusion is symmetric: a lower-priority pattern naming a kept one loses
            if kept.intersection(pattern.dependencies.excludes_with):
                excluded.add(pattern.id)
                continue
            kept.add(pattern.id)
            excluded.update(pattern.dependencies.excludes_with)

        if excluded:
            dropped = [p.id for p in patterns if p.id in excluded]
            if dropped:
                self.logger.debug(f"Excluded patterns: {dropped}")
        return [p for p in patterns if p.id not in excluded]

    def order_with_dependencies(self, patterns: List[BasePattern]) -> List[BasePattern]:
        """Priority-descending order with runAfter dependencies placed first."""
        by_id: Dict[str, BasePattern] = {p.id: p for p in patterns}
        ordered: List[BasePattern] = []
        placed: Set[str] = set()
        visiting: Set[str] = set()

        def place(pattern: BasePattern) -> None:
            if pattern.id in placed or pattern.id in visiting:
                return
            visiting.add(pattern.id)
            for dependency_id in pattern.dependencies.run_after:
                dependency = by_id.get(dependency_id)
                # Dependencies that were not selected impose no constraint
                if dependency is not None:
                    place(dependency)
            visiting.discard(pattern.id)
            placed.add(pattern.id)
            ordered.append(pattern)

        for pattern in self._by_priority(patterns):
            place(pattern)

        return ordered
