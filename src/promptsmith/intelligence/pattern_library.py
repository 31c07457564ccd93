"""
Pattern library: the registry of transformation patterns.

Patterns are registered once and never mutated. Configuration is kept
beside them in two side tables:
- priority overrides (id -> 1..10), read through get_effective_priority()
- disabled pattern ids, read through is_pattern_disabled()

A configured() snapshot gives each invocation its own view of the
overrides without touching the shared library.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set

from .patterns import BasePattern, default_patterns
from .types import PatternMode, is_valid_priority


class PatternLibrary:
    """Id-keyed registry of patterns plus externally tracked overrides."""

    def __init__(self, patterns: Optional[Iterable[BasePattern]] = None):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self._patterns: Dict[str, BasePattern] = {}
        self._priority_overrides: Dict[str, int] = {}
        self._disabled: Set[str] = set()
        self._custom_settings: Dict[str, Dict[str, Any]] = {}

        for pattern in patterns if patterns is not None else default_patterns():
            self.register(pattern)

    def register(self, pattern: BasePattern) -> None:
        """Register a pattern. Re-registering an id replaces the earlier entry."""
        if pattern.id in self._patterns:
            self.logger.warning(f"Pattern {pattern.id} registered twice, replacing previous entry")
        self._patterns[pattern.id] = pattern
        self.logger.debug(f"Registered pattern: {pattern.id} (priority {pattern.priority})")

    def get(self, pattern_id: str) -> Optional[BasePattern]:
        return self._patterns.get(pattern_id)

    def get_all_patterns(self) -> List[BasePattern]:
        return list(self._patterns.values())

    def get_patterns_by_mode(self, mode: PatternMode) -> List[BasePattern]:
        """Patterns usable in the given mode, 'both' patterns included."""
        return [p for p in self._patterns.values() if p.mode in (mode, PatternMode.BOTH)]

    def get_pattern_count(self) -> int:
        return len(self._patterns)

    # ------------------------------------------------------------------
    # Configuration side tables
    # ------------------------------------------------------------------

    def apply_config(self, disabled: Iterable[str] = (),
                     priority_overrides: Optional[Mapping[str, Any]] = None,
                     custom_settings: Optional[Mapping[str, Mapping[str, Any]]] = None) -> None:
        """
        Replace the override tables.

        Priority overrides that are not integers in 1..10 are ignored. Unknown
        pattern ids are kept so configuration can be applied before registration.
        """
        self._disabled = set(disabled or ())

        self._priority_overrides = {}
        for pattern_id, priority in (priority_overrides or {}).items():
            if is_valid_priority(priority):
                self._priority_overrides[pattern_id] = priority
            else:
                self.logger.debug(f"Ignoring invalid priority override {priority!r} for {pattern_id}")

        self._custom_settings = {
            pattern_id: dict(settings)
            for pattern_id, settings in (custom_settings or {}).items()
            if isinstance(settings, Mapping)
        }

        if self._disabled or self._priority_overrides:
            self.logger.info(
                f"Pattern config applied: {len(self._disabled)} disabled, "
                f"{len(self._priority_overrides)} priority overrides"
            )

    def configured(self, disabled: Iterable[str] = (),
                   priority_overrides: Optional[Mapping[str, Any]] = None,
                   custom_settings: Optional[Mapping[str, Mapping[str, Any]]] = None) -> "PatternLibrary":
        """Return a copy sharing the same patterns with its own override tables."""
        snapshot = PatternLibrary(patterns=())
        snapshot._patterns = dict(self._patterns)
        snapshot.apply_config(disabled, priority_overrides, custom_settings)
        return snapshot

    def get_effective_priority(self, pattern: BasePattern) -> int:
        return self._priority_overrides.get(pattern.id, pattern.priority)

    def is_pattern_disabled(self, pattern_id: str) -> bool:
        return pattern_id in self._disabled

    @property
    def disabled_ids(self) -> Set[str]:
        return set(self._disabled)

    @property
    def priority_overrides(self) -> Dict[str, int]:
        return dict(self._priority_overrides)

    @property
    def custom_settings(self) -> Dict[str, Dict[str, Any]]:
        return {pattern_id: dict(settings) for pattern_id, settings in self._custom_settings.items()}

    def get_statistics(self) -> Dict[str, int]:
        return {
            "total": len(self._patterns),
            "fast": len(self.get_patterns_by_mode(PatternMode.FAST)),
            "deep": len(self.get_patterns_by_mode(PatternMode.DEEP)),
            "disabled": len(self._disabled),
        }
