"""
Intent Detector - lexicon-based intent classification for prompts

Scores a prompt against per-intent lexicons and derives:
- Primary intent (ordered override rules, then highest score)
- Calibrated confidence with a competition penalty
- Secondary intents and an ambiguity level
- Textual characteristics and a suggested processing mode

Classification is fully deterministic; no statistical models are involved.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .confidence import competition_penalty, ratio_confidence, round_half_up
from .types import (
    AmbiguityLevel,
    INFERRED_INTENTS,
    IntentAnalysis,
    IntentCharacteristics,
    OptimizationMode,
    PromptIntent,
    SecondaryIntent,
)

STRONG_WEIGHT = 20
MEDIUM_WEIGHT = 10
WEAK_WEIGHT = 5

NEGATION_WINDOW = 20
NEGATION_WORDS = ["don't", "dont", "not", "avoid", "without", "never", "no"]

FALLBACK_INTENT = PromptIntent.CODE_GENERATION
FALLBACK_CONFIDENCE = 50

SECONDARY_MIN_SCORE = 10
SHORT_PROMPT_LENGTH = 50


@dataclass(frozen=True)
class IntentLexicon:
    """Strong phrases, medium keywords and weak keywords for one intent."""
    strong: Sequence[str] = field(default_factory=tuple)
    medium: Sequence[str] = field(default_factory=tuple)
    weak: Sequence[str] = field(default_factory=tuple)


@dataclass(frozen=True)
class OverrideRule:
    """Selects an intent when its score clears a threshold and a trigger matches."""
    intent: PromptIntent
    min_score: int
    triggers: Callable[[str], bool]


class IntentDetector:
    """
    Weighted, phrase-aware intent detector.

    Strong phrases score 20, medium keywords 10 and weak keywords 5. Each
    match is halved when a negation word appears shortly before it.
    """

    def __init__(self):
        """Initialize the intent detector."""
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

        # Build lexicons and rule tables
        self.lexicons = self._build_lexicons()
        self.override_rules = self._build_override_rules()
        self.code_patterns = self._build_code_patterns()
        self.technical_terms = [
            'api', 'database', 'sql', 'rest', 'graphql', 'jwt',
            'authentication', 'middleware', 'framework', 'library',
            'npm', 'docker', 'aws', 'frontend', 'backend', 'microservice',
        ]
        self.performance_terms = [
            'performance', 'speed', 'fast', 'slow', 'optimize', 'latency',
            'throughput', 'memory', 'cpu', 'load time', 'response time',
        ]
        self.security_terms = [
            'xss', 'csrf', 'sql injection', 'injection', 'owasp', 'cve',
            'authentication', 'authorization', 'encryption', 'penetration',
        ]
        self.migration_terms = [
            'legacy', 'deprecated', 'end of life', 'to the new',
            'python 2', 'python 3', 'backwards compatible', 'breaking change',
        ]
        self.testing_terms = [
            'jest', 'pytest', 'vitest', 'mocha', 'junit', 'cypress',
            'playwright', 'assert', 'mock', 'fixture',
        ]
        self.negation_regexes = [
            re.compile(r"(?<![\w'])" + re.escape(word) + r"(?![\w'])") for word in NEGATION_WORDS
        ]

        # Statistics tracking
        self.analyses_performed = 0
        self.intent_distribution = {intent: 0 for intent in PromptIntent}

        self.logger.debug(f"IntentDetector initialized with {len(self.lexicons)} intent lexicons")

    def analyze(self, prompt: str, intent: Optional[PromptIntent] = None) -> IntentAnalysis:
        """
        Classify a prompt. Never raises; empty input yields the fallback intent.

        An explicit intent replaces the detected one at confidence 100, and every
        field that depends on the primary intent is derived from it instead.
        """
        self.analyses_performed += 1
        prompt = prompt or ""
        lower_prompt = prompt.lower()
        words = lower_prompt.split()

        scores = self.calculate_scores(lower_prompt, words, prompt)
        if intent is not None:
            primary_intent, confidence = intent, 100
        else:
            primary_intent = self._select_primary_intent(scores, lower_prompt)
            confidence = self._calculate_confidence(scores, primary_intent)

        characteristics = IntentCharacteristics(
            has_code_context=self.has_code_context(prompt),
            has_technical_terms=self.has_technical_terms(lower_prompt),
            is_open_ended=self.is_open_ended(prompt),
            needs_structure=self.needs_structure(prompt, primary_intent),
        )

        suggested_mode = self._suggest_mode(primary_intent, characteristics, len(prompt), confidence)
        secondary_intents = self._secondary_intents(scores, primary_intent)
        ambiguity = AmbiguityLevel.LOW if intent is not None else self._ambiguity(scores, primary_intent)

        self.intent_distribution[primary_intent] += 1
        self.logger.debug(
            f"Detected intent {primary_intent.value} (confidence {confidence}, ambiguity {ambiguity.value})"
        )

        return IntentAnalysis(
            primary_intent=primary_intent,
            confidence=confidence,
            characteristics=characteristics,
            suggested_mode=suggested_mode,
            secondary_intents=secondary_intents,
            ambiguity=ambiguity,
            scores=dict(scores),
        )

    def calculate_scores(self, lower_prompt: str, words: List[str],
                         prompt: Optional[str] = None) -> Dict[PromptIntent, int]:
        """Raw score for every intent; explicit-only intents always score 0."""
        raw = prompt if prompt is not None else lower_prompt
        scores = {intent: 0 for intent in PromptIntent}
        for intent in INFERRED_INTENTS:
            scores[intent] = self._calculate_intent_score(lower_prompt, words, raw, intent)
        return scores

    # ------------------------------------------------------------------
    # Scoring
    # ------------------------------------------------------------------

    def _calculate_intent_score(self, lower_prompt: str, words: List[str],
                                raw_prompt: str, intent: PromptIntent) -> int:
        lexicon = self.lexicons[intent]
        score = 0

        for phrase in lexicon.strong:
            index = lower_prompt.find(phrase)
            if index != -1:
                score += self._apply_negation(lower_prompt, index, STRONG_WEIGHT)

        for keyword in lexicon.medium:
            index = lower_prompt.find(keyword)
            if index != -1:
                score += self._apply_negation(lower_prompt, index, MEDIUM_WEIGHT)

        word_set = set(w.strip(".,;:!?()[]{}\"'`") for w in words)
        for keyword in lexicon.weak:
            if keyword in word_set:
                match = re.search(r"(?<!\w)" + re.escape(keyword) + r"(?!\w)", lower_prompt)
                index = match.start() if match else 0
                score += self._apply_negation(lower_prompt, index, WEAK_WEIGHT)

        score += self._context_bonus(lower_prompt, raw_prompt, intent)
        return score

    def _apply_negation(self, lower_prompt: str, index: int, base_score: int) -> int:
        """Halve a match score when a negation word precedes it closely."""
        before = lower_prompt[max(0, index - NEGATION_WINDOW):index]
        if any(regex.search(before) for regex in self.negation_regexes):
            return round_half_up(base_score * 0.5)
        return base_score

    def _context_bonus(self, lower_prompt: str, raw_prompt: str, intent: PromptIntent) -> int:
        bonus = 0

        if intent in (PromptIntent.DEBUGGING, PromptIntent.REFINEMENT, PromptIntent.TESTING) \
                and self.has_code_context(raw_prompt):
            bonus += 15

        if intent in (PromptIntent.PLANNING, PromptIntent.DOCUMENTATION, PromptIntent.LEARNING) \
                and '?' in lower_prompt:
            bonus += 10

        if intent == PromptIntent.CODE_GENERATION and self.has_technical_terms(lower_prompt):
            bonus += 5

        if intent == PromptIntent.REFINEMENT and self._contains_any(lower_prompt, self.performance_terms):
            bonus += 10

        if intent == PromptIntent.SECURITY_REVIEW and self._contains_any(lower_prompt, self.security_terms):
            bonus += 15

        if intent == PromptIntent.MIGRATION and self._contains_any(lower_prompt, self.migration_terms):
            bonus += 15

        if intent == PromptIntent.TESTING and self._contains_any(lower_prompt, self.testing_terms):
            bonus += 10

        return bonus

    # ------------------------------------------------------------------
    # Selection and calibration
    # ------------------------------------------------------------------

    def _select_primary_intent(self, scores: Dict[PromptIntent, int], lower_prompt: str) -> PromptIntent:
        for rule in self.override_rules:
            if scores[rule.intent] >= rule.min_score and rule.triggers(lower_prompt):
                return rule.intent

        top_score = max(scores.values())
        if top_score == 0:
            return FALLBACK_INTENT

        # Ties resolve to the lexicographically smallest intent value
        tied = [intent for intent, score in scores.items() if score == top_score]
        return min(tied, key=lambda intent: intent.value)

    def _calculate_confidence(self, scores: Dict[PromptIntent, int], primary_intent: PromptIntent) -> int:
        primary_score = scores[primary_intent]
        total_score = sum(scores.values())

        confidence = ratio_confidence(primary_score, total_score, fallback=FALLBACK_CONFIDENCE)
        if total_score == 0:
            return confidence

        secondary_score = self._runner_up_score(scores, primary_intent)
        return competition_penalty(confidence, primary_score, secondary_score)

    def _runner_up_score(self, scores: Dict[PromptIntent, int], primary_intent: PromptIntent) -> int:
        others = [score for intent, score in scores.items() if intent != primary_intent]
        return max(others) if others else 0

    def _ranked_others(self, scores: Dict[PromptIntent, int],
                       primary_intent: PromptIntent) -> List[Tuple[PromptIntent, int]]:
        others = [(intent, score) for intent, score in scores.items() if intent != primary_intent]
        return sorted(others, key=lambda item: (-item[1], item[0].value))

    def _secondary_intents(self, scores: Dict[PromptIntent, int],
                           primary_intent: PromptIntent) -> List[SecondaryIntent]:
        total_score = sum(scores.values())
        if total_score == 0:
            return []

        secondary = []
        for intent, score in self._ranked_others(scores, primary_intent)[:2]:
            if score > SECONDARY_MIN_SCORE:
                secondary.append(SecondaryIntent(intent=intent, confidence=round_half_up(score / total_score * 100)))
        return secondary

    def _ambiguity(self, scores: Dict[PromptIntent, int], primary_intent: PromptIntent) -> AmbiguityLevel:
        primary_score = scores[primary_intent]
        if max(scores.values()) == 0 or primary_score == 0:
            return AmbiguityLevel.HIGH

        ratio = self._runner_up_score(scores, primary_intent) / primary_score
        if ratio > 0.8:
            return AmbiguityLevel.HIGH
        if ratio > 0.5:
            return AmbiguityLevel.MEDIUM
        return AmbiguityLevel.LOW

    def _suggest_mode(self, intent: PromptIntent, characteristics: IntentCharacteristics,
                      prompt_length: int, confidence: int) -> OptimizationMode:
        # Low confidence suggests deep mode
        if confidence < 60:
            return OptimizationMode.DEEP

        if intent == PromptIntent.PLANNING:
            return OptimizationMode.DEEP

        if characteristics.is_open_ended and not characteristics.has_code_context:
            return OptimizationMode.DEEP

        if prompt_length < SHORT_PROMPT_LENGTH and characteristics.needs_structure:
            return OptimizationMode.DEEP

        return OptimizationMode.FAST

    # ------------------------------------------------------------------
    # Characteristics
    # ------------------------------------------------------------------

    def has_code_context(self, prompt: str) -> bool:
        if '`' in prompt:
            return True
        return any(pattern.search(prompt) for pattern in self.code_patterns)

    def has_technical_terms(self, lower_prompt: str) -> bool:
        return self._contains_any(lower_prompt, self.technical_terms)

    def is_open_ended(self, prompt: str) -> bool:
        lower_prompt = prompt.lower()
        question_words = ['how', 'what', 'why', 'when', 'where', 'which', 'should']
        has_question_word = any(lower_prompt.startswith(word) for word in question_words)
        vague_patterns = ['help me', 'i need', 'not sure', 'maybe', 'somehow']
        has_vague = self._contains_any(lower_prompt, vague_patterns)
        return has_question_word or '?' in prompt or has_vague

    def needs_structure(self, prompt: str, intent: PromptIntent) -> bool:
        if intent == PromptIntent.PLANNING:
            return True

        has_objective = re.search(r"objective|goal|purpose|need to|want to", prompt, re.IGNORECASE)
        has_requirements = re.search(r"requirement|must|should|need|expect", prompt, re.IGNORECASE)
        has_constraints = re.search(r"constraint|limit|within|must not|cannot", prompt, re.IGNORECASE)

        structure_score = sum(1 for found in (has_objective, has_requirements, has_constraints) if found)
        return structure_score < 2

    @staticmethod
    def _contains_any(text: str, terms: List[str]) -> bool:
        return any(term in text for term in terms)

    def get_statistics(self) -> Dict:
        return {
            "analyses_performed": self.analyses_performed,
            "intent_distribution": {
                intent.value: count for intent, count in self.intent_distribution.items()
            },
        }

    # ------------------------------------------------------------------
    # Pattern libraries
    # ------------------------------------------------------------------

    def _build_lexicons(self) -> Dict[PromptIntent, IntentLexicon]:
        """Per-intent strong phrases, medium keywords and weak keywords."""
        return {
            PromptIntent.CODE_GENERATION: IntentLexicon(
                strong=[
                    'create function', 'build component', 'implement feature', 'add endpoint',
                    'write class', 'develop api', 'generate code', 'write a function',
                    'create a component', 'build an api',
                ],
                medium=[
                    'function', 'class', 'component', 'api', 'endpoint', 'database',
                    'implement', 'build', 'create', 'write', 'code', 'develop',
                ],
                weak=[
                    'react', 'vue', 'angular', 'python', 'javascript', 'typescript',
                    'java', 'rust', 'go', 'php', 'ruby', 'swift', 'kotlin', 'system', 'feature',
                ],
            ),
            PromptIntent.PLANNING: IntentLexicon(
                strong=[
                    'how should i', "what's the best way", 'pros and cons', 'architecture for',
                    'design pattern', 'system design', 'should i use', 'help me choose',
                    'design the database', 'plan the', 'requirements document', 'roadmap for',
                ],
                medium=[
                    'plan', 'design', 'architect', 'strategy', 'approach', 'structure',
                    'organize', 'layout', 'workflow', 'roadmap',
                ],
            ),
            PromptIntent.REFINEMENT: IntentLexicon(
                strong=[
                    'make it faster', 'speed up', 'reduce time', 'optimize performance',
                    'clean up code', 'refactor this', 'improve efficiency', 'make this component',
                    'make it more', 'enhance the', 'update the styling', 'more reusable', 'more modern',
                ],
                medium=[
                    'improve', 'optimize', 'refactor', 'enhance', 'better', 'faster',
                    'cleaner', 'simplify', 'reduce', 'increase',
                ],
            ),
            PromptIntent.DEBUGGING: IntentLexicon(
                strong=[
                    'fix error', 'debug issue', "doesn't work", 'throws error', 'not working',
                    'returns null', 'undefined error', 'stack trace', 'error message',
                    'causing this bug', 'how do i fix', 'fix this error', 'resolve the', 'memory leak',
                    'not rendering', 'why is my',
                ],
                medium=[
                    'fix', 'debug', 'error', 'bug', 'issue', 'problem', 'failing',
                    'broken', 'crash', 'exception', 'incorrect', 'wrong',
                ],
            ),
            PromptIntent.DOCUMENTATION: IntentLexicon(
                strong=[
                    'explain how', 'walk me through', 'how does this work', 'show me how',
                    'document this', 'describe how', 'what does this do', 'write documentation',
                    'create documentation', 'add documentation', 'api documentation', 'add comments',
                ],
                medium=[
                    'explain', 'document', 'describe', 'clarify', 'comment',
                    'documentation', 'readme', 'docstring',
                ],
            ),
            PromptIntent.TESTING: IntentLexicon(
                strong=[
                    'write tests', 'write unit tests', 'add tests', 'test coverage', 'unit test',
                    'integration test', 'e2e test', 'end-to-end test', 'test cases for', 'mock the',
                ],
                medium=[
                    'test', 'tests', 'testing', 'coverage', 'assertion', 'mock', 'stub',
                    'fixture', 'spec', 'tdd',
                ],
            ),
            PromptIntent.MIGRATION: IntentLexicon(
                strong=[
                    'migrate from', 'migrate to', 'upgrade from', 'upgrade to', 'port to',
                    'convert from', 'move from', 'switch from', 'migration plan', 'data migration',
                ],
                medium=[
                    'migrate', 'migration', 'upgrade', 'port', 'convert', 'legacy',
                    'deprecated', 'transition',
                ],
            ),
            PromptIntent.SECURITY_REVIEW: IntentLexicon(
                strong=[
                    'security review', 'security audit', 'check for vulnerabilities', 'penetration test',
                    'is this secure', 'security issues', 'owasp top', 'threat model',
                    'sql injection', 'xss vulnerability',
                ],
                medium=[
                    'security', 'secure', 'vulnerability', 'vulnerabilities', 'exploit',
                    'attack', 'audit', 'threat', 'sanitize', 'permission',
                ],
            ),
            PromptIntent.LEARNING: IntentLexicon(
                strong=[
                    'teach me', 'help me understand', 'i want to learn', 'what is the difference',
                    'eli5', 'explain like', 'for beginners', 'learning path', 'how do i learn',
                ],
                medium=[
                    'learn', 'understand', 'tutorial', 'concept', 'beginner', 'basics',
                    'fundamentals', 'teach', 'course',
                ],
            ),
        }

    def _build_override_rules(self) -> List[OverrideRule]:
        """Ordered override rules; the first rule that fires wins."""
        def has_any(*terms):
            return lambda text: any(term in text for term in terms)

        def documentation_trigger(text):
            return has_any('explain', 'how does', 'documentation')(text) or \
                ('write' in text and 'document' in text)

        return [
            OverrideRule(PromptIntent.DEBUGGING, 20,
                         has_any('error', 'bug', 'fix', 'debug', 'issue', 'resolve', 'crash')),
            OverrideRule(PromptIntent.SECURITY_REVIEW, 20,
                         has_any('security', 'vulnerab', 'owasp', 'audit', 'exploit')),
            OverrideRule(PromptIntent.TESTING, 20,
                         has_any('test', 'coverage', 'spec')),
            OverrideRule(PromptIntent.MIGRATION, 20,
                         has_any('migrate', 'migration', 'upgrade', 'convert')),
            OverrideRule(PromptIntent.DOCUMENTATION, 20, documentation_trigger),
            OverrideRule(PromptIntent.LEARNING, 20,
                         has_any('learn', 'teach', 'tutorial', 'understand', 'beginner')),
            OverrideRule(PromptIntent.PLANNING, 20,
                         has_any('how should', 'architecture', 'what is the best', 'plan')),
            OverrideRule(PromptIntent.REFINEMENT, 15,
                         has_any('improve', 'optimize', 'enhance', 'make', 'refactor')),
        ]

    def _build_code_patterns(self) -> List[re.Pattern]:
        return [
            re.compile(r"function\s+\w+\s*\("),
            re.compile(r"class\s+\w+"),
            re.compile(r"const\s+\w+\s*="),
            re.compile(r"let\s+\w+\s*="),
            re.compile(r"var\s+\w+\s*="),
            re.compile(r"def\s+\w+\s*\("),
            re.compile(r"import\s+"),
            re.compile(r"<\w+>"),
            re.compile(r"\w+\.\w+\("),
        ]
