"""
German B2 Evaluator - Main evaluation class

This is the primary interface. It coordinates:
- Feature extraction
- Scoring
- Feedback generation
- Optional remote evaluation with rule-based fallback
"""

from dataclasses import dataclass, field, asdict
from typing import Dict, List, Optional

from .components import extract_features
from .scoring import score_all
from .feedback import (
    build_weaknesses, build_missing_structures, correct_text, choose_next_challenge
)
from .taxonomies import (
    ADVANCED_VERSION, EMPTY_WEAKNESSES, EMPTY_MISSING_STRUCTURES, CHALLENGE_EMPTY
)
from .api_evaluator import RemoteConfig, evaluate_with_api
from .caching import ResponseCache


MODES = ('discussion', 'essay')

PROVENANCE_LOCAL = 'local'
PROVENANCE_REMOTE = 'remote'
PROVENANCE_FALLBACK = 'remote-fallback'

# EvaluationResult field -> ledger dimension
DIMENSIONS = {
    'grammar_score': 'grammar',
    'complexity_score': 'complexity',
    'vocabulary_score': 'vocabulary',
    'argument_score': 'argumentation',
    'fluency_potential': 'fluency',
}


@dataclass
class EvaluationOptions:
    """
    Scoring options

    mode: 'discussion' judges length by sentence count (<5 is short),
          'essay' by word count (<120 is short)
    pressure_mode: penalize answers that open with ich/wir and avoid
                   past/conditional forms; require Konjunktiv II + nominalization
    """
    mode: str = 'discussion'
    pressure_mode: bool = True

    def __post_init__(self):
        if self.mode not in MODES:
            raise ValueError(f"Unknown mode: '{self.mode}'. Available: {', '.join(MODES)}")

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> 'EvaluationOptions':
        """Accept the wire shape ({mode, pressureMode}) or snake_case keys"""
        data = data or {}
        pressure = data.get('pressureMode', data.get('pressure_mode'))
        return cls(
            mode=data.get('mode') or 'discussion',
            pressure_mode=True if pressure is None else bool(pressure)
        )


@dataclass
class EvaluationResult:
    """Complete evaluation output"""
    overall_score: int
    grammar_score: int
    complexity_score: int
    vocabulary_score: int
    argument_score: int
    fluency_potential: int
    weaknesses_detected: List[str] = field(default_factory=list)
    missing_structures: List[str] = field(default_factory=list)
    corrected_version: str = ''
    advanced_version: str = ''
    next_challenge: str = ''
    provenance: str = PROVENANCE_LOCAL

    @property
    def scores(self) -> Dict[str, int]:
        """Sub-scores keyed by ledger dimension name"""
        return {dim: getattr(self, f) for f, dim in DIMENSIONS.items()}

    def to_dict(self) -> Dict:
        return asdict(self)


def empty_result() -> EvaluationResult:
    """Fixed result for blank answers"""
    return EvaluationResult(
        overall_score=0,
        grammar_score=0,
        complexity_score=0,
        vocabulary_score=0,
        argument_score=0,
        fluency_potential=0,
        weaknesses_detected=list(EMPTY_WEAKNESSES),
        missing_structures=list(EMPTY_MISSING_STRUCTURES),
        corrected_version='',
        advanced_version='',
        next_challenge=CHALLENGE_EMPTY,
    )


class GermanEvaluator:
    """
    Main evaluator class

    Usage:
        evaluator = GermanEvaluator(RemoteConfig(endpoint="https://..."))
        result = evaluator.evaluate("Ich denke, dass ...")
        print(result.overall_score, result.provenance)
    """

    def __init__(
        self,
        remote: Optional[RemoteConfig] = None,
        cache: Optional[ResponseCache] = None
    ):
        self.remote = remote
        self.cache = cache

    @property
    def remote_enabled(self) -> bool:
        return self.remote is not None and self.remote.enabled

    def evaluate_local(
        self,
        text: str,
        options: Optional[EvaluationOptions] = None
    ) -> EvaluationResult:
        """Rule-based scoring. Pure and synchronous."""

        options = options or EvaluationOptions()
        clean = (text or '').strip()

        if not clean:
            return empty_result()

        features = extract_features(clean)
        scores = score_all(features, options.pressure_mode)

        return EvaluationResult(
            overall_score=scores['overall_score'],
            grammar_score=scores['grammar_score'],
            complexity_score=scores['complexity_score'],
            vocabulary_score=scores['vocabulary_score'],
            argument_score=scores['argument_score'],
            fluency_potential=scores['fluency_potential'],
            weaknesses_detected=build_weaknesses(features),
            missing_structures=build_missing_structures(features),
            corrected_version=correct_text(clean),
            advanced_version=ADVANCED_VERSION,
            next_challenge=choose_next_challenge(features, options.mode, options.pressure_mode),
            provenance=PROVENANCE_LOCAL,
        )

    def evaluate(
        self,
        text: str,
        options: Optional[EvaluationOptions] = None
    ) -> EvaluationResult:
        """
        Main evaluation pipeline

        Uses the remote evaluator when configured. Falls back to rule-based
        scoring on any remote failure; never raises for transport problems.

        Args:
            text: Learner answer (typed or speech transcript)
            options: EvaluationOptions (defaults: discussion, pressure mode on)

        Returns:
            EvaluationResult tagged with its provenance
        """

        options = options or EvaluationOptions()

        if not self.remote_enabled:
            return self.evaluate_local(text, options)

        try:
            api_result = evaluate_with_api(
                text, options.mode, options.pressure_mode, self.remote, self.cache
            )
            return EvaluationResult(provenance=PROVENANCE_REMOTE, **api_result)
        except Exception as e:
            print(f"  ⚠ API evaluation failed: {e}")
            print(f"  → Falling back to rule-based evaluation")

        result = self.evaluate_local(text, options)
        result.provenance = PROVENANCE_FALLBACK
        return result

    def evaluate_batch(
        self,
        texts: Dict[str, str],
        options: Optional[EvaluationOptions] = None
    ) -> Dict[str, EvaluationResult]:
        """
        Evaluate multiple answers

        Args:
            texts: Dict of {name: text}

        Returns:
            Dict of {name: EvaluationResult}
        """

        results = {}
        for name, text in texts.items():
            print(f"\n{'='*60}")
            print(f"Evaluating: {name}")
            print('='*60)
            results[name] = self.evaluate(text, options)
        return results

    def generate_report(self, result: EvaluationResult, learner_name: str = "Learner") -> str:
        """Markdown report card for a single evaluation"""

        weaknesses = '\n'.join(f"- {w}" for w in result.weaknesses_detected) or "- None"
        missing = '\n'.join(f"- {m}" for m in result.missing_structures) or "- None"

        return f"""# B2 Writing Report: {learner_name}

**Overall Score:** {result.overall_score}/100
**Source:** {result.provenance}

---

| Dimension | Score |
|-----------|-------|
| Grammar | {result.grammar_score} |
| Complexity | {result.complexity_score} |
| Vocabulary | {result.vocabulary_score} |
| Argument | {result.argument_score} |
| Fluency Potential | {result.fluency_potential} |

---

## Weaknesses

{weaknesses}

## Missing Structures

{missing}

---

## Corrected Version

{result.corrected_version or 'N/A'}

## Model Answer (B2+)

{result.advanced_version or 'N/A'}

---

**Next Challenge:** {result.next_challenge}
"""
