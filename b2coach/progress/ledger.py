"""
Progress Ledger - persisted learner state

Handles:
- Defaults and load/merge from the store (corrupt data -> defaults)
- Blending evaluation scores into the running profile
- Weakness frequency log, task completions, capped exam history
- Milestone and roadmap progress
"""

import json
import threading
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional, Set

from .blend import blended_score
from .storage import LedgerStore
from ..evaluators.german.evaluator import EvaluationResult, DIMENSIONS
from ..evaluators.german.scoring import round_half_up


STORAGE_KEY = 'b2coach-state-v2'
HISTORY_LIMIT = 15

DEFAULT_SCORES = {
    'grammar': 54,
    'complexity': 49,
    'vocabulary': 52,
    'argumentation': 45,
    'fluency': 47,
}

ROADMAP = [
    {'phase': 'Phase 1', 'title': 'Structure mastery', 'target': 72},
    {'phase': 'Phase 2', 'title': 'Spontaneous fluency', 'target': 82},
    {'phase': 'Phase 3', 'title': 'Exam simulation', 'target': 90},
]

KNOWN_FIELDS = (
    'streak', 'milestone_progress', 'scores',
    'completed_tasks', 'weakness_log', 'exam_history',
)


@dataclass
class ProgressLedger:
    """One learner's long-lived progress record"""
    # Cumulative count of successful tasks; never reset on missed days
    streak: int = 1
    milestone_progress: int = 18
    scores: Dict[str, int] = field(default_factory=lambda: dict(DEFAULT_SCORES))
    completed_tasks: Set[str] = field(default_factory=set)
    weakness_log: Dict[str, int] = field(default_factory=dict)
    exam_history: List[Dict[str, Any]] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)

    def average_score(self) -> int:
        return round_half_up(sum(self.scores[dim] for dim in DEFAULT_SCORES) / len(DEFAULT_SCORES))

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.extra)
        data.update({
            'streak': self.streak,
            'milestone_progress': self.milestone_progress,
            'scores': dict(self.scores),
            'completed_tasks': sorted(self.completed_tasks),
            'weakness_log': dict(self.weakness_log),
            'exam_history': list(self.exam_history),
        })
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ProgressLedger':
        """Merge a stored record over defaults; unknown keys are kept in extra"""

        scores = dict(DEFAULT_SCORES)
        scores.update({k: int(v) for k, v in (data.get('scores') or {}).items()})

        ledger = cls(
            scores=scores,
            completed_tasks=set(data.get('completed_tasks') or []),
            weakness_log={k: int(v) for k, v in (data.get('weakness_log') or {}).items()},
            exam_history=list(data.get('exam_history') or [])[:HISTORY_LIMIT],
            extra={k: v for k, v in data.items() if k not in KNOWN_FIELDS},
        )
        if data.get('streak') is not None:
            ledger.streak = int(data['streak'])
        if data.get('milestone_progress') is not None:
            ledger.milestone_progress = int(data['milestone_progress'])
        return ledger


def day_key(today: Optional[date] = None) -> str:
    """Calendar-day prefix for completed task keys, e.g. 'Sun Oct 18 2026'"""
    today = today or date.today()
    return today.strftime('%a %b %d %Y')


class ProgressTracker:
    """
    Loads, mutates and persists one learner's ProgressLedger.

    Each mutation reloads the stored record, applies the change and writes
    the whole record back while holding the tracker lock.
    """

    def __init__(self, store: LedgerStore, key: str = STORAGE_KEY):
        self.store = store
        self.key = key
        self._lock = threading.Lock()

    def load(self) -> ProgressLedger:
        """Stored record merged over defaults; never raises on bad data"""

        try:
            raw = self.store.get(self.key)
            if not raw:
                return ProgressLedger()
            data = json.loads(raw)
            if not isinstance(data, dict):
                raise ValueError(f"expected object, got {type(data).__name__}")
            return ProgressLedger.from_dict(data)
        except (ValueError, TypeError, AttributeError, OSError) as e:
            print(f"  ⚠ Stored progress unreadable ({e}), using defaults")
            return ProgressLedger()

    def save(self, ledger: ProgressLedger) -> None:
        """Refresh the milestone and overwrite the stored record"""
        ledger.milestone_progress = max(ledger.milestone_progress, ledger.average_score())
        self.store.set(self.key, json.dumps(ledger.to_dict(), ensure_ascii=False))

    def apply_evaluation(self, result: EvaluationResult) -> ProgressLedger:
        """Blend all five dimensions and count the detected weaknesses"""

        with self._lock:
            ledger = self.load()
            latest = result.scores
            ledger.scores = {
                dim: blended_score(ledger.scores[dim], latest[dim])
                for dim in DIMENSIONS.values()
            }
            for weakness in result.weaknesses_detected:
                ledger.weakness_log[weakness] = ledger.weakness_log.get(weakness, 0) + 1
            self.save(ledger)
            return ledger

    def record_task_completion(
        self,
        task_name: str,
        success: bool,
        today: Optional[date] = None
    ) -> ProgressLedger:
        """
        Mark a task done for today.

        Unsuccessful attempts change nothing. The completion key is
        deduplicated per day, but streak grows on every successful call.
        """

        with self._lock:
            ledger = self.load()
            if not success:
                return ledger
            ledger.completed_tasks.add(f"{day_key(today)}-{task_name}")
            ledger.streak += 1
            self.save(ledger)
            return ledger

    def push_history(self, entry: Dict[str, Any]) -> ProgressLedger:
        """Prepend an entry; keep only the newest HISTORY_LIMIT"""

        with self._lock:
            ledger = self.load()
            ledger.exam_history = [dict(entry)] + ledger.exam_history
            ledger.exam_history = ledger.exam_history[:HISTORY_LIMIT]
            self.save(ledger)
            return ledger

    def record_exam(
        self,
        result: EvaluationResult,
        entry_type: str = 'exam',
        timestamp: Optional[str] = None
    ) -> ProgressLedger:
        """Apply an evaluation and log it in the exam history"""

        self.apply_evaluation(result)
        return self.push_history({
            'type': entry_type,
            'timestamp': timestamp or datetime.now(timezone.utc).isoformat(),
            'score': result.overall_score,
        })

    def top_weaknesses(self, limit: int = 5) -> List[tuple]:
        """Most frequent weakness tags, highest count first"""
        log = self.load().weakness_log
        return sorted(log.items(), key=lambda item: item[1], reverse=True)[:limit]

    def roadmap_progress(self) -> List[Dict[str, Any]]:
        """Percent completion of each roadmap phase from milestone_progress"""

        milestone = self.load().milestone_progress
        phases = []
        for phase in ROADMAP:
            if milestone >= phase['target']:
                percent = 100
            else:
                percent = max(0, min(100, round_half_up(milestone / phase['target'] * 100)))
            phases.append({**phase, 'percent': percent})
        return phases
