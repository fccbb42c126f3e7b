"""
Tests for score blending and the progress ledger
"""

import json
from datetime import date

import pytest

from b2coach import blended_score
from b2coach.evaluators.german import EvaluationResult
from b2coach.progress import (
    ProgressLedger,
    ProgressTracker,
    MemoryStore,
    JsonFileStore,
    STORAGE_KEY,
    HISTORY_LIMIT,
)


def _result(weaknesses=('Kein Konjunktiv II', 'Kein Passiv'), overall=37):
    return EvaluationResult(
        overall_score=overall,
        grammar_score=40,
        complexity_score=13,
        vocabulary_score=80,
        argument_score=6,
        fluency_potential=45,
        weaknesses_detected=list(weaknesses),
    )


def _seeded(record):
    raw = record if isinstance(record, str) else json.dumps(record)
    store = MemoryStore({STORAGE_KEY: raw})
    return ProgressTracker(store), store


def _stored(store):
    return json.loads(store.get(STORAGE_KEY))


class TestBlend:

    @pytest.mark.parametrize("current,latest,expected", [
        (54, 80, 63),
        (10, 0, 7),
        (54, 40, 49),
        (0, 0, 0),
    ])
    def test_known_values(self, current, latest, expected):
        assert blended_score(current, latest) == expected

    @pytest.mark.parametrize("current,latest", [(54, 80), (90, 10), (33, 33), (0, 100)])
    def test_between_inputs(self, current, latest):
        blended = blended_score(current, latest)
        assert min(current, latest) <= blended <= max(current, latest)

    def test_same_value_is_fixed_point(self):
        for value in (0, 17, 50, 99, 100):
            assert blended_score(value, value) == value


class TestDefaults:

    def test_empty_store(self):
        ledger = ProgressTracker(MemoryStore()).load()
        assert ledger.streak == 1
        assert ledger.milestone_progress == 18
        assert ledger.scores == {
            'grammar': 54, 'complexity': 49, 'vocabulary': 52,
            'argumentation': 45, 'fluency': 47,
        }
        assert ledger.completed_tasks == set()
        assert ledger.weakness_log == {}
        assert ledger.exam_history == []

    @pytest.mark.parametrize("raw", [
        "{not json",
        "[1, 2, 3]",
        '"just a string"',
        '{"scores": {"grammar": "abc"}}',
    ])
    def test_corrupt_record_gives_defaults(self, raw):
        tracker, _ = _seeded(raw)
        assert tracker.load() == ProgressLedger()

    def test_partial_scores_merged(self):
        tracker, _ = _seeded({'scores': {'grammar': 70}})
        scores = tracker.load().scores
        assert scores['grammar'] == 70
        assert scores['fluency'] == 47

    def test_history_truncated_on_load(self):
        history = [{'type': 'exam', 'timestamp': str(i), 'score': i} for i in range(20)]
        tracker, _ = _seeded({'exam_history': history})
        assert len(tracker.load().exam_history) == HISTORY_LIMIT

    def test_undecodable_file_gives_defaults(self, tmp_path):
        store = JsonFileStore(tmp_path)
        store.path_for(STORAGE_KEY).write_bytes(b'{"streak": 3, "x": "\xff\xfe"}')
        tracker = ProgressTracker(store)
        assert tracker.load() == ProgressLedger()

        ledger = tracker.apply_evaluation(_result())
        assert ledger.scores['grammar'] == 49
        assert tracker.load().scores['grammar'] == 49

    def test_extra_score_dimension_ignored_by_milestone(self):
        scores = {'grammar': 54, 'complexity': 49, 'vocabulary': 52,
                  'argumentation': 45, 'fluency': 47, 'pronunciation': 100}
        tracker, _ = _seeded({'scores': scores})
        ledger = tracker.record_task_completion('Essay', True, today=date(2026, 10, 18))
        assert ledger.milestone_progress == 49


class TestApplyEvaluation:

    def test_blends_all_dimensions(self):
        tracker = ProgressTracker(MemoryStore())
        ledger = tracker.apply_evaluation(_result())
        assert ledger.scores == {
            'grammar': 49, 'complexity': 36, 'vocabulary': 62,
            'argumentation': 31, 'fluency': 46,
        }

    def test_milestone_from_mean(self):
        tracker = ProgressTracker(MemoryStore())
        ledger = tracker.apply_evaluation(_result())
        # mean 44.8
        assert ledger.milestone_progress == 45

    def test_milestone_never_decreases(self):
        tracker, store = _seeded({'milestone_progress': 90, 'scores': {
            'grammar': 50, 'complexity': 50, 'vocabulary': 50,
            'argumentation': 50, 'fluency': 50,
        }})
        ledger = tracker.apply_evaluation(_result())
        assert ledger.milestone_progress == 90
        assert _stored(store)['milestone_progress'] == 90

    def test_weaknesses_counted(self):
        tracker = ProgressTracker(MemoryStore())
        tracker.apply_evaluation(_result())
        ledger = tracker.apply_evaluation(_result(weaknesses=['Kein Passiv']))
        assert ledger.weakness_log == {'Kein Konjunktiv II': 1, 'Kein Passiv': 2}

    def test_persisted(self):
        tracker, store = _seeded({})
        tracker.apply_evaluation(_result())
        assert _stored(store)['scores']['grammar'] == 49
        assert tracker.load().scores['grammar'] == 49

    def test_from_real_evaluation(self):
        from b2coach.evaluators.german import GermanEvaluator

        result = GermanEvaluator().evaluate("Ich bin müde.")
        ledger = ProgressTracker(MemoryStore()).apply_evaluation(result)
        assert ledger.scores['argumentation'] == 31
        assert sum(ledger.weakness_log.values()) == len(result.weaknesses_detected)


class TestTaskCompletion:

    DAY = date(2026, 10, 18)

    def test_failed_attempt_changes_nothing(self):
        store = MemoryStore()
        ledger = ProgressTracker(store).record_task_completion('Essay', False, today=self.DAY)
        assert ledger.streak == 1
        assert ledger.completed_tasks == set()
        assert store.get(STORAGE_KEY) is None

    def test_same_task_twice_same_day(self):
        tracker = ProgressTracker(MemoryStore())
        tracker.record_task_completion('Essay', True, today=self.DAY)
        ledger = tracker.record_task_completion('Essay', True, today=self.DAY)
        assert ledger.completed_tasks == {'Sun Oct 18 2026-Essay'}
        assert ledger.streak == 3

    def test_next_day_is_new_key(self):
        tracker = ProgressTracker(MemoryStore())
        tracker.record_task_completion('Essay', True, today=self.DAY)
        ledger = tracker.record_task_completion('Essay', True, today=date(2026, 10, 19))
        assert len(ledger.completed_tasks) == 2

    def test_save_refreshes_milestone(self):
        # defaults average to 49.4
        ledger = ProgressTracker(MemoryStore()).record_task_completion('Essay', True, today=self.DAY)
        assert ledger.milestone_progress == 49

    def test_unknown_fields_preserved(self):
        tracker, store = _seeded({'streak': 4, 'theme': 'dark', 'lastTab': 'exam'})
        tracker.record_task_completion('Essay', True, today=self.DAY)
        stored = _stored(store)
        assert stored['theme'] == 'dark'
        assert stored['lastTab'] == 'exam'
        assert stored['streak'] == 5


class TestHistory:

    def test_newest_first_and_capped(self):
        tracker = ProgressTracker(MemoryStore())
        for i in range(20):
            ledger = tracker.push_history({'type': 'exam', 'timestamp': str(i), 'score': i})
        assert len(ledger.exam_history) == HISTORY_LIMIT
        assert [e['score'] for e in ledger.exam_history] == list(range(19, 4, -1))

    def test_record_exam(self):
        tracker = ProgressTracker(MemoryStore())
        ledger = tracker.record_exam(_result(), entry_type='essay', timestamp='2026-10-18T09:00:00')
        assert ledger.exam_history[0] == {
            'type': 'essay', 'timestamp': '2026-10-18T09:00:00', 'score': 37,
        }
        assert ledger.scores['grammar'] == 49
        assert ledger.weakness_log['Kein Passiv'] == 1

    def test_record_exam_default_timestamp(self):
        ledger = ProgressTracker(MemoryStore()).record_exam(_result())
        assert ledger.exam_history[0]['type'] == 'exam'
        assert ledger.exam_history[0]['timestamp']


class TestReports:

    def test_top_weaknesses(self):
        tracker, _ = _seeded({'weakness_log': {'a': 3, 'b': 5, 'c': 1}})
        assert tracker.top_weaknesses(limit=2) == [('b', 5), ('a', 3)]

    def test_top_weaknesses_empty(self):
        assert ProgressTracker(MemoryStore()).top_weaknesses() == []

    def test_roadmap_progress(self):
        tracker, _ = _seeded({'milestone_progress': 45})
        assert [p['percent'] for p in tracker.roadmap_progress()] == [63, 55, 50]

    def test_roadmap_reached_phases(self):
        tracker, _ = _seeded({'milestone_progress': 85})
        assert [p['percent'] for p in tracker.roadmap_progress()] == [100, 100, 94]


class TestJsonFileStore:

    def test_round_trip_across_trackers(self, tmp_path):
        store = JsonFileStore(tmp_path / 'ledger')
        ProgressTracker(store).apply_evaluation(_result())

        reloaded = ProgressTracker(JsonFileStore(tmp_path / 'ledger')).load()
        assert reloaded.scores['vocabulary'] == 62
        assert store.path_for(STORAGE_KEY).exists()

    def test_no_temp_files_left(self, tmp_path):
        store = JsonFileStore(tmp_path)
        tracker = ProgressTracker(store)
        tracker.push_history({'type': 'exam', 'timestamp': 't', 'score': 1})
        tracker.push_history({'type': 'exam', 'timestamp': 't', 'score': 2})
        assert [p.name for p in tmp_path.iterdir()] == [f'{STORAGE_KEY}.json']

    def test_missing_file(self, tmp_path):
        assert JsonFileStore(tmp_path / 'nothing').get(STORAGE_KEY) is None

    def test_unicode_kept(self, tmp_path):
        store = JsonFileStore(tmp_path)
        ProgressTracker(store).apply_evaluation(_result(weaknesses=['Präpositionen prüfen']))
        assert 'Präpositionen prüfen' in store.path_for(STORAGE_KEY).read_text(encoding='utf-8')
