"""
Tests for the evaluate.py command line entry point
"""

import json

import pytest

import evaluate
from b2coach.progress import JsonFileStore, ProgressTracker


def test_rule_based_run_writes_outputs(tmp_path, clean_env):
    evaluate.main([
        '--text', 'Ich bin müde.',
        '--rule-based',
        '--name', 'anna test',
        '--output', str(tmp_path),
    ])

    data = json.loads((tmp_path / 'evaluations' / 'anna_test_evaluation.json').read_text(encoding='utf-8'))
    assert data['result']['overall_score'] == 37
    assert data['result']['provenance'] == 'local'
    assert data['options'] == {'mode': 'discussion', 'pressureMode': True}

    report = (tmp_path / 'reports' / 'anna_test_report.md').read_text(encoding='utf-8')
    assert report.startswith('# B2 Writing Report: anna test')


def test_ledger_updated(tmp_path, clean_env):
    ledger_dir = tmp_path / 'progress'
    evaluate.main([
        '--text', 'Ich bin müde.',
        '--rule-based',
        '--mode', 'essay',
        '--output', str(tmp_path / 'out'),
        '--ledger-dir', str(ledger_dir),
        '--task', 'Essay',
    ])

    ledger = ProgressTracker(JsonFileStore(ledger_dir)).load()
    assert ledger.streak == 2
    assert ledger.exam_history[0]['type'] == 'essay'
    assert ledger.exam_history[0]['score'] == 37


def test_missing_file_exits(tmp_path, clean_env):
    with pytest.raises(SystemExit) as exc:
        evaluate.main(['--file', str(tmp_path / 'missing.txt'), '--output', str(tmp_path)])
    assert exc.value.code == 1


def test_bad_env_timeout_exits(tmp_path, clean_env):
    clean_env.setenv('B2COACH_AI_TIMEOUT', 'soon')
    with pytest.raises(SystemExit) as exc:
        evaluate.main(['--text', 'Hallo.', '--output', str(tmp_path)])
    assert exc.value.code == 2
