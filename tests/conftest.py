import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("B2COACH_AI_ENDPOINT", "B2COACH_AI_PROVIDER", "B2COACH_AI_TIMEOUT", "ANTHROPIC_API_KEY"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
