"""
Progress Package

Learner progress record, score blending and storage backends.
"""

from .blend import blended_score
from .ledger import ProgressLedger, ProgressTracker, STORAGE_KEY, HISTORY_LIMIT, ROADMAP
from .storage import LedgerStore, MemoryStore, JsonFileStore

__all__ = [
    'blended_score',
    'ProgressLedger',
    'ProgressTracker',
    'STORAGE_KEY',
    'HISTORY_LIMIT',
    'ROADMAP',
    'LedgerStore',
    'MemoryStore',
    'JsonFileStore',
]
