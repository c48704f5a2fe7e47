"""
Upload history module.

Keeps a local JSON log of successful uploads.
"""
from .models import UploadRecord, UploadHistory, HistoryStats
from .store import HistoryStore

__all__ = [
    'UploadRecord',
    'UploadHistory',
    'HistoryStats',
    'HistoryStore',
]
