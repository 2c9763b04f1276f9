"""Record store"""

from calltriage.store.base import RecordStore
from calltriage.store.memory import MemoryStore
from calltriage.store.sample_data import seed_sample_data

__all__ = ["RecordStore", "MemoryStore", "seed_sample_data"]
