# Infrastructure Adapters Package
from .fsrs_scheduler import FsrsScheduler
from .memory_repository import InMemoryCardRepository, StorageStatistics

__all__ = ["FsrsScheduler", "InMemoryCardRepository", "StorageStatistics"]
