from app.storage.base import Storage
from app.storage.database import DatabaseStorage
from app.storage.memory import MemoryStorage

__all__ = ["Storage", "DatabaseStorage", "MemoryStorage"]
