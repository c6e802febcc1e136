"""ORM models."""

from models.base import Base
from models.storage_entry import StorageEntry

__all__ = ["Base", "StorageEntry"]
