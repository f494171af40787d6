from switchboard.storage.base import StorageManager
from switchboard.storage.sqlalchemy_storage import SQLAlchemyStorage, StorageNotConnectedError

__all__ = ["SQLAlchemyStorage", "StorageManager", "StorageNotConnectedError"]
