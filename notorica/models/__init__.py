# SQLAlchemy models package
from notorica.models.base import Base
from notorica.models.kv import KeyValueEntry

__all__ = ["Base", "KeyValueEntry"]
