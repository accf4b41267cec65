from .base import Base
from .session import create_tables, get_db

__all__ = ["get_db", "create_tables", "Base"]
