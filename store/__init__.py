"""Identity store backends."""

from .abstract_store import IdentityStore
from .sql_store import SqlIdentityStore

__all__ = ["IdentityStore", "SqlIdentityStore"]
