from .ledger import LedgerService
from .store import AccountLocks, LedgerStore

__all__ = ["AccountLocks", "LedgerService", "LedgerStore"]
