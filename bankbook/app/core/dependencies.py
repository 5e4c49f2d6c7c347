from sqlalchemy.engine import Engine

from ..services import LedgerService, LedgerStore


def get_ledger_service(engine: Engine) -> LedgerService:
    store = LedgerStore(engine)
    return LedgerService(store)
