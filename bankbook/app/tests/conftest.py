import pytest

from ..core.db import create_engine_for_url, init_db
from ..services import LedgerService, LedgerStore


@pytest.fixture
def database_url(tmp_path) -> str:
    return f"sqlite:///{tmp_path / 'bank.db'}"


@pytest.fixture
def engine(database_url):
    engine = create_engine_for_url(database_url)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def store(engine) -> LedgerStore:
    return LedgerStore(engine)


@pytest.fixture
def service(store) -> LedgerService:
    return LedgerService(store)
