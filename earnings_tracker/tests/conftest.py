import pytest
from datetime import datetime, timezone
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine

from earnings_tracker.main import app
from earnings_tracker.core.dependencies.ledger import get_ledger
from earnings_tracker.services.earnings_service import EarningsLedger
from earnings_tracker.services.earnings_store import MemoryEarningsStore, SQLEarningsStore

# Miércoles 15/10/2025 12:00 UTC (14:00 en GMT+2); la semana va del 13 al 19
FIXED_NOW = datetime(2025, 10, 15, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Reloj controlable para mover el ledger entre semanas"""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def create_memory_engine():
    # StaticPool: todas las sesiones comparten la misma base en memoria
    return create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )


@pytest.fixture(name="engine")
def engine_fixture():
    engine = create_memory_engine()
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(name="clock")
def clock_fixture():
    return FakeClock(FIXED_NOW)


@pytest.fixture(name="store", params=["memory", "sql"])
def store_fixture(request, engine):
    """Cada test del ledger corre con ambos almacenamientos"""
    if request.param == "memory":
        return MemoryEarningsStore()
    return SQLEarningsStore(engine)


@pytest.fixture(name="ledger")
def ledger_fixture(store, clock):
    return EarningsLedger(store, clock=clock)


@pytest.fixture(name="client")
def client_fixture(ledger):
    app.dependency_overrides[get_ledger] = lambda: ledger
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()
