from typing import Annotated
from fastapi import Depends, Request

from earnings_tracker.core.config import Settings
from earnings_tracker.services.earnings_service import EarningsLedger
from earnings_tracker.services.earnings_store import MemoryEarningsStore, SQLEarningsStore


def build_ledger(settings: Settings, engine) -> EarningsLedger:
    """Construye el ledger con el almacenamiento elegido en la configuración"""
    if settings.STORAGE_BACKEND == "memory":
        store = MemoryEarningsStore()
    else:
        store = SQLEarningsStore(engine)
    return EarningsLedger(
        store,
        utc_offset_hours=settings.WEEK_UTC_OFFSET_HOURS,
        currency=settings.CURRENCY
    )


def get_ledger(request: Request) -> EarningsLedger:
    # Se crea una sola vez en el lifespan de la aplicación
    return request.app.state.ledger


LedgerDep = Annotated[EarningsLedger, Depends(get_ledger)]
