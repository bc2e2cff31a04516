import logging
from typing import Any, List, Optional
from fastapi import APIRouter, Body, HTTPException, status

from earnings_tracker.core.dependencies.ledger import LedgerDep
from earnings_tracker.models.weekly_earnings import WeeklyEarningsRead
from earnings_tracker.models.weekly_earnings_update import EarningsComparison
from earnings_tracker.models.week_info import WeekInfo
from earnings_tracker.services.earnings_service import EarningsValidationError
from earnings_tracker.services.earnings_store import EarningsStorageError

router = APIRouter(prefix="/earnings", tags=["earnings"])


def _storage_failure(message: str) -> HTTPException:
    logging.exception(message)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=message)


@router.get("/current", response_model=WeeklyEarningsRead, description="""
Devuelve las ganancias de la semana actual (lunes a domingo, GMT+2).

Si la semana aún no tiene registro devuelve todo en 0 con una deducción
fija de 25. Esa respuesta no se guarda.
""")
def get_current_week(ledger: LedgerDep):
    try:
        return ledger.get_current_or_default()
    except EarningsStorageError:
        raise _storage_failure("Failed to fetch current week earnings")


@router.get("/previous", response_model=Optional[WeeklyEarningsRead])
def get_previous_week(ledger: LedgerDep):
    """
    Devuelve las ganancias de la semana anterior, o null si no hay registro.
    """
    try:
        previous = ledger.get_previous()
    except EarningsStorageError:
        raise _storage_failure("Failed to fetch previous week earnings")
    return ledger.present(previous) if previous is not None else None


@router.get("/week-info", response_model=WeekInfo)
def get_week_info(ledger: LedgerDep):
    """
    Límites de la semana actual y la anterior, y el próximo reinicio.
    """
    return ledger.get_week_info()


@router.patch("/current", response_model=WeeklyEarningsRead, status_code=status.HTTP_200_OK, description="""
Actualiza la semana actual. Crea el registro si aún no existe.

**Parámetros (todos opcionales):**
- `bolt_gross`, `uber_gross`: brutos de cada plataforma.
- `bolt_cash`, `uber_cash`: efectivo cobrado directamente.

Cada monto debe ser un número mayor o igual a 0. Un campo desconocido o
inválido rechaza toda la petición.

**Respuesta:**
Devuelve el registro completo con los campos derivados recalculados.
""")
def update_current_week(ledger: LedgerDep, changes: Any = Body(default=None)):
    try:
        record = ledger.upsert_current(changes)
    except EarningsValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": "Invalid input data", "errors": e.errors})
    except EarningsStorageError:
        raise _storage_failure("Failed to update earnings")
    return ledger.present(record)


@router.get("/history", response_model=List[WeeklyEarningsRead])
def get_history(ledger: LedgerDep):
    """
    Todas las semanas guardadas, la más reciente primero.
    """
    try:
        records = ledger.get_all()
    except EarningsStorageError:
        raise _storage_failure("Failed to fetch earnings history")
    return [ledger.present(record) for record in records]


@router.get("/comparison", response_model=EarningsComparison)
def get_comparison(ledger: LedgerDep):
    """
    Neto de la semana actual frente al de la semana anterior.
    """
    try:
        return ledger.get_comparison()
    except EarningsStorageError:
        raise _storage_failure("Failed to compare weekly earnings")
