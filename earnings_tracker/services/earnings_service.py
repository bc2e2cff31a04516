# earnings_tracker/services/earnings_service.py
import logging
import threading
from contextlib import contextmanager
from typing import Any, Callable, Dict, List, Optional
from decimal import Decimal
from datetime import datetime
from pydantic import ValidationError

from earnings_tracker.models.weekly_earnings import WeeklyEarnings, WeeklyEarningsRead
from earnings_tracker.models.weekly_earnings_update import WeeklyEarningsUpdate, EarningsComparison
from earnings_tracker.models.week_info import WeekInfo, WeekRange
from earnings_tracker.services.earnings_store import EarningsStore, WeekKey
from earnings_tracker.utils.week_clock import (
    DEFAULT_UTC_OFFSET_HOURS, WeekBoundaries, WeekInterval,
    fixed_offset, resolve_week, to_utc, utcnow
)

logger = logging.getLogger(__name__)

# Constantes
PLATFORM_FEE_PCT = Decimal("0.10")  # comisión solo sobre el bruto, no sobre el efectivo
FIXED_DEDUCTION_THRESHOLD = Decimal("999")
FIXED_DEDUCTION_LOW = Decimal("25")
FIXED_DEDUCTION_HIGH = Decimal("45")


class EarningsValidationError(ValueError):
    """Uno o más campos de la actualización no son montos válidos"""

    def __init__(self, errors: List[Dict[str, str]]):
        self.errors = errors
        self.fields = sorted({error["field"] for error in errors})
        super().__init__(f"Invalid input data: {', '.join(self.fields)}")

    @classmethod
    def from_pydantic(cls, exc: ValidationError) -> "EarningsValidationError":
        errors = []
        for error in exc.errors():
            field = ".".join(str(part) for part in error["loc"]) or "body"
            errors.append({"field": field, "message": error["msg"]})
        return cls(errors)


def _to_decimal(value) -> Decimal:
    # str() evita arrastrar el error binario del float (0.1 * 1100 != 110)
    return Decimal(str(value or 0))


def calculate_earnings(bolt_gross=0, uber_gross=0, bolt_cash=0, uber_cash=0) -> Dict[str, float]:
    """
    Calcula los campos derivados de una semana a partir de las entradas.

    Es la única fórmula del sistema: se usa al crear y al actualizar.
    El neto puede quedar negativo; no se redondea ni se recorta nada.
    """
    gross = _to_decimal(bolt_gross) + _to_decimal(uber_gross)
    platform_fee = gross * PLATFORM_FEE_PCT
    fixed_deduction = FIXED_DEDUCTION_HIGH if gross > FIXED_DEDUCTION_THRESHOLD else FIXED_DEDUCTION_LOW
    total_cash = _to_decimal(bolt_cash) + _to_decimal(uber_cash)
    net = gross - platform_fee - fixed_deduction - total_cash

    return {
        "total_earnings": float(gross),
        "platform_fee": float(platform_fee),
        "fixed_deduction": float(fixed_deduction),
        "total_cash_earnings": float(total_cash),
        "net_earnings": float(net),
    }


def apply_calculations(record: WeeklyEarnings) -> WeeklyEarnings:
    derived = calculate_earnings(
        bolt_gross=record.bolt_gross,
        uber_gross=record.uber_gross,
        bolt_cash=record.bolt_cash,
        uber_cash=record.uber_cash,
    )
    for field, value in derived.items():
        setattr(record, field, value)
    return record


class EarningsLedger:
    """
    Registro de ganancias semanales, una fila por semana (lunes a domingo).

    La semana se resuelve con el reloj en cada llamada; no hay tareas en
    segundo plano para el cambio de semana.
    """

    def __init__(
        self,
        store: EarningsStore,
        clock: Callable[[], datetime] = utcnow,
        utc_offset_hours: int = DEFAULT_UTC_OFFSET_HOURS,
        currency: str = "RON"
    ):
        self.store = store
        self.clock = clock
        self.tz = fixed_offset(utc_offset_hours)
        self.currency = currency
        # clave -> [lock, escritores usando o esperando el lock]
        self._locks: Dict[WeekKey, list] = {}
        self._locks_guard = threading.Lock()

    def week_boundaries(self) -> WeekBoundaries:
        return resolve_week(self.clock(), self.tz)

    @contextmanager
    def _week_lock(self, key: WeekKey):
        """Exclusión mutua por semana; el lock se descarta al quedar sin uso"""
        with self._locks_guard:
            entry = self._locks.setdefault(key, [threading.Lock(), 0])
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._locks_guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[key]

    def _find(self, week: WeekInterval) -> Optional[WeeklyEarnings]:
        return self.store.get(week.key)

    def get_current(self) -> Optional[WeeklyEarnings]:
        return self._find(self.week_boundaries().current)

    def get_previous(self) -> Optional[WeeklyEarnings]:
        return self._find(self.week_boundaries().previous)

    def get_all(self) -> List[WeeklyEarnings]:
        return self.store.list_all()

    @staticmethod
    def validate_changes(changes: Any) -> Dict[str, float]:
        """Devuelve solo los campos enviados, o lanza EarningsValidationError"""
        if changes is None:
            return {}
        if isinstance(changes, WeeklyEarningsUpdate):
            update = changes
        else:
            try:
                update = WeeklyEarningsUpdate.model_validate(changes)
            except ValidationError as e:
                raise EarningsValidationError.from_pydantic(e) from e
        return update.model_dump(exclude_unset=True)

    def upsert_current(self, changes: Any = None) -> WeeklyEarnings:
        """
        Aplica una actualización parcial a la semana actual.

        Si la semana no existe se crea con todas las entradas en 0. Cada campo
        enviado reemplaza el valor anterior (no se acumula) y los campos
        derivados se recalculan antes de guardar.
        """
        data = self.validate_changes(changes)
        week = self.week_boundaries().current

        with self._week_lock(week.key):
            record = self.store.get(week.key)
            created = record is None
            if created:
                start, end = week.key
                record = WeeklyEarnings(week_start_date=start, week_end_date=end)

            for field, value in data.items():
                setattr(record, field, value)
            apply_calculations(record)
            saved = self.store.save(record)

        if created:
            logger.info(f"Created weekly earnings for week starting {week.start.isoformat()}")
        else:
            logger.debug(f"Updated weekly earnings {saved.id}: {sorted(data)}")
        return saved

    def present(self, record: WeeklyEarnings) -> WeeklyEarningsRead:
        """Registro para la API, con las fechas en la zona horaria local"""
        data = record.model_dump()
        for field in ("week_start_date", "week_end_date", "created_at"):
            if data.get(field) is not None:
                data[field] = to_utc(data[field]).astimezone(self.tz)
        return WeeklyEarningsRead(**data)

    def get_current_or_default(self) -> WeeklyEarningsRead:
        """
        Semana actual, o una proyección en ceros (deducción fija 25) si aún no
        hay registro. La proyección nunca se guarda. Su neto es 0, no el -25
        que daría la fórmula.
        """
        record = self.get_current()
        if record is None:
            return WeeklyEarningsRead(fixed_deduction=float(FIXED_DEDUCTION_LOW))
        return self.present(record)

    def get_week_info(self) -> WeekInfo:
        boundaries = self.week_boundaries()
        return WeekInfo(
            current_week=WeekRange(start=boundaries.current.start, end=boundaries.current.end),
            previous_week=WeekRange(start=boundaries.previous.start, end=boundaries.previous.end),
            next_reset=boundaries.next_reset,
            currency=self.currency,
        )

    def get_comparison(self) -> EarningsComparison:
        """Diferencia de neto entre la semana actual y la anterior"""
        boundaries = self.week_boundaries()
        current = self._find(boundaries.current)
        previous = self._find(boundaries.previous)

        current_net = current.net_earnings if current is not None else 0.0
        if previous is None:
            return EarningsComparison(current_net_earnings=current_net)

        difference = _to_decimal(current_net) - _to_decimal(previous.net_earnings)
        return EarningsComparison(
            current_net_earnings=current_net,
            previous_net_earnings=previous.net_earnings,
            difference=float(difference),
        )
