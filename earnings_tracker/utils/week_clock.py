from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

# Constantes
DEFAULT_UTC_OFFSET_HOURS = 2
DAYS_TO_WEEK_END = 6
END_OF_DAY = timedelta(days=1) - timedelta(milliseconds=1)
# Margen para que la semana anterior y el próximo reinicio sigan siendo fechas válidas
_CLOCK_MARGIN = timedelta(days=14)
_EARLIEST_WALL = datetime.min + _CLOCK_MARGIN
_LATEST_WALL = datetime.max - _CLOCK_MARGIN


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def fixed_offset(hours: int = DEFAULT_UTC_OFFSET_HOURS) -> timezone:
    """Zona horaria fija (sin horario de verano), por defecto GMT+2"""
    return timezone(timedelta(hours=hours))


def to_utc(value: datetime) -> datetime:
    """
    Normaliza un instante a UTC con tzinfo, el formato en que se guardan
    las fechas. Un valor sin tzinfo se interpreta como UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class WeekInterval:
    """
    Semana de lunes a domingo en la hora local.

    `start` es el lunes a las 00:00:00.000 y `end` el domingo a las 00:00
    (start + 6 días). `end_of_day` es el domingo a las 23:59:59.999.
    """
    start: datetime
    end: datetime

    @property
    def end_of_day(self) -> datetime:
        return self.end + END_OF_DAY

    @property
    def key(self) -> Tuple[datetime, datetime]:
        """Identidad del registro semanal: (inicio, fin del día) en UTC"""
        return to_utc(self.start), to_utc(self.end_of_day)


@dataclass(frozen=True)
class WeekBoundaries:
    current: WeekInterval
    previous: WeekInterval
    next_reset: datetime


def current_week_start(now: Optional[datetime] = None, tz: Optional[timezone] = None) -> datetime:
    """
    Lunes 00:00 (hora local) de la semana que contiene `now`.

    Un `now` sin tzinfo se interpreta como UTC. weekday() cuenta lunes=0 y
    domingo=6, así que el domingo retrocede 6 días.

    Los instantes a menos de dos semanas de datetime.min o datetime.max se
    acercan a ese margen, para no salir del calendario representable.
    """
    if now is None:
        now = utcnow()
    if tz is None:
        tz = fixed_offset()
    wall = now.replace(tzinfo=None)
    if wall < _EARLIEST_WALL:
        now = _EARLIEST_WALL.replace(tzinfo=timezone.utc)
    elif wall > _LATEST_WALL:
        now = _LATEST_WALL.replace(tzinfo=timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    local_now = now.astimezone(tz)
    monday = local_now - timedelta(days=local_now.weekday())
    return monday.replace(hour=0, minute=0, second=0, microsecond=0)


def week_starting(start: datetime) -> WeekInterval:
    return WeekInterval(start=start, end=start + timedelta(days=DAYS_TO_WEEK_END))


def resolve_week(now: Optional[datetime] = None, tz: Optional[timezone] = None) -> WeekBoundaries:
    """
    Calcula la semana actual, la anterior y el próximo reinicio.

    Todo se deriva del mismo lunes, por lo que dos llamadas dentro de la
    misma semana local devuelven exactamente los mismos valores.
    """
    start = current_week_start(now, tz)
    return WeekBoundaries(
        current=week_starting(start),
        previous=week_starting(start - timedelta(days=7)),
        next_reset=start + timedelta(days=7),
    )
