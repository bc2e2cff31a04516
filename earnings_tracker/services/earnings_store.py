import logging
import threading
from typing import Dict, List, Optional, Tuple
from datetime import datetime
from sqlmodel import Session, select
from sqlalchemy.exc import SQLAlchemyError

from earnings_tracker.models.weekly_earnings import WeeklyEarnings

logger = logging.getLogger(__name__)

WeekKey = Tuple[datetime, datetime]


def _copy(record: WeeklyEarnings) -> WeeklyEarnings:
    return WeeklyEarnings(**record.model_dump())


class EarningsStorageError(Exception):
    """El almacenamiento no está disponible o la lectura/escritura falló"""
    pass


class EarningsStore:
    """
    Colaborador de almacenamiento del ledger: un mapa clave -> registro,
    donde la clave es (week_start_date, week_end_date) en UTC.
    """

    def get(self, key: WeekKey) -> Optional[WeeklyEarnings]:
        raise NotImplementedError

    def list_all(self) -> List[WeeklyEarnings]:
        """Todas las semanas, la más reciente primero"""
        raise NotImplementedError

    def save(self, record: WeeklyEarnings) -> WeeklyEarnings:
        raise NotImplementedError


class MemoryEarningsStore(EarningsStore):
    def __init__(self):
        self._records: Dict[WeekKey, WeeklyEarnings] = {}
        self._next_id = 1
        # Lectores y escritores comparten el dict desde el threadpool de FastAPI
        self._lock = threading.Lock()

    def get(self, key: WeekKey) -> Optional[WeeklyEarnings]:
        with self._lock:
            record = self._records.get(key)
        # Copia para que el llamador no modifique el registro guardado
        return _copy(record) if record is not None else None

    def list_all(self) -> List[WeeklyEarnings]:
        with self._lock:
            records = [_copy(record) for record in self._records.values()]
        # sorted es estable: a igual inicio se conserva el orden de inserción
        return sorted(
            records,
            key=lambda record: record.week_start_date,
            reverse=True
        )

    def save(self, record: WeeklyEarnings) -> WeeklyEarnings:
        with self._lock:
            if record.id is None:
                record.id = self._next_id
                self._next_id += 1
            key = (record.week_start_date, record.week_end_date)
            self._records[key] = _copy(record)
        return record


class SQLEarningsStore(EarningsStore):
    """Guarda las semanas en la tabla weekly_earnings, una sesión por operación"""

    def __init__(self, engine):
        self.engine = engine

    def get(self, key: WeekKey) -> Optional[WeeklyEarnings]:
        start, end = key
        try:
            with Session(self.engine) as session:
                return session.exec(
                    select(WeeklyEarnings).where(
                        WeeklyEarnings.week_start_date == start,
                        WeeklyEarnings.week_end_date == end
                    )
                ).first()
        except SQLAlchemyError as e:
            logger.error(f"Error reading week {start.isoformat()}: {str(e)}")
            raise EarningsStorageError(str(e)) from e

    def list_all(self) -> List[WeeklyEarnings]:
        try:
            with Session(self.engine) as session:
                return list(session.exec(
                    select(WeeklyEarnings).order_by(
                        WeeklyEarnings.week_start_date.desc(),
                        WeeklyEarnings.id.asc()
                    )
                ).all())
        except SQLAlchemyError as e:
            logger.error(f"Error listing weekly earnings: {str(e)}")
            raise EarningsStorageError(str(e)) from e

    def save(self, record: WeeklyEarnings) -> WeeklyEarnings:
        with Session(self.engine) as session:
            try:
                stored = session.merge(record)
                session.commit()
                session.refresh(stored)
                return stored
            except SQLAlchemyError as e:
                session.rollback()
                logger.error(
                    f"Error saving week {record.week_start_date.isoformat()}: {str(e)}")
                raise EarningsStorageError(str(e)) from e
