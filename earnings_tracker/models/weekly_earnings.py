from sqlmodel import SQLModel, Field
from sqlalchemy import UniqueConstraint
from typing import Optional
from datetime import datetime

from earnings_tracker.utils.week_clock import utcnow

# Campos que el usuario puede enviar; el resto se calcula
RAW_INPUT_FIELDS = ("bolt_gross", "uber_gross", "bolt_cash", "uber_cash")


def _created_now() -> datetime:
    return utcnow()


class WeeklyEarningsBase(SQLModel):
    # Entradas (brutos de plataforma y efectivo cobrado)
    bolt_gross: float = Field(default=0, ge=0)
    uber_gross: float = Field(default=0, ge=0)
    bolt_cash: float = Field(default=0, ge=0)
    uber_cash: float = Field(default=0, ge=0)

    # Campos derivados, siempre recalculados
    total_earnings: float = Field(default=0)
    platform_fee: float = Field(default=0)
    fixed_deduction: float = Field(default=0)
    total_cash_earnings: float = Field(default=0)
    net_earnings: float = Field(default=0)


class WeeklyEarnings(WeeklyEarningsBase, table=True):
    __tablename__ = "weekly_earnings"
    __table_args__ = (
        UniqueConstraint("week_start_date", "week_end_date",
                         name="uq_weekly_earnings_week"),
    )
    id: Optional[int] = Field(default=None, primary_key=True)
    # Guardadas en UTC con tzinfo
    week_start_date: datetime = Field(nullable=False, index=True)
    week_end_date: datetime = Field(nullable=False)
    created_at: datetime = Field(default_factory=_created_now, nullable=False)


class WeeklyEarningsRead(WeeklyEarningsBase):
    id: Optional[int] = None
    week_start_date: Optional[datetime] = None
    week_end_date: Optional[datetime] = None
    created_at: Optional[datetime] = None

