import math
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional

from .weekly_earnings import RAW_INPUT_FIELDS


class WeeklyEarningsUpdate(BaseModel):
    """
    Actualización parcial de la semana actual.
    Solo se aplican los campos enviados; los demás conservan su valor.
    """
    model_config = ConfigDict(extra="forbid", strict=True)

    bolt_gross: Optional[float] = Field(default=None, ge=0)
    uber_gross: Optional[float] = Field(default=None, ge=0)
    bolt_cash: Optional[float] = Field(default=None, ge=0)
    uber_cash: Optional[float] = Field(default=None, ge=0)

    @field_validator(*RAW_INPUT_FIELDS, mode="before")
    @classmethod
    def validate_number(cls, v):
        # null, NaN e infinito no son montos válidos
        if v is None:
            raise ValueError("must be a non-negative number")
        if isinstance(v, float) and not math.isfinite(v):
            raise ValueError("must be a finite number")
        return v


class EarningsComparison(BaseModel):
    current_net_earnings: float
    previous_net_earnings: Optional[float] = None
    difference: Optional[float] = None
