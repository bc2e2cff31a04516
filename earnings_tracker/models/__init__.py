# Módulo models: define las clases y estructuras de datos principales de la aplicación (SQLModel/Pydantic)
# Solo WeeklyEarnings es una tabla; el resto son modelos de entrada/salida

from .weekly_earnings import WeeklyEarnings, WeeklyEarningsRead, RAW_INPUT_FIELDS
from .weekly_earnings_update import WeeklyEarningsUpdate, EarningsComparison
from .week_info import WeekInfo, WeekRange
