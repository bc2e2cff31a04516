from pydantic import BaseModel
from datetime import datetime


class WeekRange(BaseModel):
    start: datetime
    end: datetime


class WeekInfo(BaseModel):
    current_week: WeekRange
    previous_week: WeekRange
    next_reset: datetime
    currency: str
