from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, model_validator


class SubscriptionUpdateRequest(BaseModel):
    service_name: str = Field(..., min_length=1)
    price: int = Field(..., ge=0)
    start_date: date
    end_date: Optional[date] = None

    @model_validator(mode="after")
    def check_period(self):
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class SubscriptionCreateRequest(SubscriptionUpdateRequest):
    user_id: UUID


class SubscriptionResponse(BaseModel):
    id: str
    service_name: str
    price: int
    user_id: str
    start_date: date
    end_date: Optional[date] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SubscriptionCostResponse(BaseModel):
    total_price: int
