"""
Job schemas
"""
from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, Field, ConfigDict


class JobResponse(BaseModel):
    """Job view"""
    id: int
    description: str
    price: Decimal = Field(..., gt=0)
    paid: bool | None = Field(None, description="null or false while unpaid")
    payment_date: datetime | None = None
    contract_id: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
