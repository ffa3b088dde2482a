"""
Profile schemas
"""
from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, Field, ConfigDict


class ProfileResponse(BaseModel):
    """Profile view returned to its owner"""
    id: int
    first_name: str
    last_name: str
    profession: str
    balance: Decimal = Field(..., description="Available funds")
    type: str = Field(..., description="client or contractor")
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
