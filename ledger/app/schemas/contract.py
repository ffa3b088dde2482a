"""
Contract schemas
"""
from datetime import datetime
from pydantic import BaseModel, ConfigDict


class ContractResponse(BaseModel):
    """Contract view"""
    id: int
    terms: str
    status: str
    client_id: int
    contractor_id: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
