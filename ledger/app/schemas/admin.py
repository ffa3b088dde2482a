"""
Admin report schemas
"""
from decimal import Decimal
from pydantic import BaseModel, Field, ConfigDict


class BestProfessionResponse(BaseModel):
    """Profession with the highest paid-job earnings in a window"""
    profession: str
    earnings: Decimal = Field(..., description="Sum of paid job prices")


class BestClientResponse(BaseModel):
    """Client ranked by total paid for jobs in a window"""
    id: int
    full_name: str = Field(..., serialization_alias="fullName")
    paid: Decimal = Field(..., description="Sum of paid job prices")

    model_config = ConfigDict(populate_by_name=True)
