"""
Common response schemas
"""
from typing import Literal
from pydantic import BaseModel, Field


class StatusResponse(BaseModel):
    """Outcome of a committed mutating call; failures go through the error handlers"""
    status: Literal["Ok"] = Field("Ok", description="Sent only once the change was committed")
