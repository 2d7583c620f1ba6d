"""Response bodies of the health endpoints that are not domain models."""

from datetime import datetime

from pydantic import BaseModel, Field


class PingResponse(BaseModel):
    """Liveness answer; never touches the database."""

    status: str = Field(default="ok", examples=["ok"])
    timestamp: datetime
    uptime_seconds: float = Field(..., ge=0)
    data_access_technology: str = Field(..., examples=["SQLAlchemy ORM"])
