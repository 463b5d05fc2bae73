from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class PortfolioCreate(BaseModel):
    title: Optional[str] = Field(default=None, max_length=255)
    slug: Optional[str] = Field(default=None, max_length=255)
    summary: Optional[str] = Field(default=None, max_length=500)
    body: Optional[str] = None
    cover: Optional[str] = Field(default=None, max_length=500)


class PortfolioUpdate(PortfolioCreate):
    pass


class PortfolioRead(BaseModel):
    id: int
    title: str
    slug: Optional[str] = None
    summary: Optional[str] = None
    body: Optional[str] = None
    cover: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
