from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CategoryCreate(BaseModel):
    # Optional here so a missing name is reported as a 400 by the repository.
    name: Optional[str] = Field(default=None, max_length=150)
    slug: Optional[str] = Field(default=None, max_length=150)
    parent_id: Optional[int] = None


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(default=None, max_length=150)
    slug: Optional[str] = Field(default=None, max_length=150)
    parent_id: Optional[int] = None


class CategoryRead(BaseModel):
    id: int
    name: str
    slug: Optional[str] = None
    parent_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
