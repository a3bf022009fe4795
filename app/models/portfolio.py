from typing import Optional, List
from uuid import UUID
from datetime import datetime
from sqlmodel import SQLModel, Field


class PortfolioCreate(SQLModel):
    image_url: str = Field(description="Publicly reachable image URL.")
    title: Optional[str] = Field(default="", max_length=100)
    description: Optional[str] = Field(default="", max_length=500)
    category: Optional[str] = Field(default="", max_length=100)
    display_order: int = Field(default=0, description="Lower values are shown first.")


class PortfolioUpdate(SQLModel):
    image_url: Optional[str] = None
    title: Optional[str] = Field(default=None, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    category: Optional[str] = Field(default=None, max_length=100)
    display_order: Optional[int] = None


class PortfolioRead(SQLModel):
    id: UUID
    partner_id: UUID
    image_url: str
    title: str
    description: str
    category: str
    display_order: int
    created_at: datetime


class PortfolioList(SQLModel):
    items: List[PortfolioRead]
    total: int
