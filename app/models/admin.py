from typing import Optional, List
from uuid import UUID
from datetime import datetime
from sqlmodel import SQLModel, Field


class DashboardStats(SQLModel):
    total_clients: int
    total_partners: int
    pending_verifications: int
    total_inquiries: int


# ==========================================
# CATEGORIES
# ==========================================

class CategoryCreate(SQLModel):
    name: str = Field(min_length=1, max_length=100, description="Example: 'Wedding'")
    description: Optional[str] = Field(default="", max_length=500)
    is_active: bool = True


class CategoryUpdate(SQLModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    is_active: Optional[bool] = None


class CategoryRead(SQLModel):
    id: UUID
    name: str
    description: str
    is_active: bool
    created_at: datetime


class CategoryList(SQLModel):
    categories: List[CategoryRead]
    total: int


# ==========================================
# LOCATIONS
# ==========================================

class LocationCreate(SQLModel):
    city: str = Field(min_length=1, max_length=100, description="Example: 'Pune'")
    state: str = Field(min_length=1, max_length=100, description="Example: 'Maharashtra'")
    is_active: bool = True


class LocationUpdate(SQLModel):
    city: Optional[str] = Field(default=None, min_length=1, max_length=100)
    state: Optional[str] = Field(default=None, min_length=1, max_length=100)
    is_active: Optional[bool] = None


class LocationRead(SQLModel):
    id: UUID
    city: str
    state: str
    is_active: bool
    created_at: datetime


class LocationList(SQLModel):
    locations: List[LocationRead]
    total: int
