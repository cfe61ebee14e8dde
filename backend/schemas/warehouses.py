from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class WarehouseCreate(BaseModel):
    name: str = Field(..., min_length=1)
    location: Optional[str] = None


class WarehouseUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    location: Optional[str] = None
    is_active: Optional[bool] = None


class Warehouse(WarehouseCreate):
    id: int
    is_active: bool

    model_config = ConfigDict(from_attributes=True)
