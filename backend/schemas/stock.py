from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime
from models.stock_movements import MovementType


class StockMovementCreate(BaseModel):
    product_id: int
    movement_type: MovementType
    # ADJUSTMENT may set a bin to zero; the engine enforces > 0 for the other types
    quantity: int = Field(..., ge=0)
    from_warehouse_id: Optional[int] = None
    to_warehouse_id: Optional[int] = None
    notes: Optional[str] = None


class StockMovement(BaseModel):
    id: int
    product_id: int
    movement_type: MovementType
    quantity: int
    from_warehouse_id: Optional[int] = None
    to_warehouse_id: Optional[int] = None
    notes: Optional[str] = None
    user_id: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class StockLevel(BaseModel):
    id: int
    product_id: int
    warehouse_id: int
    quantity: int

    model_config = ConfigDict(from_attributes=True)


class LowStockProduct(BaseModel):
    product_id: int
    sku: str
    name: str
    total_quantity: int
    reorder_level: int
