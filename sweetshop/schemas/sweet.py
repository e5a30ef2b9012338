# ===================================
# sweetshop/schemas/sweet.py
# ===================================

from typing import Any, Optional
from decimal import Decimal
from pydantic import BaseModel


class SweetBase(BaseModel):
    name: Optional[str] = None
    category: Optional[str] = None
    price: Optional[Decimal] = None
    quantity: Optional[int] = None


class SweetCreate(SweetBase):
    pass


class SweetUpdate(SweetBase):
    pass


class StockChange(BaseModel):
    """Corps des requêtes d'achat et de réapprovisionnement"""
    quantity: Any = None


class Sweet(BaseModel):
    id: int
    name: str
    category: str
    price: float
    quantity: int

    class Config:
        from_attributes = True
