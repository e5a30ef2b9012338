# ===================================
# sweetshop/models/sweet.py
# ===================================
from decimal import Decimal

from sqlalchemy import Column, Integer, String, DateTime, Numeric, CheckConstraint
from sqlalchemy.sql import func

from sweetshop.core.database import Base

# Bornes des colonnes quantity (Integer) et price (Numeric(10, 2))
MAX_QUANTITY = 2**31 - 1
PRICE_SCALE = 2
MAX_PRICE = Decimal("99999999.99")


class Sweet(Base):
    __tablename__ = "sweets"
    __table_args__ = (
        CheckConstraint('quantity >= 0', name='check_sweet_quantity_positive'),
        CheckConstraint('price >= 0', name='check_sweet_price_positive'),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    category = Column(String, nullable=False, index=True)

    price = Column(Numeric(10, PRICE_SCALE), nullable=False)
    quantity = Column(Integer, default=0, nullable=False)  # Stock disponible

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<Sweet(id={self.id}, name='{self.name}', qty={self.quantity})>"
