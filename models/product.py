"""
Product model: one item of the catalog the sessions give access to.
Prices are integer cents.
"""
from sqlalchemy import Boolean, CheckConstraint, Column, Index, Integer, String, Text

from models.base_model import BaseModel, Base


class Product(BaseModel, Base):
    __tablename__ = "products"

    name = Column(String(80), nullable=False)
    description = Column(Text, nullable=False, default="")
    price_cents = Column(Integer, nullable=False, default=0)
    category = Column(String(80), nullable=False)
    image_url = Column(String(500), nullable=True)
    is_available = Column(Boolean, nullable=False, default=True)

    __table_args__ = (
        CheckConstraint("price_cents >= 0", name="ck_products_price_nonnegative"),
        Index("ix_products_category", "category"),
        Index("ix_products_created_at", "created_at"),
    )
