"""
Product store: catalog reads for everyone, writes for the admin endpoints.
"""
from __future__ import annotations

from typing import List, Optional, Tuple

from sqlalchemy import func, select

from models.db_storage import DBStorage
from models.product import Product

# Columns an update may touch
MUTABLE_FIELDS = ("name", "description", "price_cents", "category", "image_url", "is_available")


class ProductStore:
    def __init__(self, storage: DBStorage):
        self._storage = storage

    def list(self, page: int, limit: int) -> Tuple[List[Product], int]:
        """One page of products, newest first, plus the total count."""
        with self._storage.transaction() as session:
            total = session.scalar(select(func.count()).select_from(Product))
            rows = session.scalars(
                select(Product)
                .order_by(Product.created_at.desc(), Product.id)
                .offset((page - 1) * limit)
                .limit(limit)
            ).all()
        return list(rows), int(total or 0)

    def get(self, product_id: str) -> Optional[Product]:
        if not product_id:
            return None
        with self._storage.transaction() as session:
            return session.get(Product, product_id)

    def create(self, **fields) -> Product:
        product = Product(**{k: v for k, v in fields.items() if k in MUTABLE_FIELDS})
        with self._storage.transaction() as session:
            session.add(product)
        return product

    def update(self, product_id: str, changes: dict) -> Optional[Product]:
        """Apply a partial update; None when the product does not exist."""
        with self._storage.transaction() as session:
            product = session.get(Product, product_id)
            if product is None:
                return None
            for key, value in changes.items():
                if key in MUTABLE_FIELDS:
                    setattr(product, key, value)
        return product

    def delete(self, product_id: str) -> bool:
        with self._storage.transaction() as session:
            product = session.get(Product, product_id)
            if product is None:
                return False
            session.delete(product)
        return True
