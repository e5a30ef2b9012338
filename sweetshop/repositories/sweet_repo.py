# ===================================
# sweetshop/repositories/sweet_repo.py
# ===================================
from decimal import Decimal
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import select, update, delete, func, and_
from sqlalchemy.exc import DataError

from sweetshop.models.sweet import MAX_QUANTITY, Sweet


class SweetRepository:
    """Repository pour la gestion de l'inventaire des confiseries"""

    def __init__(self, db: Session):
        self.db = db

    def get_sweet_by_id(self, sweet_id: int) -> Optional[Sweet]:
        """Récupérer une confiserie par son ID (toujours relue depuis la base)"""
        return self.db.scalar(
            select(Sweet)
            .where(Sweet.id == sweet_id)
            .execution_options(populate_existing=True)
        )

    def get_sweets(self) -> List[Sweet]:
        """Récupérer toutes les confiseries, dans l'ordre natif de la base"""
        return list(self.db.scalars(select(Sweet)))

    def search_sweets(self, name: Optional[str] = None,
                      category: Optional[str] = None,
                      min_price: Optional[Decimal] = None,
                      max_price: Optional[Decimal] = None) -> List[Sweet]:
        """Rechercher des confiseries, les filtres fournis sont combinés (ET)"""
        query = select(Sweet)

        # Filtres
        conditions = []

        if name:
            conditions.append(Sweet.name.icontains(name, autoescape=True))

        if category:
            conditions.append(func.lower(Sweet.category) == category.lower())

        if min_price is not None:
            conditions.append(Sweet.price >= min_price)

        if max_price is not None:
            conditions.append(Sweet.price <= max_price)

        if conditions:
            query = query.where(and_(*conditions))

        return list(self.db.scalars(query))

    def create_sweet(self, sweet_data: dict) -> Sweet:
        """Créer une nouvelle confiserie"""
        sweet = Sweet(**sweet_data)
        self.db.add(sweet)
        self._commit()
        self.db.refresh(sweet)
        return sweet

    def update_sweet(self, sweet_id: int, update_data: dict) -> Optional[Sweet]:
        """Mettre à jour les champs fournis, les autres conservent leur valeur"""
        sweet = self.get_sweet_by_id(sweet_id)
        if not sweet:
            return None

        for field, value in update_data.items():
            if hasattr(sweet, field) and value is not None:
                setattr(sweet, field, value)

        self._commit()
        self.db.refresh(sweet)
        return sweet

    def delete_sweet(self, sweet_id: int) -> bool:
        """Supprimer une confiserie, False si aucune ligne n'a été supprimée"""
        result = self.db.execute(delete(Sweet).where(Sweet.id == sweet_id))
        self.db.commit()
        return result.rowcount > 0

    def decrement_quantity(self, sweet_id: int, quantity: int) -> Optional[Sweet]:
        """
        Décrément conditionnel en une seule instruction :
        UPDATE sweets SET quantity = quantity - :q WHERE id = :id AND quantity >= :q

        Retourne la confiserie mise à jour, ou None si aucune ligne n'a été
        touchée (confiserie absente ou stock insuffisant).
        """
        result = self._execute(
            update(Sweet)
            .where(Sweet.id == sweet_id, Sweet.quantity >= quantity)
            .values(quantity=Sweet.quantity - quantity)
            .execution_options(synchronize_session=False)
        )
        return self._finish_quantity_update(sweet_id, result.rowcount)

    def increment_quantity(self, sweet_id: int, quantity: int) -> Optional[Sweet]:
        """
        Incrément atomique du stock, plafonné à MAX_QUANTITY.
        None si la confiserie n'existe pas ou si le plafond serait dépassé.
        """
        result = self._execute(
            update(Sweet)
            .where(Sweet.id == sweet_id, Sweet.quantity <= MAX_QUANTITY - quantity)
            .values(quantity=Sweet.quantity + quantity)
            .execution_options(synchronize_session=False)
        )
        return self._finish_quantity_update(sweet_id, result.rowcount)

    def _finish_quantity_update(self, sweet_id: int, rowcount: int) -> Optional[Sweet]:
        if rowcount == 0:
            self.db.rollback()
            return None

        # Relecture dans la même transaction avant de valider
        sweet = self.get_sweet_by_id(sweet_id)
        self._commit()
        self.db.refresh(sweet)
        return sweet

    def _execute(self, statement):
        """
        Une valeur hors des bornes des colonnes remonte en DataError
        (PostgreSQL) ou OverflowError (SQLite) après annulation.
        """
        try:
            return self.db.execute(statement)
        except (DataError, OverflowError):
            self.db.rollback()
            raise

    def _commit(self) -> None:
        try:
            self.db.commit()
        except (DataError, OverflowError):
            self.db.rollback()
            raise
