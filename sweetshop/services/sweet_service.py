# ===================================
# sweetshop/services/sweet_service.py
# ===================================

import logging
from contextlib import contextmanager
from decimal import Decimal, InvalidOperation
from typing import Any, List, Optional
from sqlalchemy.exc import DataError
from sqlalchemy.orm import Session

from sweetshop.core.errors import InsufficientStockError, NotFoundError, ValidationError
from sweetshop.models.sweet import MAX_PRICE, MAX_QUANTITY, PRICE_SCALE, Sweet
from sweetshop.repositories.sweet_repo import SweetRepository

logger = logging.getLogger(__name__)

SWEET_FIELDS = ("name", "category", "price", "quantity")


@contextmanager
def _within_column_bounds():
    """Une valeur refusée par les colonnes de la base devient une requête invalide"""
    try:
        yield
    except (DataError, OverflowError) as exc:
        logger.warning("Valeur hors bornes refusée par la base: %s", type(exc).__name__)
        raise ValidationError("Valeur hors limites") from exc


class SweetService:
    """Service pour la logique métier de l'inventaire"""

    def __init__(self, db: Session):
        self.db = db
        self.sweet_repo = SweetRepository(db)

    def create_sweet(self, sweet_data: dict) -> Sweet:
        """Créer une confiserie : nom, catégorie, prix et quantité obligatoires"""
        missing = [field for field in SWEET_FIELDS if sweet_data.get(field) is None]
        if missing or not sweet_data.get("name") or not sweet_data.get("category"):
            raise ValidationError("Champs obligatoires manquants")

        with _within_column_bounds():
            sweet = self.sweet_repo.create_sweet(self._clean_fields(sweet_data))
        logger.info("Confiserie créée id=%s", sweet.id)
        return sweet

    def list_sweets(self) -> List[Sweet]:
        """Toutes les confiseries, sans filtre"""
        return self.sweet_repo.get_sweets()

    def search_sweets(self, name: Optional[str] = None,
                      category: Optional[str] = None,
                      min_price: Any = None,
                      max_price: Any = None) -> List[Sweet]:
        """
        Recherche combinée (ET) :
        - name : sous-chaîne, insensible à la casse
        - category : égalité exacte, insensible à la casse
        - min_price / max_price : bornes incluses, numériques et positives
        Un résultat vide n'est pas une erreur.
        """
        minimum = _parse_price_filter(min_price)
        maximum = _parse_price_filter(max_price)

        if minimum is not None and maximum is not None and minimum > maximum:
            raise ValidationError("Le prix minimum dépasse le prix maximum")

        return self.sweet_repo.search_sweets(
            name=name or None,
            category=category or None,
            min_price=minimum,
            max_price=maximum
        )

    def update_sweet(self, sweet_id: int, update_data: dict) -> Sweet:
        """
        Mettre à jour uniquement les champs fournis.
        Le corps est validé avant la recherche : un corps invalide donne 400
        même pour un identifiant inconnu.
        """
        supplied = {
            field: value for field, value in update_data.items()
            if field in SWEET_FIELDS and value is not None
        }
        for field in ("name", "category"):
            if field in supplied and not supplied[field]:
                raise ValidationError("Champ vide")

        with _within_column_bounds():
            sweet = self.sweet_repo.update_sweet(sweet_id, self._clean_fields(supplied))
        if not sweet:
            raise NotFoundError("Confiserie introuvable")
        return sweet

    def delete_sweet(self, sweet_id: int) -> None:
        """Supprimer une confiserie"""
        if not self.sweet_repo.delete_sweet(sweet_id):
            raise NotFoundError("Confiserie introuvable")
        logger.info("Confiserie supprimée id=%s", sweet_id)

    def purchase_sweet(self, sweet_id: int, quantity: Any) -> Sweet:
        """
        Achat : décrément conditionnel atomique du stock.

        Si aucune ligne n'est touchée, une relecture distingue la confiserie
        absente (404) du stock insuffisant (400). Une demande supérieure à
        MAX_QUANTITY dépasse forcément le stock et n'atteint pas l'UPDATE.
        """
        amount = _parse_positive_quantity(quantity, limit=None)

        if amount <= MAX_QUANTITY:
            with _within_column_bounds():
                sweet = self.sweet_repo.decrement_quantity(sweet_id, amount)
            if sweet is not None:
                return sweet

        if self.sweet_repo.get_sweet_by_id(sweet_id) is None:
            raise NotFoundError("Confiserie introuvable")

        logger.info("Stock insuffisant pour la confiserie id=%s (demande=%s)", sweet_id, amount)
        raise InsufficientStockError()

    def restock_sweet(self, sweet_id: int, quantity: Any) -> Sweet:
        """Réapprovisionnement : incrément atomique du stock, plafonné à MAX_QUANTITY"""
        amount = _parse_positive_quantity(quantity)

        with _within_column_bounds():
            sweet = self.sweet_repo.increment_quantity(sweet_id, amount)
        if sweet is not None:
            return sweet

        if self.sweet_repo.get_sweet_by_id(sweet_id) is None:
            raise NotFoundError("Confiserie introuvable")
        raise ValidationError("Le stock dépasserait la quantité maximale")

    def _clean_fields(self, data: dict) -> dict:
        """Valider les types et bornes des champs fournis"""
        cleaned = {}
        for field in ("name", "category"):
            if field in data:
                if not isinstance(data[field], str):
                    raise ValidationError("Champ texte invalide")
                cleaned[field] = data[field]
        if "price" in data:
            cleaned["price"] = _parse_price(data["price"])
        if "quantity" in data:
            quantity = data["quantity"]
            if not _is_integer(quantity) or not 0 <= quantity <= MAX_QUANTITY:
                raise ValidationError("Quantité invalide")
            cleaned["quantity"] = quantity
        return cleaned


def _is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _parse_positive_quantity(value: Any, limit: Optional[int] = MAX_QUANTITY) -> int:
    if not _is_integer(value) or value <= 0:
        raise ValidationError("La quantité doit être un entier positif")
    if limit is not None and value > limit:
        raise ValidationError("Quantité trop grande")
    return value


def _parse_amount(value: Any) -> Decimal:
    """Nombre décimal fini et positif (int, float, Decimal ou chaîne)"""
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal, str)):
        raise ValidationError("Prix invalide")
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValidationError("Prix invalide")
    if not amount.is_finite() or amount < 0:
        raise ValidationError("Prix invalide")
    return amount


def _parse_price(value: Any) -> Decimal:
    """Prix stockable : au plus MAX_PRICE et PRICE_SCALE décimales, sans arrondi"""
    price = _parse_amount(value)
    if price > MAX_PRICE:
        raise ValidationError("Prix trop élevé")
    if price != price.quantize(Decimal(1).scaleb(-PRICE_SCALE)):
        raise ValidationError("Le prix a trop de décimales")
    return price


def _parse_price_filter(value: Any) -> Optional[Decimal]:
    # Un filtre n'est jamais stocké : seules la finitude et le signe comptent
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return _parse_amount(value)
