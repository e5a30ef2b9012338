# ===================================
# sweetshop/api/v1/sweets.py
# ===================================
from typing import Any, List, Optional
from fastapi import APIRouter, Depends, Query, status

from sweetshop.api.deps import Principal, get_sweet_service, require_admin, require_any_role
from sweetshop.services.sweet_service import SweetService
from sweetshop.schemas.sweet import Sweet, SweetCreate, SweetUpdate, StockChange

router = APIRouter()


@router.get("", response_model=List[Sweet])
def list_sweets(
    principal: Principal = Depends(require_any_role),
    sweet_service: SweetService = Depends(get_sweet_service)
) -> Any:
    """
    Récupérer toutes les confiseries
    """
    return [Sweet.model_validate(sweet) for sweet in sweet_service.list_sweets()]


@router.get("/search", response_model=List[Sweet])
def search_sweets(
    name: Optional[str] = Query(None, description="Sous-chaîne du nom"),
    category: Optional[str] = Query(None, description="Catégorie exacte"),
    min_price: Optional[str] = Query(None, alias="minPrice", description="Prix minimum"),
    max_price: Optional[str] = Query(None, alias="maxPrice", description="Prix maximum"),
    principal: Principal = Depends(require_any_role),
    sweet_service: SweetService = Depends(get_sweet_service)
) -> Any:
    """
    Rechercher des confiseries (nom, catégorie, fourchette de prix)
    """
    sweets = sweet_service.search_sweets(
        name=name,
        category=category,
        min_price=min_price,
        max_price=max_price
    )
    return [Sweet.model_validate(sweet) for sweet in sweets]


@router.post("", response_model=Sweet, status_code=status.HTTP_201_CREATED)
def create_sweet(
    sweet_data: SweetCreate,
    principal: Principal = Depends(require_admin),
    sweet_service: SweetService = Depends(get_sweet_service)
) -> Any:
    """
    Créer une nouvelle confiserie (Admin)
    """
    sweet = sweet_service.create_sweet(sweet_data.model_dump())
    return Sweet.model_validate(sweet)


@router.put("/{sweet_id}", response_model=Sweet)
def update_sweet(
    sweet_id: int,
    sweet_update: SweetUpdate,
    principal: Principal = Depends(require_admin),
    sweet_service: SweetService = Depends(get_sweet_service)
) -> Any:
    """
    Mettre à jour une confiserie, seuls les champs fournis sont modifiés (Admin)
    """
    sweet = sweet_service.update_sweet(sweet_id, sweet_update.model_dump(exclude_unset=True))
    return Sweet.model_validate(sweet)


@router.delete("/{sweet_id}")
def delete_sweet(
    sweet_id: int,
    principal: Principal = Depends(require_admin),
    sweet_service: SweetService = Depends(get_sweet_service)
) -> Any:
    """
    Supprimer une confiserie (Admin)
    """
    sweet_service.delete_sweet(sweet_id)
    return {}


@router.post("/{sweet_id}/purchase", response_model=Sweet)
def purchase_sweet(
    sweet_id: int,
    stock_change: StockChange,
    principal: Principal = Depends(require_any_role),
    sweet_service: SweetService = Depends(get_sweet_service)
) -> Any:
    """
    Acheter une quantité d'une confiserie
    """
    sweet = sweet_service.purchase_sweet(sweet_id, stock_change.quantity)
    return Sweet.model_validate(sweet)


@router.post("/{sweet_id}/restock", response_model=Sweet)
def restock_sweet(
    sweet_id: int,
    stock_change: StockChange,
    principal: Principal = Depends(require_admin),
    sweet_service: SweetService = Depends(get_sweet_service)
) -> Any:
    """
    Réapprovisionner une confiserie (Admin)
    """
    sweet = sweet_service.restock_sweet(sweet_id, stock_change.quantity)
    return Sweet.model_validate(sweet)
