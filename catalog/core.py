from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from typing import Optional, Dict, Any, List, Union

Number = Union[int, float]

REQUIRED_FIELDS = ("title", "description", "code", "price", "stock")


class ProductIn(BaseModel):
    # Everything is optional here so a missing field is reported by
    # missing_fields() as a 400, not by FastAPI as a 422.
    title: Optional[str] = Field(None, validation_alias=AliasChoices("title", "name"))
    description: Optional[str] = None
    code: Optional[str] = None
    price: Optional[Number] = None
    status: Optional[bool] = None
    stock: Optional[Number] = None
    category: Optional[str] = None
    thumbnails: Optional[List[str]] = None


class ProductPatch(BaseModel):
    model_config = ConfigDict(extra="allow")

    title: Optional[str] = None
    description: Optional[str] = None
    code: Optional[str] = None
    price: Optional[Number] = None
    status: Optional[bool] = None
    stock: Optional[Number] = None
    category: Optional[str] = None
    thumbnails: Optional[List[str]] = None


class RealtimeProductIn(BaseModel):
    title: Optional[str] = Field(None, validation_alias=AliasChoices("name", "title"))
    description: Optional[str] = None
    price: Optional[Number] = None


def missing_fields(payload: ProductIn) -> List[str]:
    return [f for f in REQUIRED_FIELDS if not getattr(payload, f)]


def _numeric_id(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def generate_product_id(products: List[Dict[str, Any]]) -> int:
    """Next id: one past the largest numeric id, skipping any already taken.

    Ids that were rewritten to strings by an update still count, so "7"
    blocks 7 the same way 7 does.
    """
    taken = {n for n in (_numeric_id(p.get("id")) for p in products) if n is not None}
    new_id = max(taken, default=0) + 1
    while new_id in taken:
        new_id += 1
    return new_id


def _make_product_dict(product_id: int, p: ProductIn) -> Dict[str, Any]:
    return {
        "id": product_id,
        "title": p.title,
        "description": p.description,
        "code": p.code,
        "price": p.price,
        "status": p.status if p.status is not None else True,
        "stock": p.stock,
        "category": p.category or "",
        "thumbnails": p.thumbnails or [],
    }


def _make_quick_product_dict(product_id: int, p: RealtimeProductIn) -> Dict[str, Any]:
    # Fields the client left out are not stored at all.
    return {"id": product_id, **p.model_dump(exclude_unset=True)}
