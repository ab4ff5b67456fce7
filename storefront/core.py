from datetime import datetime, timezone
from typing import Optional, Dict, Any, List

from pydantic import BaseModel, Field

class ProductIn(BaseModel):
    name: str = Field(min_length=1)
    price: float = Field(ge=0, allow_inf_nan=False)
    category: str = Field(min_length=1)
    description: Optional[str] = ""
    stock: int = Field(default=0, ge=0)
    isFeatured: bool = False
    image: Optional[str] = ""

class OrderItemIn(BaseModel):
    productId: str
    name: str
    price: float = Field(ge=0, allow_inf_nan=False)
    quantity: int = Field(gt=0)

class OrderIn(BaseModel):
    name: str = Field(min_length=1)
    email: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    address: Optional[str] = None
    paymentMethod: str = Field(min_length=1)
    items: List[OrderItemIn] = Field(min_length=1)

def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()

def _make_product_dict(p: ProductIn) -> Dict[str, Any]:
    return {
        "name": p.name.strip(),
        "description": (p.description or "").strip(),
        "price": p.price,
        "category": p.category,
        "stock": p.stock,
        "isFeatured": p.isFeatured,
        "image": p.image or "",
        "createdAt": _now_iso(),
    }

def _make_order_dict(o: OrderIn) -> Dict[str, Any]:
    items = [item.model_dump() for item in o.items]
    return {
        "name": o.name,
        "email": o.email,
        "phone": o.phone,
        "address": o.address,
        "paymentMethod": o.paymentMethod,
        "total": sum(item.price * item.quantity for item in o.items),
        "status": "pending",
        "createdAt": _now_iso(),
        "items": items,
    }
