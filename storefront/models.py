from typing import List, Literal, Optional

from pydantic import BaseModel

class Product(BaseModel):
    id: str
    name: str
    description: Optional[str] = ""
    price: float
    category: str
    stock: int = 0
    isFeatured: bool = False
    image: Optional[str] = ""
    createdAt: Optional[str] = None

class OrderItem(BaseModel):
    productId: str
    name: str
    price: float
    quantity: int

class Order(BaseModel):
    id: str
    name: str
    email: str
    phone: str
    address: Optional[str] = None
    paymentMethod: str
    total: float
    status: Literal["pending", "processing", "completed", "cancelled"]
    createdAt: str
    items: List[OrderItem]

class ProductCreated(BaseModel):
    message: str
    product: Product

class OrderCreated(BaseModel):
    message: str
    order: Order
