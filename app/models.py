# app/models.py
from pydantic import BaseModel, computed_field
from typing import Optional, List


class Category(BaseModel):
    id: str
    name: str
    description: Optional[str] = None

    @computed_field
    @property
    def url(self) -> str:
        return f"/category/{self.id}"


class CategoryChoice(Category):
    # category offered in an item form's selection control
    checked: bool = False


class ItemSummary(BaseModel):
    """Item projected to name and description."""
    id: str
    name: str
    description: Optional[str] = None

    @computed_field
    @property
    def url(self) -> str:
        return f"/item/{self.id}"


class Item(ItemSummary):
    price: float
    stock: int
    category: List[str] = []


class ItemListing(ItemSummary):
    """Projected item with its category references populated."""
    category: List[Category] = []


class ItemDetail(ItemSummary):
    price: float
    stock: int
    category: List[Category] = []
