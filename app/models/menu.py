"""Menu models loaded from the restaurant spreadsheet."""
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict

from app.models.opening_hours import OpeningHour


class Category(BaseModel):
    """A menu section, e.g. "Lanches" or "Bebidas"."""
    id: str
    name: str
    slug: str
    order: int = 0


class Product(BaseModel):
    """A single menu item."""
    id: str
    name: str
    slug: str
    description: str = ""
    image_url: str = Field(default="", alias="imageUrl")
    price: float = 0.0
    category_id: str = Field(alias="categoryId")
    available: bool = True
    tags: list[str] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)


class RestaurantConfig(BaseModel):
    """Key/value settings from the "configuracao" sheet."""
    restaurant_name: str = Field(default="Meu Restaurante", alias="restaurantName")
    logo_url: str = Field(default="/logo.svg", alias="logoUrl")
    whatsapp_number: str = Field(default="", alias="whatsappNumber")
    timezone: str = "America/Sao_Paulo"
    currency: str = "BRL"
    accent_color: Optional[str] = Field(default=None, alias="accentColor")
    welcome_message: Optional[str] = Field(default=None, alias="welcomeMessage")

    model_config = ConfigDict(populate_by_name=True)


class MenuData(BaseModel):
    """Everything the menu page needs, as cached in Redis.

    Stored in Redis at key: menu_data_v1
    """
    categories: list[Category] = Field(default_factory=list)
    products: list[Product] = Field(default_factory=list)
    opening_hours: list[OpeningHour] = Field(default_factory=list, alias="openingHours")
    config: RestaurantConfig = Field(default_factory=RestaurantConfig)
    loaded_at: datetime = Field(default_factory=datetime.utcnow, alias="loadedAt")

    model_config = ConfigDict(populate_by_name=True)

    def get_product(self, product_id: str) -> Optional[Product]:
        for product in self.products:
            if product.id == product_id:
                return product
        return None
