"""Pydantic request/response schemas for the Catalogue API."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import Field

from storefront.catalogue.category import Category
from storefront.catalogue.views import ProductView
from storefront.shared.schemas import ApiModel

# --- Category Schemas ---


class CreateCategoryRequest(ApiModel):
    model_config = {
        "json_schema_extra": {
            "examples": [{"name": "Electronics", "description": "Devices, gadgets and accessories", "parentId": None}]
        }
    }

    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = None
    parent_id: UUID | None = None


class UpdateCategoryRequest(ApiModel):
    model_config = {"json_schema_extra": {"examples": [{"name": "Consumer Electronics"}]}}

    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = None
    parent_id: UUID | None = None


class CategoryResponse(ApiModel):
    id: UUID
    name: str
    description: str | None = None
    parent_id: UUID | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_category(cls, category: Category) -> CategoryResponse:
        return cls(
            id=category.id,
            name=category.name,
            description=category.description,
            parent_id=category.parent_id,
            created_at=category.created_at,
            updated_at=category.updated_at,
        )


# --- Product Schemas ---


class CreateProductRequest(ApiModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "sku": "TSHIRT-BLK-M",
                    "name": "Classic Black T-Shirt",
                    "description": "Premium cotton crew-neck tee in black.",
                    "price": 29.99,
                    "stockQuantity": 120,
                    "categoryId": None,
                    "images": ["https://cdn.example.com/tshirt-blk-front.jpg"],
                }
            ]
        }
    }

    sku: str = Field(..., min_length=1, max_length=64)
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    price: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    stock_quantity: int = Field(0, ge=0)
    category_id: UUID | None = None
    is_active: bool = True
    images: list[str] = Field(default_factory=list)


class UpdateProductRequest(ApiModel):
    model_config = {"json_schema_extra": {"examples": [{"price": 24.99, "isActive": True}]}}

    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    price: Decimal | None = Field(None, ge=0, max_digits=12, decimal_places=2)
    category_id: UUID | None = None
    is_active: bool | None = None
    images: list[str] | None = None


class AdjustStockRequest(ApiModel):
    model_config = {"json_schema_extra": {"examples": [{"delta": 25}, {"delta": -3}]}}

    delta: int


class ProductResponse(ApiModel):
    id: UUID
    sku: str
    name: str
    description: str | None = None
    price: float
    stock_quantity: int
    in_stock: bool
    is_active: bool
    category_id: UUID | None = None
    category_name: str | None = None
    images: list[str]
    primary_image: str | None = None
    average_rating: float | None = None
    review_count: int = 0
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_view(cls, view: ProductView) -> ProductResponse:
        product = view.product
        return cls(
            id=product.id,
            sku=product.sku,
            name=product.name,
            description=product.description,
            price=float(product.price),
            stock_quantity=product.stock_quantity,
            in_stock=product.in_stock,
            is_active=product.is_active,
            category_id=product.category_id,
            category_name=view.category_name,
            images=list(product.images),
            primary_image=product.primary_image,
            average_rating=view.average_rating,
            review_count=view.review_count,
            created_at=product.created_at,
            updated_at=product.updated_at,
        )
