"""Pydantic request/response schemas for the Wishlist API."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from storefront.shared.schemas import ApiModel
from storefront.wishlist.management import WishlistEntryView


class AddToWishlistRequest(ApiModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "userId": "0b6f7a8e-3d7c-4b4b-8f3e-2a6d1c9e5f01",
                    "productId": "5f0c7c1e-8a57-4f55-9b0e-3c2f6f1e9a10",
                }
            ]
        }
    }

    user_id: UUID
    product_id: UUID


class WishlistItemResponse(ApiModel):
    id: UUID
    user_id: UUID
    product_id: UUID
    product_name: str | None = None
    product_image: str | None = None
    price: float | None = None
    in_stock: bool = False
    added_at: datetime

    @classmethod
    def from_view(cls, view: WishlistEntryView) -> WishlistItemResponse:
        product = view.product
        return cls(
            id=view.item.id,
            user_id=view.item.user_id,
            product_id=view.item.product_id,
            product_name=product.name if product else None,
            product_image=product.primary_image if product else None,
            price=float(product.price) if product else None,
            in_stock=bool(product and product.is_active and product.in_stock),
            added_at=view.item.added_at,
        )


class WishlistCheckResponse(ApiModel):
    in_wishlist: bool


class ClearWishlistResponse(ApiModel):
    removed: int
