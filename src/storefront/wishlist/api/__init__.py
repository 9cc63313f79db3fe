"""Wishlist API package."""

from storefront.wishlist.api.routes import wishlist_router

__all__ = ["wishlist_router"]
