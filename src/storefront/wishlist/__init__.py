"""Wishlist context: products a user has saved for later."""
