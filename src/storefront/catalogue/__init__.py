"""Catalogue context: categories and products."""
