"""Ordering context: shopping carts and customer orders."""
