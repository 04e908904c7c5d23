"""Domain models for shelf labels."""

from shelfmarket.model.shelf_label import ShelfLabel

__all__ = ["ShelfLabel"]
