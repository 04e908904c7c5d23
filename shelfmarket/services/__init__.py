"""Application services built on the barcode engine."""

from shelfmarket.services.label_service import LabelResult, LabelService

__all__ = ["LabelResult", "LabelService"]
