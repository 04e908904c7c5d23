# RU: Доменная модель этикетки полки: номер полки, цена и код EAN-13.
# EN: Shelf label domain model: shelf number, price and EAN-13 code, with fail-fast or recorded validation.

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Optional
from uuid import UUID

from shelfmarket.barcodegen.ean13_encoder import (
    build_ean13,
    format_price_da,
    split_ean13,
    validate_ean13,
)
from shelfmarket.barcodegen.exceptions import Ean13Error
from shelfmarket.config import DEFAULT_PRICE_DIGITS, DEFAULT_SHELF_DIGITS

logger = logging.getLogger(__name__)


@dataclass
class ShelfLabel:
    """
    A price label for one shelf.

    ``code`` is filled by :meth:`build` or supplied when the label comes
    from a scanner; :meth:`validate` checks that it matches shelf and price.

    Examples:
        lbl = ShelfLabel(shelf_number="12", price=Decimal("4.56")).build()
        lbl.code            # '0000120004568'
        ShelfLabel.from_code(lbl.code).price   # Decimal('4.56')
    """

    shelf_number: str
    price: Decimal = Decimal("0")
    code: Optional[str] = None
    id: Optional[UUID] = None
    shelf_digits: int = DEFAULT_SHELF_DIGITS
    price_digits: int = DEFAULT_PRICE_DIGITS

    validation_error_message: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def price_display(self) -> str:
        return format_price_da(Decimal(self.price).quantize(Decimal("0.01")))

    def expected_code(self) -> str:
        return build_ean13(self.shelf_number, self.price, self.shelf_digits, self.price_digits)

    def build(self) -> "ShelfLabel":
        """Compute and store the code. Raises Ean13Error on bad input."""
        self.code = self.expected_code()
        logger.debug("ShelfLabel built: shelf=%r code=%s", self.shelf_number, self.code)
        return self

    def validate(self, record_error: bool = False) -> bool:
        """
        Check that ``code`` is a valid EAN-13 for this shelf and price.

        If record_error: on error, sets self.validation_error_message instead of raising.

        Returns: True if ok, False if error (when record_error)
        Raises: Ean13Error if error and not record_error
        """
        try:
            if self.code is None:
                raise Ean13Error("Label has no code; call build() first.")
            validate_ean13(self.code)
            expected = self.expected_code()
            if self.code != expected:
                raise Ean13Error(
                    f"Code {self.code} does not match shelf {self.shelf_number!r} "
                    f"and price {self.price} (expected {expected})."
                )
        except Ean13Error as e:
            if record_error:
                logger.warning("ShelfLabel validation failed: %s", e)
                self.validation_error_message = str(e)
                return False
            raise
        self.validation_error_message = None
        return True

    @classmethod
    def from_code(cls, code: str, shelf_digits: int = DEFAULT_SHELF_DIGITS) -> "ShelfLabel":
        """Decode a scanned code. Raises Ean13Error if the code is invalid."""
        shelf, price = split_ean13(code, shelf_digits)
        return cls(
            shelf_number=shelf,
            price=price,
            code=code,
            shelf_digits=shelf_digits,
            price_digits=len(code) - 1 - shelf_digits,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": str(self.id) if self.id else None,
            "shelf_number": self.shelf_number,
            "price": str(self.price),
            "code": self.code,
        }
