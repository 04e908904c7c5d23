# -*- coding: utf-8 -*-
"""
RU: Формирование и проверка кода EAN-13 из номера полки и цены.
EN: EAN-13 payload composition, check digit and validation for shelf labels.

The 12 data digits are the shelf number (left, zero padded) followed by the
price in cents (right, zero padded); the 13th digit is the standard
EAN/UPC weighted mod-10 check digit.

Example:
    >>> build_ean13("123", Decimal("4.56"))
    '0001230004561'
    >>> split_ean13("0001230004561")
    ('123', Decimal('4.56'))
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal, DecimalException, InvalidOperation
from typing import Final, Optional, Tuple, Union

from shelfmarket.barcodegen.exceptions import Ean13Error
from shelfmarket.config import (
    DATA_LENGTH,
    DEFAULT_PRICE_DIGITS,
    DEFAULT_SHELF_DIGITS,
    EAN13_LENGTH,
)

logger = logging.getLogger(__name__)

__all__ = [
    "PriceLike",
    "compose_data12",
    "compute_check_digit",
    "build_ean13",
    "validate_ean13",
    "is_valid_ean13",
    "split_ean13",
    "format_price_da",
]

PriceLike = Union[Decimal, int, float, str]

_ASCII_DIGITS: Final[frozenset[str]] = frozenset("0123456789")
_CENTS: Final[Decimal] = Decimal("0.01")


def _is_ascii_digits(value: str) -> bool:
    # str.isdigit() also accepts superscripts and other Unicode digits
    return bool(value) and all(ch in _ASCII_DIGITS for ch in value)


def _check_widths(shelf_width: int, price_width: int) -> None:
    if shelf_width < 1 or price_width < 1 or shelf_width + price_width != DATA_LENGTH:
        raise Ean13Error(
            f"digit widths must be >= 1 and sum to {DATA_LENGTH} "
            f"(got shelf={shelf_width}, price={price_width})"
        )


def _normalize_digits(raw: Optional[str]) -> str:
    if raw is None:
        return ""
    return "".join(ch for ch in str(raw) if ch in _ASCII_DIGITS)


def _to_cents(price: PriceLike, price_width: int) -> str:
    """Price -> absolute cent count as decimal text (half away from zero)."""
    try:
        value = price if isinstance(price, Decimal) else Decimal(str(price))
    except (InvalidOperation, ValueError, TypeError) as e:
        raise Ean13Error(f"Price is not a number: {price!r}") from e
    if not value.is_finite():
        raise Ean13Error(f"Price must be finite, got {price!r}")
    overflow = Ean13Error(f"Price (in cents) has more than {price_width} digits.")
    try:
        cents = (value * 100).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    except DecimalException as e:
        # cent count exceeds the decimal context precision
        raise overflow from e
    # Sign is dropped: -4.56 and 4.56 encode identically.
    text = str(abs(int(cents)))
    if len(text) > price_width:
        raise overflow
    return text


def compose_data12(
    shelf_digits: Optional[str],
    price: PriceLike,
    shelf_width: int = DEFAULT_SHELF_DIGITS,
    price_width: int = DEFAULT_PRICE_DIGITS,
) -> str:
    """
    Compose the 12 data digits: zero-padded shelf digits + zero-padded cents.

    Non-digit characters in ``shelf_digits`` are discarded; an empty result
    counts as shelf "0".

    Args:
        shelf_digits: Shelf number text (e.g. "A12-3").
        price: Price in currency units; rounded half away from zero to cents.
        shelf_width: Digits reserved for the shelf segment.
        price_width: Digits reserved for the price segment.

    Returns:
        12-character digit string.

    Raises:
        Ean13Error: Bad widths, unparsable price, or a segment overflow.
    """
    _check_widths(shelf_width, price_width)

    shelf = _normalize_digits(shelf_digits) or "0"
    if len(shelf) > shelf_width:
        raise Ean13Error(f"Shelf number has more than {shelf_width} digits.")
    cents = _to_cents(price, price_width)

    data12 = shelf.rjust(shelf_width, "0") + cents.rjust(price_width, "0")
    logger.debug("Composed data12=%s from shelf=%r price=%r", data12, shelf_digits, price)
    return data12


def compute_check_digit(data12: str) -> int:
    """
    EAN-13 check digit for 12 data digits.

    Digits at odd 0-based positions carry weight 3, the others weight 1;
    the check digit brings the weighted sum to a multiple of 10.

    Raises:
        Ean13Error: If ``data12`` is not exactly 12 ASCII digits.

    Example:
        >>> compute_check_digit("590123412345")
        7
    """
    if not isinstance(data12, str) or len(data12) != DATA_LENGTH or not _is_ascii_digits(data12):
        raise Ean13Error("data12 must be exactly 12 digits.")
    total = sum(int(d) * (3 if i % 2 else 1) for i, d in enumerate(data12))
    return (10 - total % 10) % 10


def build_ean13(
    shelf_digits: Optional[str],
    price: PriceLike,
    shelf_width: int = DEFAULT_SHELF_DIGITS,
    price_width: int = DEFAULT_PRICE_DIGITS,
) -> str:
    """Compose the payload and append its check digit (13 digits)."""
    data12 = compose_data12(shelf_digits, price, shelf_width, price_width)
    return f"{data12}{compute_check_digit(data12)}"


def validate_ean13(code: str) -> None:
    """
    Validate a complete EAN-13 code.

    Raises:
        Ean13Error: Wrong length, non-digit characters or check digit mismatch.
    """
    if not isinstance(code, str) or len(code) != EAN13_LENGTH or not _is_ascii_digits(code):
        raise Ean13Error("ean13 must be exactly 13 digits.")
    if compute_check_digit(code[:DATA_LENGTH]) != int(code[DATA_LENGTH]):
        raise Ean13Error("Invalid EAN-13: check digit mismatch.")


def is_valid_ean13(code: str) -> bool:
    try:
        validate_ean13(code)
    except Ean13Error:
        return False
    return True


def split_ean13(code: str, shelf_width: int = DEFAULT_SHELF_DIGITS) -> Tuple[str, Decimal]:
    """
    Decode a shelf label code back into its parts.

    Returns:
        (shelf number without leading zeros or "0", price with two decimals)

    Raises:
        Ean13Error: If the code is invalid or ``shelf_width`` is out of range.
    """
    validate_ean13(code)
    _check_widths(shelf_width, DATA_LENGTH - shelf_width)
    shelf = code[:shelf_width].lstrip("0") or "0"
    price = (Decimal(int(code[shelf_width:DATA_LENGTH])) / 100).quantize(_CENTS)
    return shelf, price


def format_price_da(price: Decimal) -> str:
    """Danish price text: two decimals, comma separator ("12,50")."""
    return f"{price:.2f}".replace(".", ",")
