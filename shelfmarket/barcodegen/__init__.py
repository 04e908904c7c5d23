"""
barcodegen

EAN-13 shelf label codes: payload composition, check digit, validation,
module encoding and PNG rendering.

Public API:
    - compose_data12 / compute_check_digit / build_ean13: payload and checksum
    - validate_ean13 / is_valid_ean13 / split_ean13: validation and decoding
    - encode_modules: 95-module bar pattern
    - compute_label_geometry: mm/dpi -> (scale, bar_height)
    - Ean13Renderer: Pillow renderer (image, PNG, physical size, async)
    - Ean13Error: the single error kind (subclass of ValueError)

Примеры:
    >>> from shelfmarket.barcodegen import Ean13Renderer, build_ean13
    >>> code = build_ean13("12", "4.56")
    >>> png = Ean13Renderer().render_png(code, scale=2, bar_height=40)

Зависимости:
    Pillow
"""

from shelfmarket.barcodegen.ean13_encoder import (
    build_ean13,
    compose_data12,
    compute_check_digit,
    format_price_da,
    is_valid_ean13,
    split_ean13,
    validate_ean13,
)
from shelfmarket.barcodegen.ean13_renderer import (
    Ean13Renderer,
    compute_label_geometry,
    encode_modules,
)
from shelfmarket.barcodegen.exceptions import Ean13Error
from shelfmarket.barcodegen.fonts import FontMatch, resolve_font

__all__ = [
    "compose_data12",
    "compute_check_digit",
    "build_ean13",
    "validate_ean13",
    "is_valid_ean13",
    "split_ean13",
    "format_price_da",
    "encode_modules",
    "compute_label_geometry",
    "Ean13Renderer",
    "Ean13Error",
    "FontMatch",
    "resolve_font",
]
