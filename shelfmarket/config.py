# -*- coding: utf-8 -*-
"""
RU: Параметры рендеринга этикеток EAN-13 и пресеты физических размеров.
EN: EAN-13 label rendering parameters and physical label presets.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Dict, Final, Mapping, Tuple

# === EAN-13 LAYOUT ===
EAN13_LENGTH: Final[int] = 13
DATA_LENGTH: Final[int] = 12
MODULE_COUNT: Final[int] = 95
QUIET_ZONE_MODULES: Final[int] = 10  # each side
TOTAL_MODULES: Final[int] = QUIET_ZONE_MODULES + MODULE_COUNT + QUIET_ZONE_MODULES

DEFAULT_SHELF_DIGITS: Final[int] = 6
DEFAULT_PRICE_DIGITS: Final[int] = 6

# === RENDERING (pixels) ===
DEFAULT_SCALE: Final[int] = 3
DEFAULT_BAR_HEIGHT: Final[int] = 60
MIN_SCALE: Final[int] = 1
MIN_BAR_HEIGHT: Final[int] = 10

HEADER_FONT_SIZE: Final[int] = 24
DIGITS_FONT_SIZE: Final[int] = 12
HEADER_PADDING_TOP: Final[int] = 4
HEADER_PADDING_BOTTOM: Final[int] = 6
HEADER_LEFT_MARGIN: Final[int] = 4
DIGITS_GAP: Final[int] = 2  # between bars and digit line
DIGITS_AREA_EXTRA: Final[int] = 6

# === PHYSICAL SIZING ===
MM_PER_INCH: Final[float] = 25.4
MIN_DPI: Final[int] = 72
DEFAULT_DPI: Final[int] = 300
BAR_HEIGHT_RATIO: Final[float] = 0.65
MIN_PHYSICAL_BAR_HEIGHT: Final[int] = 30

# Sans-serif preference chain; the first installed family wins.
DEFAULT_FONT_FAMILIES: Final[Tuple[str, ...]] = (
    "Segoe UI",
    "Arial",
    "Liberation Sans",
    "DejaVu Sans",
    "Noto Sans",
    "Ubuntu",
)


class LabelProfile(str, Enum):
    """Predefined label stock sizes."""

    # 58 mm roll, the most common receipt/label printer width
    THERMAL_58X30 = "thermal_58x30"

    THERMAL_40X30 = "thermal_40x30"

    # A4 sheet labels (3 x 8) on a laser printer
    SHEET_70X37 = "sheet_70x37"


@dataclass(frozen=True)
class LabelSize:
    """
    Physical label size.

    Attributes:
        width_mm: Label width in millimetres.
        height_mm: Label height in millimetres.
        dpi: Printer resolution (dots per inch).

    Examples:
        >>> LabelSize.from_profile(LabelProfile.THERMAL_58X30).width_mm
        58.0
    """

    width_mm: float
    height_mm: float
    dpi: int = DEFAULT_DPI

    def __post_init__(self) -> None:
        if not (math.isfinite(self.width_mm) and math.isfinite(self.height_mm)):
            raise ValueError("Label dimensions must be finite")
        if self.width_mm <= 0 or self.height_mm <= 0:
            raise ValueError("Label dimensions must be > 0")
        if not math.isfinite(self.dpi) or self.dpi < MIN_DPI:
            raise ValueError(f"dpi must be >= {MIN_DPI}")

    @property
    def width_px(self) -> float:
        return self.width_mm / MM_PER_INCH * self.dpi

    @property
    def height_px(self) -> float:
        return self.height_mm / MM_PER_INCH * self.dpi

    @staticmethod
    def from_profile(profile: LabelProfile) -> "LabelSize":
        return _PROFILE_SIZES[profile]


_PROFILE_SIZES: Final[Dict[LabelProfile, LabelSize]] = {
    LabelProfile.THERMAL_58X30: LabelSize(width_mm=58.0, height_mm=30.0, dpi=203),
    LabelProfile.THERMAL_40X30: LabelSize(width_mm=40.0, height_mm=30.0, dpi=203),
    LabelProfile.SHEET_70X37: LabelSize(width_mm=70.0, height_mm=37.0, dpi=300),
}


@dataclass(frozen=True)
class RenderConfig:
    """
    Rendering defaults for shelf labels.

    Attributes:
        scale: Pixels per module.
        bar_height: Bar height in pixels.
        include_numbers: Draw the 13 digits under the bars.
        shelf_digits: Width of the shelf segment in the payload.
        price_digits: Width of the price (cents) segment in the payload.
        header_font_size: Header text size in pixels.
        digits_font_size: Digit line text size in pixels.
        font_families: Ordered font family preference.

    Examples:
        >>> RenderConfig(scale=2).bar_height
        60
        >>> RenderConfig(shelf_digits=5, price_digits=5)
        Traceback (most recent call last):
        ...
        ValueError: shelf_digits + price_digits must equal 12
    """

    scale: int = DEFAULT_SCALE
    bar_height: int = DEFAULT_BAR_HEIGHT
    include_numbers: bool = True
    shelf_digits: int = DEFAULT_SHELF_DIGITS
    price_digits: int = DEFAULT_PRICE_DIGITS
    header_font_size: int = HEADER_FONT_SIZE
    digits_font_size: int = DIGITS_FONT_SIZE
    font_families: Tuple[str, ...] = DEFAULT_FONT_FAMILIES

    def __post_init__(self) -> None:
        """Validate parameters."""
        if self.scale < MIN_SCALE:
            raise ValueError(f"scale must be >= {MIN_SCALE}")
        if self.bar_height < MIN_BAR_HEIGHT:
            raise ValueError(f"bar_height must be >= {MIN_BAR_HEIGHT}")
        if self.shelf_digits < 1 or self.price_digits < 1:
            raise ValueError("shelf_digits and price_digits must be >= 1")
        if self.shelf_digits + self.price_digits != DATA_LENGTH:
            raise ValueError("shelf_digits + price_digits must equal 12")
        if self.header_font_size < 1 or self.digits_font_size < 1:
            raise ValueError("font sizes must be >= 1")
        if not self.font_families:
            raise ValueError("font_families must not be empty")

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "RenderConfig":
        """
        Build a RenderConfig from a ``load_config()`` mapping.

        Unknown keys are ignored; missing keys keep their defaults.
        """
        known = {f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {k: v for k, v in config.items() if k in known}
        if "font_families" in kwargs:
            kwargs["font_families"] = tuple(kwargs["font_families"])
        return cls(**kwargs)
