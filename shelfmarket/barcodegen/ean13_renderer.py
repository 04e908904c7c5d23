# -*- coding: utf-8 -*-
"""
RU: Растеризация EAN-13 для этикеток полок (заголовок, штрихи, цифры).
EN: EAN-13 rasterizer for shelf labels (header line, bars, digit line).

Provides:
- The standard EAN-13 L/G/R/parity tables and the 95-module expansion
- Pixel-exact rendering (scale, bar height) to a Pillow image or PNG bytes
- Physical-size rendering (millimetres + dpi)
- Async wrapper running the render in an executor

Requirements: Pillow
"""

from __future__ import annotations

import asyncio
import logging
import math
import threading
from concurrent.futures import Executor
from io import BytesIO
from itertools import groupby
from typing import Final, List, Optional, Tuple

from PIL import Image, ImageDraw

from shelfmarket.barcodegen.ean13_encoder import (
    format_price_da,
    split_ean13,
    validate_ean13,
)
from shelfmarket.barcodegen.exceptions import Ean13Error
from shelfmarket.barcodegen.fonts import resolve_font
from shelfmarket.config import (
    BAR_HEIGHT_RATIO,
    DEFAULT_DPI,
    DIGITS_AREA_EXTRA,
    DIGITS_GAP,
    HEADER_LEFT_MARGIN,
    HEADER_PADDING_BOTTOM,
    HEADER_PADDING_TOP,
    MIN_BAR_HEIGHT,
    MIN_DPI,
    MIN_PHYSICAL_BAR_HEIGHT,
    MIN_SCALE,
    MM_PER_INCH,
    QUIET_ZONE_MODULES,
    TOTAL_MODULES,
    LabelSize,
    RenderConfig,
)

logger = logging.getLogger(__name__)

__all__ = [
    "L_CODES",
    "G_CODES",
    "R_CODES",
    "PARITY_BY_FIRST_DIGIT",
    "encode_modules",
    "bar_runs",
    "compute_label_geometry",
    "Ean13Renderer",
]

# Standard EAN-13 symbol tables (ISO/IEC 15420), indexed by digit.
L_CODES: Final[Tuple[str, ...]] = (
    "0001101", "0011001", "0010011", "0111101", "0100011",
    "0110001", "0101111", "0111011", "0110111", "0001011",
)
G_CODES: Final[Tuple[str, ...]] = (
    "0100111", "0110011", "0011011", "0100001", "0011101",
    "0111001", "0000101", "0010001", "0001001", "0010111",
)
R_CODES: Final[Tuple[str, ...]] = (
    "1110010", "1100110", "1101100", "1000010", "1011100",
    "1001110", "1010000", "1000100", "1001000", "1110100",
)
# Left-half parity selected by the leading (implicit) digit.
PARITY_BY_FIRST_DIGIT: Final[Tuple[str, ...]] = (
    "LLLLLL", "LLGLGG", "LLGGLG", "LLGGGL", "LGLLGG",
    "LGGLLG", "LGGGLL", "LGLGLG", "LGLGGL", "LGGLGL",
)

START_GUARD: Final[str] = "101"
MIDDLE_GUARD: Final[str] = "01010"
END_GUARD: Final[str] = "101"

_WHITE: Final[Tuple[int, int, int]] = (255, 255, 255)
_BLACK: Final[Tuple[int, int, int]] = (0, 0, 0)


def encode_modules(code: str) -> str:
    """
    Expand a valid EAN-13 code into its 95-module bar pattern.

    Args:
        code: 13-digit EAN-13 code with a correct check digit.

    Returns:
        String of "1" (bar) and "0" (space), always 95 characters.

    Raises:
        Ean13Error: If ``code`` is not a valid EAN-13.

    Example:
        >>> encode_modules("5901234123457")[:10]
        '1010001011'
    """
    validate_ean13(code)
    parity = PARITY_BY_FIRST_DIGIT[int(code[0])]

    parts: List[str] = [START_GUARD]
    for digit, table in zip(code[1:7], parity):
        parts.append((G_CODES if table == "G" else L_CODES)[int(digit)])
    parts.append(MIDDLE_GUARD)
    parts.extend(R_CODES[int(digit)] for digit in code[7:13])
    parts.append(END_GUARD)

    return "".join(parts)


def bar_runs(modules: str) -> List[Tuple[int, int]]:
    """(start, width) in modules of every contiguous run of bars."""
    runs: List[Tuple[int, int]] = []
    pos = 0
    for bit, group in groupby(modules):
        width = sum(1 for _ in group)
        if bit == "1":
            runs.append((pos, width))
        pos += width
    return runs


def compute_label_geometry(width_mm: float, height_mm: float, dpi: int = DEFAULT_DPI) -> Tuple[int, int]:
    """
    Derive (scale, bar_height) in pixels for a physical label.

    The module scale is the largest integer that fits the label width
    (quiet zones included), at least 1. Bars take 65% of the label height,
    at least 30 px.

    Raises:
        Ean13Error: Non-positive or non-finite dimensions, ``dpi`` below 72.
    """
    if not (math.isfinite(width_mm) and math.isfinite(height_mm)) or width_mm <= 0 or height_mm <= 0:
        raise Ean13Error(f"Label dimensions must be > 0 and finite, got {width_mm} x {height_mm} mm.")
    if not math.isfinite(dpi) or dpi < MIN_DPI:
        raise Ean13Error(f"dpi must be >= {MIN_DPI}, got {dpi}")

    width_px = width_mm / MM_PER_INCH * dpi
    height_px = height_mm / MM_PER_INCH * dpi
    scale = max(MIN_SCALE, math.floor(width_px / TOTAL_MODULES))
    bar_height = max(MIN_PHYSICAL_BAR_HEIGHT, round(height_px * BAR_HEIGHT_RATIO))
    return scale, bar_height


class Ean13Renderer:
    """
    Renders shelf label barcodes.

    Layout (top to bottom): header "Reol: <shelf>  " + bold
    "Pris <price> kr.", the bars with 10-module quiet zones, and optionally
    the 13 digits centred below. Each call draws on its own canvas, so one
    renderer may be shared between threads.

    Args:
        config: Rendering defaults; ``RenderConfig()`` when omitted.

    Examples:
        >>> png = Ean13Renderer().render_png("5901234123457", scale=2, bar_height=40)
        >>> png[:8]
        b'\\x89PNG\\r\\n\\x1a\\n'
    """

    def __init__(self, config: Optional[RenderConfig] = None) -> None:
        self.config = config or RenderConfig()

    def _check_render_args(self, code: str, scale: int, bar_height: int) -> None:
        try:
            validate_ean13(code)
        except Ean13Error as e:
            logger.error("Refusing to render %r: %s", code, e)
            raise
        if scale < MIN_SCALE:
            logger.error("Invalid scale %r", scale)
            raise Ean13Error(f"scale must be >= {MIN_SCALE}, got {scale}")
        if bar_height < MIN_BAR_HEIGHT:
            logger.error("Invalid bar_height %r", bar_height)
            raise Ean13Error(f"bar_height should be >= {MIN_BAR_HEIGHT}, got {bar_height}")

    def render_image(
        self,
        code: str,
        scale: Optional[int] = None,
        bar_height: Optional[int] = None,
        include_numbers: Optional[bool] = None,
    ) -> Image.Image:
        """
        Draw the label as an RGB Pillow image.

        Args:
            code: Valid 13-digit EAN-13 code.
            scale: Pixels per module (>= 1).
            bar_height: Bar height in pixels (>= 10).
            include_numbers: Draw the digits under the bars.

        Returns:
            Image of width ``115 * scale``.

        Raises:
            Ean13Error: Invalid code or parameters (nothing is drawn).
        """
        cfg = self.config
        scale = cfg.scale if scale is None else scale
        bar_height = cfg.bar_height if bar_height is None else bar_height
        include_numbers = cfg.include_numbers if include_numbers is None else include_numbers
        self._check_render_args(code, scale, bar_height)

        modules = encode_modules(code)
        shelf_display, price = split_ean13(code, cfg.shelf_digits)

        # --- Header metrics (two faces share one baseline)
        normal = resolve_font(cfg.font_families, cfg.header_font_size)
        bold = resolve_font(cfg.font_families, cfg.header_font_size, bold=True)
        n_ascent, n_descent = normal.metrics()
        b_ascent, b_descent = bold.metrics()
        ascent = max(n_ascent, b_ascent)
        line_height = ascent + max(n_descent, b_descent)
        header_height = HEADER_PADDING_TOP + line_height + HEADER_PADDING_BOTTOM

        # --- Digit line
        digits_height = 0
        digits = None
        if include_numbers:
            digits = resolve_font(cfg.font_families, cfg.digits_font_size)
            d_ascent, d_descent = digits.metrics()
            digits_height = math.ceil(d_ascent + d_descent + DIGITS_AREA_EXTRA)

        width = TOTAL_MODULES * scale
        height = header_height + bar_height + digits_height
        img = Image.new("RGB", (width, height), _WHITE)
        draw = ImageDraw.Draw(img)

        # Text is anchored at its ascender line; offset each face to the common baseline.
        baseline = HEADER_PADDING_TOP + ascent
        part1 = f"Reol: {shelf_display}  "
        part2 = f"Pris {format_price_da(price)} kr."
        draw.text((HEADER_LEFT_MARGIN, baseline - n_ascent), part1, font=normal.font, fill=_BLACK)
        part1_width = draw.textlength(part1, font=normal.font)
        draw.text(
            (HEADER_LEFT_MARGIN + part1_width, baseline - b_ascent),
            part2,
            font=bold.font,
            fill=_BLACK,
        )

        # --- Bars, one rectangle per run
        bars_top = header_height
        bars_bottom = bars_top + bar_height - 1
        for start, run in bar_runs(modules):
            x0 = (QUIET_ZONE_MODULES + start) * scale
            draw.rectangle((x0, bars_top, x0 + run * scale - 1, bars_bottom), fill=_BLACK)

        if digits is not None:
            text_width = draw.textlength(code, font=digits.font)
            draw.text(
                ((width - text_width) / 2, bars_top + bar_height + DIGITS_GAP),
                code,
                font=digits.font,
                fill=_BLACK,
            )

        logger.debug("Rendered %s at scale=%d bar_height=%d -> %dx%d", code, scale, bar_height, width, height)
        return img

    def render_png(
        self,
        code: str,
        scale: Optional[int] = None,
        bar_height: Optional[int] = None,
        include_numbers: Optional[bool] = None,
        dpi: Optional[int] = None,
    ) -> bytes:
        """
        Render the label and encode it as PNG.

        Args:
            dpi: Optional resolution stored in the PNG ``pHYs`` chunk.

        Returns:
            PNG file bytes.
        """
        img = self.render_image(code, scale, bar_height, include_numbers)
        buf = BytesIO()
        if dpi is not None:
            img.save(buf, format="PNG", dpi=(dpi, dpi))
        else:
            img.save(buf, format="PNG")
        logger.info("EAN-13 label rendered: %s (%d bytes)", code, buf.getbuffer().nbytes)
        return buf.getvalue()

    def render_png_for_label(
        self,
        code: str,
        width_mm: float,
        height_mm: float,
        dpi: int = DEFAULT_DPI,
        include_numbers: Optional[bool] = None,
    ) -> bytes:
        """
        Render sized for a physical label, e.g. 58 x 30 mm at 203 dpi.

        The module scale is rounded down, so the bars fit the label width
        unless even a 1-pixel module is too wide; leftover width is left to
        the printer.

        Raises:
            Ean13Error: Non-positive size, ``dpi`` < 72 or invalid code.
        """
        scale, bar_height = compute_label_geometry(width_mm, height_mm, dpi)
        return self.render_png(code, scale, bar_height, include_numbers, dpi=dpi)

    def render_label(self, code: str, size: LabelSize, include_numbers: Optional[bool] = None) -> bytes:
        return self.render_png_for_label(code, size.width_mm, size.height_mm, size.dpi, include_numbers)

    async def render_png_async(
        self,
        code: str,
        scale: Optional[int] = None,
        bar_height: Optional[int] = None,
        include_numbers: Optional[bool] = None,
        *,
        cancel_event: Optional[threading.Event] = None,
        executor: Optional[Executor] = None,
    ) -> bytes:
        """
        Async wrapper for render_png (runs in an executor).

        Cancellation is checked before the render starts; a started render
        always completes. Arguments are validated before scheduling.

        Raises:
            asyncio.CancelledError: ``cancel_event`` was set before the work began.
            Ean13Error: Invalid code or parameters.
        """
        if cancel_event is not None and cancel_event.is_set():
            raise asyncio.CancelledError("render cancelled before start")
        self._check_render_args(
            code,
            self.config.scale if scale is None else scale,
            self.config.bar_height if bar_height is None else bar_height,
        )

        def _work() -> Optional[bytes]:
            if cancel_event is not None and cancel_event.is_set():
                return None
            return self.render_png(code, scale, bar_height, include_numbers)

        loop = asyncio.get_running_loop()
        png = await loop.run_in_executor(executor, _work)
        if png is None:
            raise asyncio.CancelledError("render cancelled before start")
        return png
