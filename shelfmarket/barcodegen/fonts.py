# -*- coding: utf-8 -*-
"""
RU: Подбор шрифтов для подписей этикетки по списку предпочтений.
EN: Font lookup for label text along an ordered family preference list.

Pillow loads TrueType fonts by file name (searching the platform font
directories), so each family maps to the file names it ships under on
Windows, Linux and macOS. Resolution tries every family in order and falls
back to Pillow's built-in font.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Dict, Final, Optional, Sequence, Tuple, Union

from PIL import ImageFont
from PIL.ImageFont import FreeTypeFont
from PIL.ImageFont import ImageFont as PILImageFont

logger = logging.getLogger(__name__)

__all__ = [
    "FontMatch",
    "ResolvedFont",
    "resolve_font",
    "clear_font_cache",
]

AnyFont = Union[FreeTypeFont, PILImageFont]

# family -> (regular files, bold files)
_FONT_FILES: Final[Dict[str, Tuple[Tuple[str, ...], Tuple[str, ...]]]] = {
    "Segoe UI": (("segoeui.ttf",), ("segoeuib.ttf",)),
    "Arial": (("arial.ttf", "Arial.ttf"), ("arialbd.ttf", "Arial Bold.ttf")),
    "Liberation Sans": (("LiberationSans-Regular.ttf",), ("LiberationSans-Bold.ttf",)),
    "DejaVu Sans": (("DejaVuSans.ttf",), ("DejaVuSans-Bold.ttf",)),
    "Noto Sans": (("NotoSans-Regular.ttf",), ("NotoSans-Bold.ttf",)),
    "Ubuntu": (("Ubuntu-R.ttf",), ("Ubuntu-B.ttf",)),
}

# Probe size; the face is re-opened at the requested size on use.
_PROBE_SIZE: Final[int] = 12


class FontMatch(str, Enum):
    """How a font request was satisfied."""

    EXACT = "exact"  # first preferred family
    FALLBACK = "fallback"  # a later family in the chain
    DEFAULT = "default"  # Pillow built-in font


@dataclass(frozen=True)
class ResolvedFont:
    """A font object plus where it came from.

    ``bold`` is True only when an actual bold face was loaded.
    """

    font: AnyFont
    family: Optional[str]
    match: FontMatch
    bold: bool

    def metrics(self) -> Tuple[int, int]:
        """(ascent, descent) in pixels, both non-negative."""
        if isinstance(self.font, FreeTypeFont):
            ascent, descent = self.font.getmetrics()
            return ascent, descent
        # Legacy bitmap fonts carry no metrics table; use the glyph box.
        bbox = self.font.getbbox("Ag")
        return int(bbox[3]), 0


def _candidate_files(family: str, bold: bool) -> Tuple[str, ...]:
    regular, bold_files = _FONT_FILES.get(family, ((f"{family}.ttf",), (f"{family} Bold.ttf",)))
    return bold_files if bold else regular


@lru_cache(maxsize=64)
def _locate(families: Tuple[str, ...], bold: bool) -> Optional[Tuple[int, str, str]]:
    """Return (index, family, file) of the first loadable face, or None."""
    for index, family in enumerate(families):
        for filename in _candidate_files(family, bold):
            try:
                ImageFont.truetype(filename, _PROBE_SIZE)
            except OSError:
                continue
            return index, family, filename
    return None


def clear_font_cache() -> None:
    """Forget located font files (e.g. after installing fonts)."""
    _locate.cache_clear()


def _load_default(size: int) -> AnyFont:
    return ImageFont.load_default(size=size)


def resolve_font(families: Sequence[str], size: int, bold: bool = False) -> ResolvedFont:
    """
    Open the first available font from ``families`` at ``size`` pixels.

    For ``bold=True`` the bold chain is searched first; when no bold face
    exists anywhere, the regular face of the same chain is used instead.

    Args:
        families: Ordered family names, most preferred first.
        size: Font size in pixels.
        bold: Request a bold face.

    Returns:
        ResolvedFont with a fresh font object (not shared between calls).
    """
    chain = tuple(families)
    located = _locate(chain, bold)
    got_bold = bold and located is not None
    if located is None and bold:
        logger.debug("No bold face in %r; reusing regular face", chain)
        located = _locate(chain, False)

    if located is None:
        logger.warning("None of the fonts %r found; using Pillow default font", chain)
        return ResolvedFont(font=_load_default(size), family=None, match=FontMatch.DEFAULT, bold=False)

    index, family, filename = located
    match = FontMatch.EXACT if index == 0 else FontMatch.FALLBACK
    if match is FontMatch.FALLBACK:
        logger.debug("Font %r unavailable; using fallback %r", chain[0], family)
    return ResolvedFont(
        font=ImageFont.truetype(filename, size),
        family=family,
        match=match,
        bold=got_bold,
    )
