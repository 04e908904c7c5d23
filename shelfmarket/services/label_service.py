"""
Label generation service.

Turns an operator's (shelf number, price) selection into an EAN-13 code
and a PNG label. Input errors never escape as exceptions: they come back
in ``LabelResult.error`` so the caller can show the message and let the
operator correct the input.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, List, Mapping, Optional, Tuple, Union, cast

from shelfmarket.barcodegen.ean13_encoder import PriceLike, build_ean13
from shelfmarket.barcodegen.ean13_renderer import Ean13Renderer
from shelfmarket.barcodegen.exceptions import Ean13Error
from shelfmarket.config import LabelProfile, LabelSize, RenderConfig

logger = logging.getLogger(__name__)

__all__ = ["LabelResult", "LabelService"]


@dataclass(frozen=True)
class LabelResult:
    shelf_number: Optional[int]
    price: PriceLike
    ean: Optional[str] = None
    png: Optional[bytes] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class LabelService:
    """
    Builds and renders shelf labels.

    Args:
        renderer: Renderer to use; its config also supplies the
            shelf/price digit widths.
        label_size: Default physical size for ``generate_for_label``.

    Example:
        >>> service = LabelService()
        >>> result = service.generate(12, Decimal("4.56"))
        >>> result.ean
        '0000120004568'
    """

    def __init__(
        self,
        renderer: Optional[Ean13Renderer] = None,
        label_size: Optional[LabelSize] = None,
    ) -> None:
        self.renderer = renderer or Ean13Renderer()
        self.label_size = label_size or LabelSize.from_profile(LabelProfile.THERMAL_58X30)

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "LabelService":
        """Create a service from a ``load_config()`` mapping."""
        profile = LabelProfile(config.get("label_profile", LabelProfile.THERMAL_58X30.value))
        return cls(Ean13Renderer(RenderConfig.from_config(config)), LabelSize.from_profile(profile))

    @property
    def max_shelf_number(self) -> int:
        return 10 ** self.renderer.config.shelf_digits - 1

    @property
    def max_price(self) -> Decimal:
        return Decimal(10 ** self.renderer.config.price_digits - 1) / 100

    def can_generate(self, shelf_number: Optional[int], price: PriceLike) -> bool:
        """True when both inputs fit the configured payload widths."""
        if not isinstance(shelf_number, int) or isinstance(shelf_number, bool):
            return False
        try:
            value = price if isinstance(price, Decimal) else Decimal(str(price))
        except (InvalidOperation, ValueError):
            return False
        if not value.is_finite():
            return False
        return 0 <= shelf_number <= self.max_shelf_number and Decimal(0) <= value <= self.max_price

    def build_code(self, shelf_number: int, price: PriceLike) -> str:
        cfg = self.renderer.config
        return build_ean13(str(shelf_number), price, cfg.shelf_digits, cfg.price_digits)

    def _rejected(self, shelf_number: Optional[int], price: PriceLike) -> LabelResult:
        msg = (
            f"Shelf number must be 0-{self.max_shelf_number} "
            f"and price 0-{self.max_price} (got {shelf_number!r}, {price!r})."
        )
        logger.warning("Label request rejected: %s", msg)
        return LabelResult(shelf_number, price, error=msg)

    def generate(self, shelf_number: Optional[int], price: PriceLike) -> LabelResult:
        """Build the code and render it with the renderer's pixel defaults."""
        if not self.can_generate(shelf_number, price):
            return self._rejected(shelf_number, price)
        try:
            ean = self.build_code(cast(int, shelf_number), price)
            png = self.renderer.render_png(ean)
        except Ean13Error as e:
            logger.warning("Label generation failed for shelf %r: %s", shelf_number, e)
            return LabelResult(shelf_number, price, error=str(e))
        return LabelResult(shelf_number, price, ean=ean, png=png)

    def generate_for_label(
        self,
        shelf_number: Optional[int],
        price: PriceLike,
        size: Union[LabelSize, LabelProfile, None] = None,
    ) -> LabelResult:
        """Same as ``generate`` but sized for a physical label."""
        if isinstance(size, LabelProfile):
            size = LabelSize.from_profile(size)
        size = size or self.label_size
        if not self.can_generate(shelf_number, price):
            return self._rejected(shelf_number, price)
        try:
            ean = self.build_code(cast(int, shelf_number), price)
            png = self.renderer.render_label(ean, size)
        except Ean13Error as e:
            logger.warning("Label generation failed for shelf %r: %s", shelf_number, e)
            return LabelResult(shelf_number, price, error=str(e))
        return LabelResult(shelf_number, price, ean=ean, png=png)

    def batch_generate(
        self,
        items: Iterable[Tuple[Optional[int], PriceLike]],
        parallel: bool = False,
    ) -> List[LabelResult]:
        """
        Generate labels for many (shelf number, price) pairs.

        Results keep the input order. With ``parallel=True`` the renders run
        on a thread pool; every render owns its canvas, so no locking is needed.
        """
        pairs = list(items)

        def gen(pair: Tuple[Optional[int], PriceLike]) -> LabelResult:
            return self.generate(*pair)

        if parallel:
            with ThreadPoolExecutor() as pool:
                results = list(pool.map(gen, pairs))
        else:
            results = [gen(p) for p in pairs]
        logger.info(
            "Batch label generation complete: %d items, %d failed",
            len(results),
            sum(1 for r in results if not r.ok),
        )
        return results

    async def generate_async(
        self,
        shelf_number: Optional[int],
        price: PriceLike,
        cancel_event: Optional[threading.Event] = None,
    ) -> LabelResult:
        """Async ``generate``; cancellation propagates as asyncio.CancelledError."""
        if not self.can_generate(shelf_number, price):
            return self._rejected(shelf_number, price)
        try:
            ean = self.build_code(cast(int, shelf_number), price)
            png = await self.renderer.render_png_async(ean, cancel_event=cancel_event)
        except Ean13Error as e:
            logger.warning("Label generation failed for shelf %r: %s", shelf_number, e)
            return LabelResult(shelf_number, price, error=str(e))
        return LabelResult(shelf_number, price, ean=ean, png=png)
