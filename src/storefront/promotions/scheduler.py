"""Promotion scheduler — lifecycle of the flash-sale and suggested-sale timers.

The scheduler only decides *when* a tick happens. What a tick does is
supplied by the owner as a callback, so that promotions go through the
same commands and recomputation as any shopper action.
"""

from collections.abc import Callable

import structlog

from storefront.config import PromotionSettings
from storefront.promotions.port import RandomSource, TimerBackend, TimerHandle

logger = structlog.get_logger(__name__)


class PromotionScheduler:
    def __init__(
        self,
        timers: TimerBackend,
        random_source: RandomSource,
        on_flash_sale_tick: Callable[[], None],
        on_suggested_sale_tick: Callable[[], None],
        settings: PromotionSettings | None = None,
    ) -> None:
        self.timers = timers
        self.random_source = random_source
        self.on_flash_sale_tick = on_flash_sale_tick
        self.on_suggested_sale_tick = on_suggested_sale_tick
        self.settings = settings or PromotionSettings()
        self._handles: list[TimerHandle] = []

    @property
    def is_running(self) -> bool:
        return any(handle.active for handle in self._handles)

    def start(self) -> None:
        """Start both timers, cancelling any that are already scheduled."""
        self.stop()

        settings = self.settings
        flash_delay = self.random_source.random() * settings.flash_sale_max_delay
        suggested_delay = self.random_source.random() * settings.suggested_sale_max_delay

        self._handles = [
            self.timers.schedule_repeating(flash_delay, settings.flash_sale_interval, self.on_flash_sale_tick),
            self.timers.schedule_repeating(
                suggested_delay, settings.suggested_sale_interval, self.on_suggested_sale_tick
            ),
        ]
        logger.info(
            "Promotions started",
            flash_sale_delay=round(flash_delay, 3),
            suggested_sale_delay=round(suggested_delay, 3),
        )

    def stop(self) -> None:
        """Cancel both timers. Safe to call when nothing is running."""
        if not self._handles:
            return
        for handle in self._handles:
            handle.cancel()
        self._handles = []
        logger.info("Promotions stopped")

    restart = start
