"""Storefront engine — the application facade the view layer talks to.

A ``Storefront`` owns one shopping session: the domain handle, the cart
it opened, the business rules, and the clock, random source and timers
behind the promotions. Every operation runs inside a domain context,
processes exactly one command synchronously, and then rebuilds the
order summary so listeners always see a summary of fully applied state.

Promotion ticks use the same commands and the same refresh as shopper
actions; the scheduler never writes to the catalogue on its own.
"""

from collections.abc import Callable
from dataclasses import dataclass

from protean.utils.globals import current_domain

from storefront.cart.cart import Cart
from storefront.cart.items import AddItem, ChangeQuantity, ClearCart, RemoveItem, UpdateQuantity
from storefront.cart.management import CreateCart
from storefront.catalogue.ledger import StockLedger
from storefront.catalogue.pricing import (
    ApplyFlashSale,
    ApplySuggestedSale,
    RemoveAllDiscounts,
    RemoveDiscount,
)
from storefront.catalogue.seeding import SeedCatalogue
from storefront.catalogue.snapshot import ProductSnapshot, option_label
from storefront.config import StorefrontSettings
from storefront.domain import storefront
from storefront.promotions.adapters import AsyncioTimerBackend, SystemClock, SystemRandomSource
from storefront.promotions.eligibility import pick_flash_sale_candidate, pick_suggested_sale_candidate
from storefront.promotions.port import Clock, RandomSource, TimerBackend
from storefront.promotions.scheduler import PromotionScheduler
from storefront.summary.projector import CartLineSnapshot, OrderSummary, project_order_summary
from storefront.utils.logging import add_context, clear_context, get_logger

logger = get_logger(__name__)

INSUFFICIENT_STOCK = "insufficient_stock"
FLASH_SALE = "flash_sale"
SUGGESTED_SALE = "suggested_sale"


@dataclass(frozen=True)
class Notice:
    """A message the view layer shows to the shopper as an alert."""

    kind: str
    message: str
    product_id: str | None = None


@dataclass(frozen=True)
class AddItemResult:
    requested: int
    added: int

    @property
    def success(self) -> bool:
        return self.added > 0

    @property
    def partial(self) -> bool:
        return 0 < self.added < self.requested

    def __bool__(self) -> bool:
        return self.success


@dataclass(frozen=True)
class ProductOption:
    product: ProductSnapshot
    label: str

    @property
    def available(self) -> bool:
        return not self.product.is_out_of_stock


class Storefront:
    def __init__(
        self,
        domain=storefront,
        settings: StorefrontSettings | None = None,
        clock: Clock | None = None,
        random_source: RandomSource | None = None,
        timers: TimerBackend | None = None,
    ) -> None:
        self.domain = domain
        self.settings = settings or StorefrontSettings()
        self.clock = clock or SystemClock()
        self.random_source = random_source or SystemRandomSource()
        self.scheduler = PromotionScheduler(
            timers=timers or AsyncioTimerBackend(),
            random_source=self.random_source,
            on_flash_sale_tick=self.run_flash_sale_tick,
            on_suggested_sale_tick=self.run_suggested_sale_tick,
            settings=self.settings.promotions,
        )
        self.cart_id: str | None = None
        self._summary: OrderSummary | None = None
        self._summary_listeners: list[Callable[[OrderSummary], None]] = []
        self._notice_listeners: list[Callable[[Notice], None]] = []

    # -------------------------------------------------------------------
    # Session lifecycle
    # -------------------------------------------------------------------
    def open(self, seed_catalogue: bool = True) -> "Storefront":
        """List the default catalogue (unless already listed) and open a fresh cart."""
        with self.domain.domain_context():
            if seed_catalogue:
                current_domain.process(SeedCatalogue(source="storefront"), asynchronous=False)
            self.cart_id = current_domain.process(CreateCart(), asynchronous=False)
            add_context(cart_id=self.cart_id)
            self._refresh()

        logger.info("Storefront opened", cart_id=self.cart_id)
        return self

    def close(self) -> None:
        self.stop_promotions()
        clear_context()
        logger.info("Storefront closed", cart_id=self.cart_id)

    def __enter__(self) -> "Storefront":
        if self.cart_id is None:
            self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # -------------------------------------------------------------------
    # Listeners
    # -------------------------------------------------------------------
    def add_listener(self, listener: Callable[[OrderSummary], None]) -> None:
        """Call ``listener`` with the new summary after every recomputation."""
        self._summary_listeners.append(listener)

    def add_notice_listener(self, listener: Callable[[Notice], None]) -> None:
        self._notice_listeners.append(listener)

    def remove_notice_listener(self, listener: Callable[[Notice], None]) -> None:
        if listener in self._notice_listeners:
            self._notice_listeners.remove(listener)

    def _notify(self, notice: Notice) -> None:
        logger.info("Notice raised", kind=notice.kind, product_id=notice.product_id)
        for listener in self._notice_listeners:
            listener(notice)

    # -------------------------------------------------------------------
    # Cart operations
    # -------------------------------------------------------------------
    def add_item(self, product_id, quantity: int = 1) -> AddItemResult:
        """Add up to ``quantity`` units. Short stock adds what is left and raises a notice."""
        if quantity <= 0:
            return AddItemResult(requested=quantity, added=0)

        with self.domain.domain_context():
            added = current_domain.process(
                AddItem(cart_id=self.cart_id, product_id=product_id, quantity=quantity),
                asynchronous=False,
            )
            if added < quantity:
                self._insufficient_stock(product_id)
            self._refresh()

        return AddItemResult(requested=quantity, added=added)

    def update_quantity(self, product_id, quantity: int) -> bool:
        """Set a cart line to ``quantity`` units. Zero or less is ignored."""
        if quantity <= 0:
            return False

        with self.domain.domain_context():
            in_cart = self._cart().quantity_of(product_id)
            updated = current_domain.process(
                UpdateQuantity(cart_id=self.cart_id, product_id=product_id, quantity=quantity),
                asynchronous=False,
            )
            if not updated and in_cart:
                self._insufficient_stock(product_id)
            self._refresh()
        return updated

    def change_quantity(self, product_id, delta: int) -> bool:
        """The ± control: move a line by ``delta``, dropping it when it reaches zero."""
        if delta == 0:
            return False

        with self.domain.domain_context():
            in_cart = self._cart().quantity_of(product_id)
            changed = current_domain.process(
                ChangeQuantity(cart_id=self.cart_id, product_id=product_id, delta=delta),
                asynchronous=False,
            )
            if not changed and in_cart and delta > 0:
                self._insufficient_stock(product_id)
            self._refresh()
        return changed

    def remove_item(self, product_id) -> int:
        """Drop a line, returning its units to stock. Returns the units released."""
        with self.domain.domain_context():
            released = current_domain.process(
                RemoveItem(cart_id=self.cart_id, product_id=product_id),
                asynchronous=False,
            )
            self._refresh()
        return released

    def clear_cart(self) -> int:
        with self.domain.domain_context():
            released = current_domain.process(ClearCart(cart_id=self.cart_id), asynchronous=False)
            self._refresh()
        return released

    def _insufficient_stock(self, product_id) -> None:
        product = StockLedger().find_product(product_id)
        self._notify(
            Notice(
                kind=INSUFFICIENT_STOCK,
                message=f"Not enough stock for {product.name}.",
                product_id=str(product_id),
            )
        )

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    def get_order_summary(self) -> OrderSummary:
        if self._summary is None:
            return self.refresh()
        return self._summary

    def refresh(self) -> OrderSummary:
        """Recompute the summary, e.g. after the calendar day changes."""
        with self.domain.domain_context():
            return self._refresh()

    def list_products(self) -> list[ProductSnapshot]:
        with self.domain.domain_context():
            return self._snapshots()

    def product_options(self) -> list[ProductOption]:
        return [ProductOption(product=product, label=option_label(product)) for product in self.list_products()]

    def cart_quantities(self) -> dict[str, int]:
        with self.domain.domain_context():
            return {str(line.product_id): line.quantity for line in self._cart().ordered_lines}

    @property
    def last_selected_product_id(self) -> str | None:
        with self.domain.domain_context():
            selected = self._cart().last_selected_product_id
        return str(selected) if selected else None

    def _cart(self) -> Cart:
        return current_domain.repository_for(Cart).get(self.cart_id)

    def _snapshots(self) -> list[ProductSnapshot]:
        return [ProductSnapshot.from_product(product) for product in StockLedger().list_products()]

    def _refresh(self) -> OrderSummary:
        lines = [CartLineSnapshot.from_line(line) for line in self._cart().lines]
        self._summary = project_order_summary(
            products=self._snapshots(),
            cart_lines=lines,
            is_tuesday=self.clock.is_tuesday(),
            settings=self.settings,
        )
        for listener in self._summary_listeners:
            listener(self._summary)
        return self._summary

    # -------------------------------------------------------------------
    # Promotional pricing
    # -------------------------------------------------------------------
    def apply_flash_sale(self, product_id) -> int:
        """Put a product on flash sale. Returns its new price."""
        rate = self.settings.promotions.flash_sale_rate
        with self.domain.domain_context():
            price = current_domain.process(ApplyFlashSale(product_id=product_id, rate=rate), asynchronous=False)
            product = StockLedger().find_product(product_id)
            self._notify(
                Notice(
                    kind=FLASH_SALE,
                    message=f"⚡ Flash sale! {product.name} is {round(rate * 100)}% off!",
                    product_id=str(product_id),
                )
            )
            self._refresh()
        return price

    def apply_suggested_sale(self, product_id) -> int:
        """Take the suggested-sale rate off a product's current price. Returns its new price."""
        rate = self.settings.promotions.suggested_sale_rate
        with self.domain.domain_context():
            price = current_domain.process(
                ApplySuggestedSale(product_id=product_id, rate=rate),
                asynchronous=False,
            )
            product = StockLedger().find_product(product_id)
            self._notify(
                Notice(
                    kind=SUGGESTED_SALE,
                    message=f"💝 How about {product.name}? Buy now for an extra {round(rate * 100)}% off!",
                    product_id=str(product_id),
                )
            )
            self._refresh()
        return price

    def remove_discount(self, product_id) -> int:
        with self.domain.domain_context():
            price = current_domain.process(RemoveDiscount(product_id=product_id), asynchronous=False)
            self._refresh()
        return price

    def remove_all_discounts(self) -> int:
        """Restore every product's original price. Returns how many were on sale."""
        with self.domain.domain_context():
            restored = current_domain.process(RemoveAllDiscounts(), asynchronous=False)
            self._refresh()
        return restored

    # -------------------------------------------------------------------
    # Promotions
    # -------------------------------------------------------------------
    @property
    def promotions_running(self) -> bool:
        return self.scheduler.is_running

    def start_promotions(self) -> None:
        """Start (or restart) the flash-sale and suggested-sale timers."""
        self.scheduler.start()

    def stop_promotions(self) -> None:
        self.scheduler.stop()

    def run_flash_sale_tick(self) -> str | None:
        """One flash-sale tick. Returns the discounted product id, or None if the tick did nothing."""
        products = self.list_products()
        candidate = pick_flash_sale_candidate(products, self.random_source.random())
        if candidate is None:
            logger.debug("Flash sale skipped")
            return None

        self.apply_flash_sale(candidate.id)
        return candidate.id

    def run_suggested_sale_tick(self) -> str | None:
        """One suggested-sale tick. Returns the discounted product id, or None if the tick did nothing."""
        products = self.list_products()
        candidate = pick_suggested_sale_candidate(products, self.last_selected_product_id)
        if candidate is None:
            logger.debug("Suggested sale skipped")
            return None

        self.apply_suggested_sale(candidate.id)
        return candidate.id
