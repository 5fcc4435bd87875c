"""Cart aggregate — the single-session cart that holds reserved units.

The cart owns line quantities only. It never touches stock; the command
handlers in ``cart.items`` pair every quantity change with the matching
Stock Ledger reservation or release inside one unit of work.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer

from storefront.cart.events import (
    CartCleared,
    CartCreated,
    CartItemAdded,
    CartItemRemoved,
    CartQuantityUpdated,
)
from storefront.domain import storefront


@storefront.entity(part_of="Cart")
class CartLine:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    sequence = Integer(default=0)  # insertion order for display


@storefront.aggregate
class Cart:
    lines = HasMany(CartLine)
    last_selected_product_id = Identifier()
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def one_line_per_product(self):
        product_ids = [str(line.product_id) for line in self.lines]
        if len(product_ids) != len(set(product_ids)):
            raise ValidationError({"lines": ["A product may appear on only one cart line"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls):
        now = datetime.now(UTC)
        cart = cls(created_at=now, updated_at=now)
        cart.raise_(CartCreated(cart_id=str(cart.id)))
        return cart

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def ordered_lines(self) -> list[CartLine]:
        return sorted(self.lines, key=lambda line: line.sequence or 0)

    @property
    def total_quantity(self) -> int:
        return sum(line.quantity for line in self.lines)

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def line_for(self, product_id) -> CartLine | None:
        return next((line for line in self.lines if str(line.product_id) == str(product_id)), None)

    def quantity_of(self, product_id) -> int:
        line = self.line_for(product_id)
        return line.quantity if line else 0

    def _require_line(self, product_id) -> CartLine:
        line = self.line_for(product_id)
        if line is None:
            raise ValidationError({"product_id": ["Item not found in cart"]})
        return line

    # -------------------------------------------------------------------
    # Line management
    # -------------------------------------------------------------------
    def add_item(self, product_id, quantity):
        """Add units of a product, merging into its existing line if present."""
        if quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be positive"]})

        existing = self.line_for(product_id)
        if existing:
            existing.quantity += quantity
            line_quantity = existing.quantity
        else:
            next_sequence = max((line.sequence or 0 for line in self.lines), default=0) + 1
            self.add_lines(CartLine(product_id=product_id, quantity=quantity, sequence=next_sequence))
            line_quantity = quantity

        self.last_selected_product_id = product_id
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                product_id=str(product_id),
                quantity=quantity,
                line_quantity=line_quantity,
            )
        )

    def update_quantity(self, product_id, new_quantity):
        """Set a line's quantity. Use ``remove_item`` to drop a line."""
        if new_quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be positive"]})

        line = self._require_line(product_id)
        previous_quantity = line.quantity
        line.quantity = new_quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartQuantityUpdated(
                cart_id=str(self.id),
                product_id=str(product_id),
                previous_quantity=previous_quantity,
                new_quantity=new_quantity,
            )
        )

    def remove_item(self, product_id) -> int:
        """Drop a line and return the quantity it held."""
        line = self._require_line(product_id)
        quantity = line.quantity
        self.remove_lines(line)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemRemoved(
                cart_id=str(self.id),
                product_id=str(product_id),
                quantity=quantity,
            )
        )
        return quantity

    def clear(self) -> dict[str, int]:
        """Drop every line. Returns the released quantity per product."""
        released = {str(line.product_id): line.quantity for line in self.lines}
        for line in list(self.lines):
            self.remove_lines(line)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartCleared(
                cart_id=str(self.id),
                lines_removed=len(released),
                units_removed=sum(released.values()),
            )
        )
        return released
