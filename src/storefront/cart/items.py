"""Cart item management — commands and handler.

Every quantity change is paired with the matching Stock Ledger movement so
that ``stock + quantity in cart`` stays constant per product. Refused
changes leave both the cart and the catalogue untouched.
"""

import structlog
from protean import handle
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from storefront.cart.cart import Cart
from storefront.catalogue.ledger import StockLedger
from storefront.domain import storefront

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Cart")
class AddItem:
    """Add up to ``quantity`` units; fewer are added when stock runs short."""

    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@storefront.command(part_of="Cart")
class UpdateQuantity:
    """Set a line to an absolute quantity."""

    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@storefront.command(part_of="Cart")
class ChangeQuantity:
    """Move a line's quantity by ``delta``. A result of zero or less drops the line."""

    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)
    delta = Integer(required=True)


@storefront.command(part_of="Cart")
class RemoveItem:
    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)


@storefront.command(part_of="Cart")
class ClearCart:
    cart_id = Identifier(required=True)


@storefront.command_handler(part_of=Cart)
class ManageCartItemsHandler:
    @handle(AddItem)
    def add_item(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.get(command.cart_id)
        ledger = StockLedger()

        product = ledger.find_product(command.product_id)
        added = min(command.quantity, product.stock)
        if added <= 0:
            logger.info("Product out of stock", product_id=str(product.id), requested=command.quantity)
            return 0

        ledger.decrease_stock(product.id, added)
        cart.add_item(product_id=product.id, quantity=added)
        repo.add(cart)

        logger.info(
            "Item added to cart",
            product_id=str(product.id),
            requested=command.quantity,
            added=added,
        )
        return added

    @handle(UpdateQuantity)
    def update_quantity(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.get(command.cart_id)
        return self._set_line_quantity(repo, cart, command.product_id, command.quantity)

    @handle(ChangeQuantity)
    def change_quantity(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.get(command.cart_id)
        current = cart.quantity_of(command.product_id)
        if current == 0 or command.delta == 0:
            return False

        new_quantity = current + command.delta
        if new_quantity <= 0:
            self._drop_line(repo, cart, command.product_id)
            return True
        return self._set_line_quantity(repo, cart, command.product_id, new_quantity)

    @handle(RemoveItem)
    def remove_item(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.get(command.cart_id)
        if cart.line_for(command.product_id) is None:
            return 0
        return self._drop_line(repo, cart, command.product_id)

    @handle(ClearCart)
    def clear_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.get(command.cart_id)
        if cart.is_empty:
            return 0

        ledger = StockLedger()
        released = cart.clear()
        for product_id, quantity in released.items():
            ledger.increase_stock(product_id, quantity)
        repo.add(cart)

        logger.info("Cart cleared", cart_id=str(cart.id), units_released=sum(released.values()))
        return sum(released.values())

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    def _set_line_quantity(self, repo, cart, product_id, new_quantity) -> bool:
        current = cart.quantity_of(product_id)
        if current == 0:
            return False

        ledger = StockLedger()
        difference = new_quantity - current
        if difference > 0:
            if not ledger.decrease_stock(product_id, difference):
                return False
        elif difference < 0:
            ledger.increase_stock(product_id, -difference)
        else:
            return True

        cart.update_quantity(product_id=product_id, new_quantity=new_quantity)
        repo.add(cart)
        return True

    def _drop_line(self, repo, cart, product_id) -> int:
        quantity = cart.remove_item(product_id=product_id)
        StockLedger().increase_stock(product_id, quantity)
        repo.add(cart)
        return quantity
