"""Cart creation."""

import structlog
from protean import handle
from protean.fields import String
from protean.utils.globals import current_domain

from storefront.cart.cart import Cart
from storefront.domain import storefront

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Cart")
class CreateCart:
    """Open the session's cart."""

    session_label = String(max_length=100, default="default")


@storefront.command_handler(part_of=Cart)
class ManageCartHandler:
    @handle(CreateCart)
    def create_cart(self, command):
        cart = Cart.create()
        current_domain.repository_for(Cart).add(cart)

        logger.info("Cart created", cart_id=str(cart.id), session=command.session_label)
        return str(cart.id)
