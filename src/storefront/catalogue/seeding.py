"""Default catalogue — command and handler that list the five storefront products."""

import structlog
from protean import handle
from protean.fields import String
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.domain import storefront

logger = structlog.get_logger(__name__)

KEYBOARD = "p1"
MOUSE = "p2"
MONITOR_ARM = "p3"
LAPTOP_CASE = "p4"
SPEAKER = "p5"

# Catalogue order matters: the suggested-sale scan walks products in this order.
DEFAULT_CATALOGUE = (
    {"product_id": KEYBOARD, "name": "Bug-Free Keyboard", "price": 10000, "stock": 50},
    {"product_id": MOUSE, "name": "Productivity Mouse", "price": 20000, "stock": 30},
    {"product_id": MONITOR_ARM, "name": "Posture-Saving Monitor Arm", "price": 30000, "stock": 20},
    {"product_id": LAPTOP_CASE, "name": "Error-Proof Laptop Pouch", "price": 15000, "stock": 0},
    {"product_id": SPEAKER, "name": "Lo-Fi Coding Speaker", "price": 25000, "stock": 10},
)


@storefront.command(part_of="Product")
class SeedCatalogue:
    """List the default products. Products already in the catalogue are left untouched."""

    source = String(max_length=50, default="startup")


@storefront.command_handler(part_of=Product)
class SeedCatalogueHandler:
    @handle(SeedCatalogue)
    def seed_catalogue(self, command):
        repo = current_domain.repository_for(Product)
        existing = {str(p.id) for p in repo._dao.query.all().items}

        product_ids = []
        listed = 0
        for position, entry in enumerate(DEFAULT_CATALOGUE):
            if entry["product_id"] not in existing:
                repo.add(Product.create(position=position, **entry))
                listed += 1
            product_ids.append(entry["product_id"])

        logger.info("Catalogue seeded", source=command.source, listed=listed)
        return product_ids
