"""Candidate selection for the promotional ticks.

Both functions take products in catalogue order and return the product
to discount, or ``None`` when the tick should do nothing.
"""

from collections.abc import Sequence


def pick_flash_sale_candidate(products: Sequence, draw: float):
    """Pick one product uniformly from the whole catalogue using ``draw`` in ``[0, 1)``.

    The pick is final: an out-of-stock or already flash-discounted product
    means no flash sale this tick, not another draw.
    """
    if not products:
        return None
    index = min(int(draw * len(products)), len(products) - 1)
    product = products[index]
    if product.stock > 0 and not product.on_flash_sale:
        return product
    return None


def pick_suggested_sale_candidate(products: Sequence, last_selected_id):
    """First product, in catalogue order, other than the one last picked by the shopper."""
    if last_selected_id is None:
        return None
    for product in products:
        if str(product.id) == str(last_selected_id):
            continue
        if product.on_suggested_sale or product.stock <= 0:
            continue
        return product
    return None
