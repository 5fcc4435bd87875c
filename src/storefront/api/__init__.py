"""Storefront HTTP adapter."""

from storefront.api.routes import router
from storefront.api.session import get_storefront, reset_storefront, set_storefront

__all__ = ["router", "get_storefront", "set_storefront", "reset_storefront"]
