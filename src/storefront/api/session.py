"""Storefront session factory for the HTTP adapter.

Provides get_storefront() / set_storefront() / reset_storefront():
- the default session reads ``STOREFRONT_*`` settings and opens on first use
- tests install a session built on manual timers and a fixed clock
"""

from storefront.config import StorefrontSettings
from storefront.engine import Storefront

_current_storefront: Storefront | None = None


def get_storefront() -> Storefront:
    """Return the active storefront session, opening a default one if needed."""
    global _current_storefront
    if _current_storefront is None:
        _current_storefront = Storefront(settings=StorefrontSettings.from_env()).open()
    return _current_storefront


def set_storefront(store: Storefront) -> None:
    """Override the active storefront session (useful for tests)."""
    global _current_storefront
    _current_storefront = store


def reset_storefront() -> None:
    """Stop the active session's promotions and forget it."""
    global _current_storefront
    if _current_storefront is not None:
        _current_storefront.stop_promotions()
    _current_storefront = None
