import os
from datetime import date
from pathlib import Path

import pytest

MONDAY = date(2024, 1, 1)


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session")
def _storefront_domain(request):
    """Initialize the storefront domain once per session."""
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from storefront.domain import storefront

    storefront.init()
    return storefront


@pytest.fixture(autouse=True)
def run_around_tests(_storefront_domain):
    """Push domain context before each test, cleanup after."""
    ctx = _storefront_domain.domain_context()
    ctx.push()

    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    current_domain.event_store.store._data_reset()
    ctx.pop()


# ---------------------------------------------------------------------------
# Shared fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def seeded_catalogue():
    """List the default five products and return their ids in catalogue order."""
    from protean import current_domain
    from storefront.catalogue.seeding import SeedCatalogue

    return current_domain.process(SeedCatalogue(source="tests"), asynchronous=False)


@pytest.fixture()
def clock():
    from storefront.promotions.adapters import FixedClock

    return FixedClock(MONDAY)


@pytest.fixture()
def timers():
    from storefront.promotions.adapters import ManualTimerBackend

    return ManualTimerBackend()


@pytest.fixture()
def random_source():
    from storefront.promotions.adapters import ScriptedRandomSource

    return ScriptedRandomSource([0.0])


@pytest.fixture()
def store(clock, timers, random_source):
    """An open storefront session on a Monday, with manual timers."""
    from storefront.engine import Storefront

    session = Storefront(clock=clock, random_source=random_source, timers=timers).open()
    yield session
    session.close()
