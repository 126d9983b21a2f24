import os

import pytest


@pytest.fixture(scope="session")
def _marketplace_domain(request):
    """Initialize the marketplace domain once per session."""
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from marketplace.domain import marketplace

    marketplace.init()
    return marketplace


@pytest.fixture(scope="session", autouse=True)
def setup_db(_marketplace_domain):
    from marketplace.utils.db import drop_db, setup_db

    setup_db(_marketplace_domain)

    yield

    drop_db(_marketplace_domain)


@pytest.fixture(autouse=True)
def run_around_tests(_marketplace_domain):
    """Push domain context before each test, cleanup after."""
    ctx = _marketplace_domain.domain_context()
    ctx.push()

    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    current_domain.event_store.store._data_reset()
    ctx.pop()


# ---------------------------------------------------------------------------
# Registered users, returned as their authenticated principals
# ---------------------------------------------------------------------------
def _register(name, email, role):
    from marketplace import operations

    return operations.register_user(name=name, email=email, role=role).principal


@pytest.fixture()
def retailer():
    return _register("Green Valley Market", "orders@greenvalley.example", "retailer")


@pytest.fixture()
def farmer():
    return _register("Asha Patel", "asha@sunrisefarm.example", "farmer")


@pytest.fixture()
def customer():
    return _register("Dev Kumar", "dev@example.com", "customer")


@pytest.fixture()
def second_customer():
    return _register("Mei Lin", "mei@example.com", "customer")


@pytest.fixture()
def distributor():
    return _register("Fast Lane Logistics", "dispatch@fastlane.example", "distributor")


@pytest.fixture()
def admin():
    return _register("Ops Admin", "ops@farmxchain.example", "admin")


@pytest.fixture()
def list_produce(farmer, retailer):
    """List a product for `farmer`; the only registered retailer receives it."""
    from marketplace import operations

    def _list(name="Organic Tomatoes", crop_type="Tomatoes", price=10.0, quantity=5, **details):
        return operations.list_product(farmer, name=name, crop_type=crop_type, price=price, quantity=quantity, **details)

    return _list
