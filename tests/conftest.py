import os
from decimal import Decimal
from pathlib import Path

import pytest
from faker import Faker


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests.

    Select the configuration environment and an in-memory database, then
    initialize the domain and push its context. The activated domain can then
    be referred to elsewhere as `current_domain`.
    """
    os.environ["STOREFRONT_ENV"] = session.config.option.env
    os.environ["DATABASE_URL"] = os.getenv("TEST_DATABASE_URL", "sqlite://")

    from storefront.domain import init_domain

    init_domain().domain_context().push()


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


@pytest.fixture(scope="session", autouse=True)
def setup_db(request):
    from storefront.domain import storefront
    from storefront.utils.db import drop_db, setup_db

    setup_db(storefront)

    yield

    drop_db(storefront)


@pytest.fixture(autouse=True)
def run_around_tests():
    """Fixture to automatically cleanup infrastructure after every test"""
    yield

    from protean import current_domain

    from storefront.utils.db import reset_db

    reset_db(current_domain)

    # Drain event stores
    current_domain.event_store.store._data_reset()


@pytest.fixture(scope="session")
def fake():
    Faker.seed(20261019)
    return Faker()


@pytest.fixture()
def client():
    from fastapi.testclient import TestClient

    from storefront.app import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def make_user(fake):
    from protean import current_domain

    from storefront.identity.registration import register_user_command

    def _make(**overrides):
        fields = {
            "email": fake.unique.email(),
            "password": "correct-horse-battery",
            "first_name": fake.first_name(),
            "last_name": fake.last_name(),
        }
        fields.update(overrides)
        return current_domain.process(register_user_command(**fields), asynchronous=False)

    return _make


@pytest.fixture()
def make_category(fake):
    from protean import current_domain

    from storefront.catalogue.category_management import CreateCategory

    def _make(**overrides):
        fields = {"name": fake.unique.word().title() + " Goods"}
        fields.update(overrides)
        return current_domain.process(CreateCategory(**fields), asynchronous=False)

    return _make


@pytest.fixture()
def make_product(fake):
    from protean import current_domain

    from storefront.catalogue.product_management import CreateProduct

    def _make(**overrides):
        fields = {
            "sku": fake.unique.bothify("SKU-####-????").upper(),
            "name": fake.unique.catch_phrase(),
            "price": Decimal("10.00"),
            "stock_quantity": 10,
        }
        fields.update(overrides)
        return current_domain.process(CreateProduct(**fields), asynchronous=False).product

    return _make
