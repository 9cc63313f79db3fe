"""Domain initialization and configuration."""

from typing import Any

from protean.domain import Domain
from sqlalchemy.engine import make_url
from sqlalchemy.pool import StaticPool

from storefront.config import Settings, load_settings
from storefront.utils.logging import configure_logging, get_logger

# Configure logging before the domain so protean does not install its own handlers
configure_logging()

logger = get_logger(__name__)

_MEMORY_DATABASES = (None, "", ":memory:")


def database_config(url: str) -> dict[str, Any]:
    """Protean provider settings for a SQLAlchemy URL.

    SQLite URLs use protean's ``sqlite`` provider, everything else its
    ``postgresql`` provider. An in-memory SQLite database is pinned to a
    single shared connection so every session sees the same tables.
    """
    parsed = make_url(url)
    if parsed.get_backend_name() != "sqlite":
        return {"provider": "postgresql", "database_uri": url}

    config: dict[str, Any] = {
        "provider": "sqlite",
        "database_uri": url,
        "connect_args": {"check_same_thread": False},
    }
    if parsed.database in _MEMORY_DATABASES:
        config["poolclass"] = StaticPool
    return config


def domain_config(settings: Settings) -> dict[str, Any]:
    return {
        "env": settings.env,
        "testing": settings.is_test,
        "databases": {"default": database_config(settings.database_url)},
        "command_processing": "sync",
        "event_processing": "sync",
    }


# Domain Composition Root
storefront = Domain(name="storefront", config=domain_config(load_settings()))

_initialized = False


def init_domain() -> Domain:
    """Register every domain element and initialize the adapters, once per process."""
    global _initialized
    if _initialized:
        return storefront

    # Element modules register themselves with the domain on import
    from storefront.catalogue import category, category_management, product, product_management, repository  # noqa: F401
    from storefront.identity import accounts, registration, user  # noqa: F401
    from storefront.identity import repository as user_repository  # noqa: F401
    from storefront.ordering.cart import cart, items  # noqa: F401
    from storefront.ordering.cart import repository as cart_repository  # noqa: F401
    from storefront.ordering.order import cancellation, fulfillment, order, placement  # noqa: F401
    from storefront.ordering.order import repository as order_repository  # noqa: F401
    from storefront.reviews import review, submission  # noqa: F401
    from storefront.reviews import repository as review_repository  # noqa: F401
    from storefront.wishlist import item, management  # noqa: F401
    from storefront.wishlist import repository as wishlist_repository  # noqa: F401

    storefront.init(traverse=False)
    _initialized = True
    logger.info("domain_initialized", database=storefront.config["databases"]["default"]["provider"])
    return storefront
