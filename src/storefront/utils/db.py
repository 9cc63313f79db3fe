from protean.domain import Domain
from sqlalchemy import Engine, create_engine

from storefront.catalogue.repository import product_cache
from storefront.schema import metadata


def _engines(domain: Domain):
    for _, provider in domain.providers.items():
        if provider.conn_info["provider"] in ("sqlite", "postgresql"):
            # An in-memory database only exists behind the provider's own pooled connection
            if provider.conn_info.get("poolclass") is not None:
                yield provider._engine
            else:
                yield create_engine(provider.conn_info["database_uri"])


def setup_db(domain: Domain):
    """Setup database schema"""
    with domain.domain_context():
        for engine in _engines(domain):
            metadata.create_all(engine)


def drop_db(domain: Domain):
    """Drop database schema"""
    with domain.domain_context():
        for engine in _engines(domain):
            metadata.drop_all(engine)
    product_cache.clear()


def reset_db(domain: Domain):
    """Delete every row, children first, and forget cached products"""
    with domain.domain_context():
        for engine in _engines(domain):
            _truncate(engine)
    product_cache.clear()


def _truncate(engine: Engine) -> None:
    with engine.begin() as connection:
        for table in reversed(metadata.sorted_tables):
            connection.execute(table.delete())
