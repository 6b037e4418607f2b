"""Schema management for domains backed by a SQL provider.

The memory provider used in development and tests has no schema, so both
helpers are no-ops unless a domain is configured for PostgreSQL or SQLite.
"""

from protean.domain import Domain
from sqlalchemy import create_engine

SQL_PROVIDERS = ("sqlite", "postgresql")


def _sql_providers(domain: Domain):
    for _, provider in domain.providers.items():
        if provider.conn_info["provider"] in SQL_PROVIDERS:
            yield provider


def _register_tables(domain: Domain, provider) -> None:
    # A repository's DAO registers its table with the provider's metadata on first access
    registries = (domain.registry.aggregates, domain.registry.entities, domain.registry.projections)
    for registry in registries:
        for _, record in registry.items():
            if record.cls.meta_.provider == provider.name:
                domain.repository_for(record.cls)._dao  # noqa: B018


def setup_db(domain: Domain) -> None:
    """Create tables for products, carts, orders, profiles and conversations."""
    with domain.domain_context():
        for provider in _sql_providers(domain):
            _register_tables(domain, provider)
            provider._metadata.create_all(create_engine(provider.conn_info["database_uri"]))


def drop_db(domain: Domain) -> None:
    with domain.domain_context():
        for provider in _sql_providers(domain):
            provider._metadata.drop_all(create_engine(provider.conn_info["database_uri"]))
