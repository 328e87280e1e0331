"""Catalogue provider factory.

Provides get_catalog() / set_catalog() to swap implementations:
- RepositoryCatalog (default) reads the catalogue domain's repository
- FakeCatalog for development and testing

Selected with the CATALOG_ADAPTER environment variable.
"""

import os

from catalogue.provider.port import CatalogProvider

_current_catalog: CatalogProvider | None = None


def get_catalog() -> CatalogProvider:
    """Return the configured catalogue provider (singleton)."""
    global _current_catalog
    if _current_catalog is None:
        adapter = os.environ.get("CATALOG_ADAPTER", "repository")
        if adapter == "repository":
            from catalogue.provider.repository_adapter import RepositoryCatalog

            _current_catalog = RepositoryCatalog()
        elif adapter == "fake":
            from catalogue.provider.fake_adapter import FakeCatalog

            _current_catalog = FakeCatalog()
        else:
            raise ValueError(f"Unknown catalog adapter: {adapter}")
    return _current_catalog


def set_catalog(catalog: CatalogProvider) -> None:
    """Override the active catalogue provider (useful for tests)."""
    global _current_catalog
    _current_catalog = catalog


def reset_catalog() -> None:
    """Reset to the configured default."""
    global _current_catalog
    _current_catalog = None
