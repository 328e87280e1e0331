"""Catalogue bounded context: products, purchasable variants and their prices.

Owns the authoritative price of every variant. The ordering context only ever
sees read-only snapshots of catalogue data, resolved through the catalogue
provider port.
"""

import structlog
from protean.domain import Domain

catalogue = Domain(name="catalogue")

logger = structlog.get_logger(__name__)
