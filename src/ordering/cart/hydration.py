"""Hydration: resolve a StoredCart against the live catalogue.

Lookups run concurrently, each under its own timeout. Variants that no longer
resolve, or that are priced in a currency other than the cart's, are dropped
from the result: catalogue state can drift under a long-lived cart. An
unreachable catalogue is not absorbed; it propagates as
``UpstreamUnavailable`` so the caller never mistakes an outage for an empty
cart.
"""

import asyncio
from dataclasses import replace

import structlog

from catalogue.provider.port import CatalogProvider
from ordering.cart.cart import DEFAULT_CURRENCY, Cart, CartLineItem, StoredCart
from shared.errors import UpstreamUnavailable

logger = structlog.get_logger(__name__)

DEFAULT_ITEM_TIMEOUT = 5.0

_TIMED_OUT = object()


async def _resolve(catalog: CatalogProvider, variant_id: str, timeout: float):
    try:
        return await asyncio.wait_for(catalog.get_variant_with_product(variant_id), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning("cart_item_lookup_timed_out", variant_id=variant_id, timeout=timeout)
        return _TIMED_OUT


async def _lookup_all(stored: StoredCart, catalog: CatalogProvider, item_timeout: float) -> list:
    """Resolve every stored line concurrently, in stored order.

    The first ``UpstreamUnavailable`` cancels the lookups still in flight.
    """
    tasks = [asyncio.ensure_future(_resolve(catalog, item.variant_id, item_timeout)) for item in stored.items]
    try:
        records = await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
    return records


async def hydrate(
    stored: StoredCart,
    catalog: CatalogProvider,
    default_currency: str = DEFAULT_CURRENCY,
    item_timeout: float = DEFAULT_ITEM_TIMEOUT,
) -> Cart:
    """Build the display-ready Cart for ``stored``, preserving its item order."""
    if not stored.items:
        return Cart(id=stored.id, currency=stored.currency or default_currency)

    records = await _lookup_all(stored, catalog, item_timeout)
    if all(record is _TIMED_OUT for record in records):
        raise UpstreamUnavailable("catalogue", "every variant lookup timed out")

    resolved = [
        CartLineItem.from_record(record, item.quantity)
        for item, record in zip(stored.items, records)
        if record is not None and record is not _TIMED_OUT
    ]
    currency = stored.currency or (resolved[0].currency if resolved else default_currency)

    lines = []
    for line in resolved:
        if line.currency != currency:
            logger.warning(
                "cart_item_currency_mismatch", cart_id=stored.id, variant_id=line.variant_id, currency=line.currency
            )
            continue
        lines.append(line)

    dropped = len(stored.items) - len(lines)
    if dropped:
        logger.info("cart_items_dropped", cart_id=stored.id, dropped=dropped)

    return Cart(id=stored.id, currency=currency, items=tuple(lines))


async def prune(
    stored: StoredCart,
    catalog: CatalogProvider,
    item_timeout: float = DEFAULT_ITEM_TIMEOUT,
) -> StoredCart:
    """Drop stored lines the catalogue no longer sells in the cart's currency.

    Lines whose lookup timed out are kept. A cart left without lines loses its
    currency so the next add can set it.
    """
    if not stored.items:
        return stored

    records = await _lookup_all(stored, catalog, item_timeout)
    found = [record for record in records if record is not None and record is not _TIMED_OUT]
    currency = stored.currency or (found[0].variant.currency if found else None)

    kept = tuple(
        item
        for item, record in zip(stored.items, records)
        if record is _TIMED_OUT or (record is not None and record.variant.currency == currency)
    )
    if kept == stored.items and currency == stored.currency:
        return stored

    logger.info("stored_cart_pruned", cart_id=stored.id, dropped=len(stored.items) - len(kept))
    return replace(stored, currency=currency if kept else None, items=kept)
