import logging
from typing import Optional, Dict, Any, List

import pydantic

# Import from other modules
from .core import ProductIn, ProductPatch, RealtimeProductIn
from .database import ProductStore
from .errors import CatalogError, NotFoundError
from .notifier import ConnectionManager, PRODUCT_ADDED, PRODUCT_UPDATED

logger = logging.getLogger(__name__)

# This file contains the operations behind both the HTTP routes and the
# real-time channel. Successful writes are broadcast to every socket.

ADD_PRODUCT = "addProduct"


# Product queries
async def list_products_logic(store: ProductStore, limit: Optional[int] = None) -> List[Dict[str, Any]]:
    return await store.list_limited(limit)

async def get_product_logic(store: ProductStore, pid: str) -> Dict[str, Any]:
    p = await store.get_by_id(pid)
    if p is None:
        raise NotFoundError()
    return p

# Product writes
async def add_product_logic(store: ProductStore, manager: ConnectionManager, payload: ProductIn):
    product = await store.add(payload)
    await manager.broadcast(PRODUCT_ADDED, product)
    return product

async def update_product_logic(store: ProductStore, manager: ConnectionManager, pid: str, patch: ProductPatch):
    product = await store.update(pid, patch)
    if product is None:
        raise NotFoundError()
    await manager.broadcast(PRODUCT_UPDATED, product)
    return product

async def add_realtime_product_logic(store: ProductStore, manager: ConnectionManager, payload: RealtimeProductIn):
    product = await store.add_quick(payload)
    await manager.broadcast(PRODUCT_ADDED, product)
    return product

# Real-time ingress
async def handle_socket_message(store: ProductStore, manager: ConnectionManager, message: Any):
    """Dispatch one inbound frame. Failures are logged, never sent back."""
    if not isinstance(message, dict):
        logger.warning("Ignoring malformed real-time frame: %r", message)
        return None

    event = message.get("event")
    if event != ADD_PRODUCT:
        logger.warning("Ignoring unknown real-time event %r", event)
        return None

    try:
        payload = RealtimeProductIn.model_validate(message.get("data") or {})
        return await add_realtime_product_logic(store, manager, payload)
    except (pydantic.ValidationError, CatalogError) as e:
        logger.error("Error adding product from the real-time channel: %s", e)
        return None
