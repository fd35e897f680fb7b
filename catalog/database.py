import asyncio
import json
import logging
import os
import tempfile
from typing import Dict, Any, List, Optional

from .core import (
    ProductIn, ProductPatch, RealtimeProductIn, missing_fields,
    generate_product_id, _make_product_dict, _make_quick_product_dict
)
from .errors import StoreReadError, StoreWriteError, ValidationError

logger = logging.getLogger(__name__)

# This file owns the products document: a JSON array that is read whole
# and replaced whole on every write. Nothing is cached between calls.


class ProductStore:
    def __init__(self, path: str):
        self.path = path
        # One lock serializes every read-modify-write cycle on the document.
        self._lock = asyncio.Lock()

    # ---------------------------
    # Raw document access
    # ---------------------------
    def _read_sync(self) -> List[Dict[str, Any]]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                products = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Cannot read products from %s: %s", self.path, e)
            raise StoreReadError() from e
        if not isinstance(products, list):
            logger.error("Products document %s is not a JSON array", self.path)
            raise StoreReadError()
        return products

    def _write_sync(self, products: List[Dict[str, Any]]) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        try:
            fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".products-", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(products, f, indent=2, ensure_ascii=False)
                os.replace(tmp_path, self.path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except (OSError, TypeError, ValueError) as e:
            logger.error("Cannot write products to %s: %s", self.path, e)
            raise StoreWriteError() from e

    async def _read(self) -> List[Dict[str, Any]]:
        return await asyncio.to_thread(self._read_sync)

    async def _write(self, products: List[Dict[str, Any]]) -> None:
        await asyncio.to_thread(self._write_sync, products)

    # ---------------------------
    # Queries
    # ---------------------------
    async def list_all(self) -> List[Dict[str, Any]]:
        return await self._read()

    async def list_limited(self, n: Optional[int] = None) -> List[Dict[str, Any]]:
        products = await self._read()
        if n is not None and n > 0:
            return products[:n]
        return products

    async def get_by_id(self, pid: str) -> Optional[Dict[str, Any]]:
        products = await self._read()
        return next((p for p in products if str(p.get("id")) == pid), None)

    # ---------------------------
    # Mutations
    # ---------------------------
    async def add(self, payload: ProductIn) -> Dict[str, Any]:
        missing = missing_fields(payload)
        if missing:
            logger.info("Rejected product, missing fields: %s", ", ".join(missing))
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

        async with self._lock:
            products = await self._read()
            product = _make_product_dict(generate_product_id(products), payload)
            products.append(product)
            await self._write(products)
        logger.info("Added product %s", product["id"])
        return product

    async def add_quick(self, payload: RealtimeProductIn) -> Dict[str, Any]:
        async with self._lock:
            products = await self._read()
            product = _make_quick_product_dict(generate_product_id(products), payload)
            products.append(product)
            await self._write(products)
        logger.info("Added product %s from the real-time channel", product["id"])
        return product

    async def update(self, pid: str, patch: ProductPatch) -> Optional[Dict[str, Any]]:
        async with self._lock:
            products = await self._read()
            index = next((i for i, p in enumerate(products) if str(p.get("id")) == pid), None)
            if index is None:
                return None

            updated = {**products[index], **patch.model_dump(exclude_unset=True)}
            # The path parameter becomes the id, as a string.
            updated["id"] = pid
            products[index] = updated
            await self._write(products)
        logger.info("Updated product %s", pid)
        return updated
