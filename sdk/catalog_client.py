# sdk/catalog_client.py
import requests
import httpx
from typing import Optional, List, Dict, Any


class CatalogClient:
    def __init__(self, base_url: str = "http://localhost:3000", timeout: int = 10):
        self.base_url = base_url.rstrip("/")
        self.session = requests.Session()
        self.timeout = timeout

    def health(self):
        r = self.session.get(f"{self.base_url}/health", timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    # Products
    def list_products(self, limit: Optional[int] = None):
        params = {}
        if limit:
            params["limit"] = limit
        r = self.session.get(f"{self.base_url}/api/products", params=params, timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def get_product(self, product_id):
        r = self.session.get(f"{self.base_url}/api/products/{product_id}", timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def add_product(self, title: str, description: str, code: str, price: float, stock: int,
                    category: str = "", thumbnails: Optional[List[str]] = None, status: bool = True):
        payload = {
            "title": title,
            "description": description,
            "code": code,
            "price": price,
            "stock": stock,
            "category": category,
            "thumbnails": thumbnails or [],
            "status": status,
        }
        r = self.session.post(f"{self.base_url}/api/products", json=payload, timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def update_product(self, product_id, **fields: Any):
        r = self.session.put(f"{self.base_url}/api/products/{product_id}", json=fields, timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    # Async add (example)
    async def add_product_async(self, fields: Dict[str, Any]):
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            r = await client.post(f"{self.base_url}/api/products", json=fields)
            return r


def _parse_value(raw: str):
    # --set price=50 sends a number, --set status=false a boolean
    if raw.lower() in ("true", "false"):
        return raw.lower() == "true"
    for cast in (int, float):
        try:
            return cast(raw)
        except ValueError:
            pass
    return raw


if __name__ == "__main__":
    import argparse
    from rich import print

    parser = argparse.ArgumentParser(description="Catalog CLI")
    parser.add_argument("--base-url", default="http://127.0.0.1:3000", help="Catalog server URL")
    subparsers = parser.add_subparsers(dest="command", required=True)

    lp = subparsers.add_parser("list-products", help="List products")
    lp.add_argument("--limit", type=int, help="Only the first N products")

    gp = subparsers.add_parser("get-product", help="Get a product by its ID")
    gp.add_argument("--product-id", required=True, help="ID of the product")

    ap = subparsers.add_parser("add-product", help="Add a new product")
    ap.add_argument("--title", required=True)
    ap.add_argument("--description", required=True)
    ap.add_argument("--code", required=True)
    ap.add_argument("--price", type=float, required=True)
    ap.add_argument("--stock", type=int, required=True)
    ap.add_argument("--category", default="")
    ap.add_argument("--thumbnail", action="append", dest="thumbnails", help="Thumbnail URL (repeatable)")

    up = subparsers.add_parser("update-product", help="Update fields of a product")
    up.add_argument("--product-id", required=True)
    up.add_argument("--set", action="append", default=[], metavar="FIELD=VALUE", help="Field to change (repeatable)")

    subparsers.add_parser("health", help="Check the server is up")

    args = parser.parse_args()
    c = CatalogClient(base_url=args.base_url)

    if args.command == "list-products":
        print(c.list_products(args.limit))

    elif args.command == "get-product":
        print(c.get_product(args.product_id))

    elif args.command == "add-product":
        print(c.add_product(args.title, args.description, args.code, args.price, args.stock,
                            args.category, args.thumbnails))

    elif args.command == "update-product":
        fields = {}
        for item in args.set:
            key, _, value = item.partition("=")
            fields[key] = _parse_value(value)
        print(c.update_product(args.product_id, **fields))

    elif args.command == "health":
        print(c.health())
