import json

import pytest
from fastapi.testclient import TestClient

from catalog.config import Settings
from catalog.main import create_app

SEED_PRODUCTS = [
    {"id": i, "title": f"Product {i}", "description": f"Description {i}", "code": f"P-{i:03d}",
     "price": 10 * i, "status": True, "stock": 5 + i, "category": "general", "thumbnails": []}
    for i in range(1, 6)
]


def write_products(path, products):
    path.write_text(json.dumps(products, indent=2), encoding="utf-8")


def read_products(path):
    return json.loads(path.read_text(encoding="utf-8"))


@pytest.fixture
def products_file(tmp_path):
    path = tmp_path / "products.json"
    write_products(path, SEED_PRODUCTS)
    return path


@pytest.fixture
def app(products_file):
    return create_app(Settings(PRODUCTS_FILE=str(products_file)))


@pytest.fixture
def client(app):
    # One portal for the whole test, so sockets and requests share a loop.
    with TestClient(app) as c:
        yield c
