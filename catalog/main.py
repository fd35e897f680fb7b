# catalog/main.py
import logging
import re
from pathlib import Path
from typing import Optional

import uvicorn
from fastapi import APIRouter, Depends, FastAPI, Request, WebSocket, WebSocketDisconnect
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.templating import Jinja2Templates

from .config import Settings, settings
from .core import ProductIn, ProductPatch
from .database import ProductStore
from .errors import CatalogError
from .logic import (
    list_products_logic, get_product_logic, add_product_logic,
    update_product_logic, handle_socket_message
)
from .notifier import ConnectionManager

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[
        logging.StreamHandler()
    ]
)

logger = logging.getLogger(__name__)

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))

api_router = APIRouter()
pages_router = APIRouter()

_LEADING_INT = re.compile(r"\s*[+-]?\d+")


def get_store(request: Request) -> ProductStore:
    return request.app.state.store

def get_manager(request: Request) -> ConnectionManager:
    return request.app.state.manager

def _parse_limit(raw: Optional[str]) -> Optional[int]:
    # Leading integer, as in "2abc" or "2.5"; anything else means "no limit".
    if raw is None:
        return None
    match = _LEADING_INT.match(raw)
    return int(match.group(0)) if match else None


# ---------------------------
# Product endpoints
# ---------------------------
@api_router.get("")
async def list_products(limit: Optional[str] = None, store: ProductStore = Depends(get_store)):
    return await list_products_logic(store, _parse_limit(limit))

@api_router.get("/{pid}")
async def get_product(pid: str, store: ProductStore = Depends(get_store)):
    return await get_product_logic(store, pid)

@api_router.post("")
async def add_product(
    payload: ProductIn,
    store: ProductStore = Depends(get_store),
    manager: ConnectionManager = Depends(get_manager),
):
    return await add_product_logic(store, manager, payload)

@api_router.put("/{pid}")
async def update_product(
    pid: str,
    patch: ProductPatch,
    store: ProductStore = Depends(get_store),
    manager: ConnectionManager = Depends(get_manager),
):
    return await update_product_logic(store, manager, pid, patch)


# ---------------------------
# Pages
# ---------------------------
@pages_router.get("/")
async def home(request: Request, store: ProductStore = Depends(get_store)):
    products = await store.list_all()
    return templates.TemplateResponse(request, "home.html", {"products": products})

@pages_router.get("/realtimeproducts")
async def realtime_products(request: Request, store: ProductStore = Depends(get_store)):
    products = await store.list_all()
    return templates.TemplateResponse(request, "realtime_products.html", {"products": products})

@pages_router.get("/health")
async def health_check():
    """Health check endpoint for monitoring and load balancers."""
    return {"status": "healthy"}


# ---------------------------
# Real-time channel
# ---------------------------
@pages_router.websocket("/ws")
async def realtime_channel(websocket: WebSocket):
    store: ProductStore = websocket.app.state.store
    manager: ConnectionManager = websocket.app.state.manager
    await manager.connect(websocket)
    try:
        while True:
            try:
                message = await websocket.receive_json()
            except (ValueError, KeyError):
                logger.warning("Ignoring non-JSON real-time frame")
                continue
            await handle_socket_message(store, manager, message)
    except WebSocketDisconnect:
        pass
    finally:
        manager.disconnect(websocket)


# ---------------------------
# Error handlers
# ---------------------------
async def catalog_error_handler(request: Request, exc: CatalogError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

async def invalid_payload_handler(request: Request, exc: RequestValidationError):
    logger.info("Rejected malformed request to %s: %s", request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"detail": "Invalid product payload"})


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    app_settings = app_settings or settings
    app = FastAPI(title=app_settings.PROJECT_NAME)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.store = ProductStore(app_settings.PRODUCTS_FILE)
    app.state.manager = ConnectionManager()

    app.add_exception_handler(CatalogError, catalog_error_handler)
    app.add_exception_handler(RequestValidationError, invalid_payload_handler)

    app.include_router(api_router, prefix="/api/products", tags=["Products"])
    app.include_router(pages_router)
    return app


app = create_app()


def run():
    logger.info("Serving %s on port %d", settings.PROJECT_NAME, settings.PORT)
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
