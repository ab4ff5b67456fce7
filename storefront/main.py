# storefront/main.py
from typing import Any, Dict, List, Optional

import uvicorn
from fastapi import Body, FastAPI, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import settings
from .database import build_store
from .errors import StoreError, StorefrontError
from .logger import setup_logger
from .models import Order, OrderCreated, Product, ProductCreated
from .services import OrderStore, ProductStore

logger = setup_logger("storefront", level=settings.log_level, log_dir=settings.log_dir)

app = FastAPI(title="storefront (sweets & namkeens)")

# ---------------------------
# Stores
# ---------------------------
db = build_store(settings.store_path)
product_store = ProductStore(db)
order_store = OrderStore(db, recent_limit=settings.recent_orders_limit)

@app.on_event("startup")
async def connect_store():
    try:
        db.connect()
    except StoreError as e:
        logger.error("Store connection error: %s", e.message)
        raise SystemExit(1)
    logger.info("Store ready (%s)", type(db).__name__)

# ---------------------------
# Middleware
# ---------------------------
# CORSMiddleware is added last so it wraps the 413 and 500 bodies built below it.
class BodyLimitMiddleware:
    """Rejects bodies over settings.max_body_bytes, declared or streamed (chunked)."""

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            return await self.app(scope, receive, send)

        limit = settings.max_body_bytes
        declared = dict(scope["headers"]).get(b"content-length", b"")
        received = 0

        async def limited_receive():
            nonlocal received
            if declared.isdigit() and int(declared) > limit:
                raise HTTPException(status_code=413, detail="Request body too large")
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > limit:
                    raise HTTPException(status_code=413, detail="Request body too large")
            return message

        await self.app(scope, limited_receive, send)

app.add_middleware(BodyLimitMiddleware)

@app.middleware("http")
async def guard_request(request: Request, call_next):
    # no Origin header: curl, mobile apps, server-to-server
    origin = request.headers.get("origin")
    if origin and origin.rstrip("/") not in settings.allowed_origins:
        logger.warning("Blocked by CORS: %s", origin)
        return JSONResponse({"error": "Not allowed by CORS"}, status_code=403)

    try:
        return await call_next(request)
    except Exception:
        logger.exception("Server error on %s %s", request.method, request.url.path)
        return JSONResponse({"error": "Internal server error"}, status_code=500)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH"],
    allow_headers=["Content-Type", "Authorization"],
)

# ---------------------------
# Error handlers
# ---------------------------
@app.exception_handler(StorefrontError)
async def storefront_error_handler(request: Request, exc: StorefrontError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = errors[0]["msg"] if errors else "Invalid request body"
    return JSONResponse({"error": message}, status_code=400)

@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse({"error": exc.detail}, status_code=exc.status_code, headers=getattr(exc, "headers", None))

# ---------------------------
# Health
# ---------------------------
@app.get("/", response_class=PlainTextResponse)
async def root():
    return "Backend is running"

# ---------------------------
# Product endpoints
# ---------------------------
@app.get("/api/products", response_model=List[Product])
async def list_products():
    return product_store.list()

@app.post("/api/products", status_code=201, response_model=ProductCreated)
async def create_product(payload: Dict[str, Any] = Body(...)):
    logger.info("Incoming product: %s", payload.get("name"))
    product = product_store.create(payload)
    return {"message": "Product added!", "product": product}

# ---------------------------
# Order endpoints
# ---------------------------
@app.get("/api/orders/recent", response_model=List[Order])
async def list_recent_orders(limit: Optional[int] = Query(None, ge=1, le=500)):
    return order_store.list_recent(limit)

@app.post("/api/orders", status_code=201, response_model=OrderCreated)
async def place_order(payload: Dict[str, Any] = Body(...)):
    order = order_store.create(payload)
    logger.info("Order %s placed by %s", order["id"], order["email"])
    return {"message": "Order placed!", "order": order}


def run():
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
