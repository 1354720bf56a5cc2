"""FastAPI application wiring the storefront endpoints."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import Body, Depends, FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response

from . import auth, orders, products
from .config import settings
from .database import init_db, seed_if_empty
from .errors import ApiError, ValidationError, issues_from_pydantic
from .listing import list_products
from .models import ProductCreate, ProductUpdate, SignInRequest, SignUpRequest, UserIdentity
from .security import require_user
from .storage import Statement, StorageExecutor, get_engine, get_storage

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_LEVEL = logging.getLevelName(settings.log_level.upper())

# ``force=True`` replaces uvicorn's default handlers so every module logs the
# same way.
logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT, force=True)
for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
    logging.getLogger(name).setLevel(LOG_LEVEL)
if settings.log_file:
    Path(settings.log_file).parent.mkdir(parents=True, exist_ok=True)
    _error_handler = logging.FileHandler(settings.log_file)
    _error_handler.setLevel(logging.ERROR)
    _error_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logging.getLogger().addHandler(_error_handler)

logger = logging.getLogger(__name__)
logger.info("Logging configured at %s (env=%s)", settings.log_level.upper(), settings.app_env)

app = FastAPI(title="Storefront API")


def send_response(status_code: int, message: str, data: Optional[Any] = None) -> JSONResponse:
    content: Dict[str, Any] = {"status": "success", "message": message}
    if data is not None:
        content["data"] = jsonable_encoder(data)
    return JSONResponse(status_code=status_code, content=content)


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"status": "error", "message": message})


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return _error_response(exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    error = ValidationError(issues_from_pydantic(exc.errors()))
    return _error_response(error.status_code, error.message)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


@app.on_event("startup")
async def startup_event() -> None:
    missing = settings.missing_required()
    if missing and settings.app_env == "production":
        raise RuntimeError(f"Missing required environment variables: {', '.join(missing)}")
    for key in missing:
        logger.warning("%s is not set; using the development default", key)
    if settings.create_schema_on_startup:
        engine = get_engine()
        init_db(engine)
        if settings.seed_on_startup:
            seeded = seed_if_empty(engine)
            if seeded:
                logger.info("Seeded %s products on startup", seeded)


@app.get("/health")
async def health(storage: StorageExecutor = Depends(get_storage)) -> dict:
    await storage.fetch_scalar(Statement("SELECT 1"))
    return {"database": "ok"}


@app.get("/test-auth")
async def test_auth(user: UserIdentity = Depends(require_user)) -> JSONResponse:
    return send_response(status.HTTP_200_OK, "Authenticated successfully", user)


# --- auth ---


@app.post("/auth/signup")
async def signup(payload: SignUpRequest, storage: StorageExecutor = Depends(get_storage)) -> JSONResponse:
    token = await auth.sign_up(storage, payload)
    return send_response(status.HTTP_201_CREATED, "User created successfully", {"token": token})


@app.post("/auth/signin")
async def signin(payload: SignInRequest, storage: StorageExecutor = Depends(get_storage)) -> JSONResponse:
    token = await auth.sign_in(storage, payload)
    return send_response(status.HTTP_200_OK, "Logged in successfully", {"token": token})


# --- products ---


@app.get("/products")
async def get_products(request: Request, storage: StorageExecutor = Depends(get_storage)) -> JSONResponse:
    listing = await list_products(dict(request.query_params), storage)
    return send_response(status.HTTP_200_OK, "Products retrieved successfully", listing)


@app.get("/products/{product_id}")
async def get_product(product_id: str, storage: StorageExecutor = Depends(get_storage)) -> JSONResponse:
    product = await products.get_product(storage, products.parse_id(product_id))
    return send_response(status.HTTP_200_OK, "Product retrieved successfully", {"product": product})


@app.post("/products")
async def create_product(
    payload: ProductCreate,
    storage: StorageExecutor = Depends(get_storage),
    user: UserIdentity = Depends(require_user),
) -> JSONResponse:
    product_id = await products.create_product(storage, payload)
    return send_response(status.HTTP_201_CREATED, "Product created", {"productId": product_id})


@app.put("/products/{product_id}")
async def update_product(
    product_id: str,
    payload: ProductUpdate,
    storage: StorageExecutor = Depends(get_storage),
    user: UserIdentity = Depends(require_user),
) -> JSONResponse:
    await products.update_product(storage, products.parse_id(product_id), payload)
    return send_response(status.HTTP_200_OK, "Product updated")


@app.patch("/products/{product_id}")
async def patch_product(
    product_id: str,
    body: Any = Body(...),
    storage: StorageExecutor = Depends(get_storage),
    user: UserIdentity = Depends(require_user),
) -> JSONResponse:
    parsed_id = products.parse_id(product_id)
    patch = products.parse_patch(body)
    await products.patch_product(storage, parsed_id, patch)
    return send_response(status.HTTP_200_OK, "Product partially updated")


@app.delete("/products/{product_id}")
async def delete_product(
    product_id: str,
    storage: StorageExecutor = Depends(get_storage),
    user: UserIdentity = Depends(require_user),
) -> Response:
    await products.delete_product(storage, products.parse_id(product_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# --- orders ---


@app.get("/orders")
async def get_orders(
    storage: StorageExecutor = Depends(get_storage),
    user: UserIdentity = Depends(require_user),
) -> JSONResponse:
    result = await orders.list_orders(storage, user.userId)
    return send_response(status.HTTP_200_OK, "Orders retrieved successfully", result)


@app.get("/orders/{order_id}")
async def get_order(
    order_id: str,
    storage: StorageExecutor = Depends(get_storage),
    user: UserIdentity = Depends(require_user),
) -> JSONResponse:
    detail = await orders.get_order(storage, user.userId, products.parse_id(order_id, label="Order"))
    return send_response(status.HTTP_200_OK, "Order retrieved successfully", detail)
