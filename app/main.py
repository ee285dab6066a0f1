# app/main.py
import locale
import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi
from fastapi.responses import PlainTextResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import auth, cart, shop
from .cart import CartStore
from .config import CORS_ORIGINS, LOG_LEVEL
from .errors import ApiError, api_error_handler
from .upstream import UpstreamClient

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# title sorting in /products follows the process locale
try:
    locale.setlocale(locale.LC_COLLATE, "")
except locale.Error:
    logger.warning("Could not apply environment collation locale, using C ordering")


async def not_found_handler(request: Request, exc: StarletteHTTPException) -> Response:
    # unknown path or unsupported method: bare 404 with no body
    if exc.status_code in (404, 405):
        return Response(status_code=404)
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=getattr(exc, "headers", None))


def create_app(
    upstream: Optional[UpstreamClient] = None,
    cart_store: Optional[CartStore] = None,
) -> FastAPI:
    """Build the application. Passing an upstream client leaves its lifetime to the caller."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = upstream is None
        app.state.upstream = UpstreamClient.create() if owned else upstream
        try:
            yield
        finally:
            if owned:
                await app.state.upstream.aclose()

    app = FastAPI(
        title="Shop BFF",
        description="Products, login and cart on top of the upstream shop API",
        version="1.0.0",
        lifespan=lifespan,
    )
    # cart state belongs to this app instance only
    app.state.cart_store = cart_store if cart_store is not None else CartStore()
    if upstream is not None:
        app.state.upstream = upstream

    # ✅ CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(StarletteHTTPException, not_found_handler)

    # ✅ Роутеры
    app.include_router(shop.router)
    app.include_router(auth.router)
    app.include_router(cart.router)

    @app.get("/", response_class=PlainTextResponse)
    async def root():
        return "Hello, World!"

    # ✅ OpenAPI с Bearer, чтобы в /docs была кнопка Authorize
    def custom_openapi():
        if app.openapi_schema:
            return app.openapi_schema
        schema = get_openapi(
            title=app.title,
            version=app.version,
            description=app.description,
            routes=app.routes,
        )
        schema.setdefault("components", {}).setdefault("securitySchemes", {})
        schema["components"]["securitySchemes"]["BearerAuth"] = {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "JWT",
        }
        schema["paths"].get("/cart", {}).get("post", {})["security"] = [{"BearerAuth": []}]
        app.openapi_schema = schema
        return app.openapi_schema

    app.openapi = custom_openapi
    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)
