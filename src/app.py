"""Kwetu Store FastAPI application.

Multi-domain web server that processes commands synchronously via HTTP.
Each request is wrapped in the correct domain context based on URL prefix.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# Domains are initialized at module level so uvicorn workers share them.
# PROTEAN_ENV selects the config overlay in each domain.toml.
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from identity.domain import identity  # noqa: E402
from protean.integrations.fastapi import register_exception_handlers
from shared.logging import add_context, clear_context
from store.domain import store  # noqa: E402
from support.domain import support  # noqa: E402

identity.init()
store.init()
support.init()

# ---------------------------------------------------------------------------
# Route-to-domain mapping
# ---------------------------------------------------------------------------
# Longest prefix wins: /admin/admins and /admin/chats belong to other
# domains than the rest of /admin.
_ROUTE_DOMAIN_MAP = {
    "/auth": identity,
    "/profiles": identity,
    "/admin/admins": identity,
    "/admin/chats": support,
    "/chat": support,
    "/admin": store,
    "/products": store,
    "/cart": store,
    "/checkout": store,
    "/dashboard": store,
}


def _resolve_domain(path: str):
    """Return the domain for the given request path, or None."""
    for prefix in sorted(_ROUTE_DOMAIN_MAP, key=len, reverse=True):
        if path == prefix or path.startswith(prefix + "/"):
            return _ROUTE_DOMAIN_MAP[prefix]
    return None


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Kwetu Store API",
    description="African Kwetu Store — catalogue, cart, checkout, orders and support chat",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the correct Protean domain context for each request."""
    clear_context()
    add_context(request_id=request.headers.get("x-request-id") or uuid4().hex[:12], path=request.url.path)
    domain = _resolve_domain(request.url.path)
    if domain is not None:
        with domain.domain_context():
            response = await call_next(request)
        return response
    # No domain match: health check and docs
    return await call_next(request)


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from identity.api import admin_router as admin_roles_router  # noqa: E402
from identity.api import auth_router, profile_router  # noqa: E402
from store.api import admin_router, cart_router, checkout_router, dashboard_router, product_router  # noqa: E402
from support.api import admin_chat_router, chat_router  # noqa: E402

for router in (
    auth_router,
    profile_router,
    admin_roles_router,
    product_router,
    cart_router,
    checkout_router,
    dashboard_router,
    admin_router,
    chat_router,
    admin_chat_router,
):
    app.include_router(router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domains": {
                "identity": {"name": identity.name},
                "store": {"name": store.name},
                "support": {"name": support.name},
            },
        }
    )
