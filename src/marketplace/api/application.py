"""FastAPI application factory for the Marketplace domain."""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from protean.domain import Domain

from marketplace.api import ROUTERS, register_error_handlers
from marketplace.utils.logging import add_context, clear_context


def build_app(domain: Domain) -> FastAPI:
    """Assemble the API around an initialized domain.

    Every request runs inside the domain's context.
    """
    app = FastAPI(
        title="Marketplace API",
        description="Order pipeline for operator, partners, suppliers and customers",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        add_context(method=request.method, path=request.url.path)
        try:
            with domain.domain_context():
                return await call_next(request)
        finally:
            clear_context()

    for router in ROUTERS:
        app.include_router(router)
    register_error_handlers(app)

    @app.get("/health")
    async def health():
        return JSONResponse(content={"status": "ok", "domain": domain.name})

    return app
