from fastapi import FastAPI

from ifrs16_lite.entrypoints.http.exception_handlers import register_exception_handlers
from ifrs16_lite.entrypoints.http.routes.health import router as health_router
from ifrs16_lite.entrypoints.http.routes.leases import router as leases_router
from ifrs16_lite.entrypoints.http.routes.modifications import router as modifications_router
from ifrs16_lite.infra.logging_config import configure_logging


def build_app() -> FastAPI:
    configure_logging()

    app = FastAPI(
        title="IFRS 16 Lite API",
        description="""
        Lease accounting API for measuring lease liabilities and right-of-use
        assets under IFRS 16, and for remeasuring contracts after modifications.

        ## Features
        - Initial measurement and amortization schedule
        - Short-term and low-value exemption assessment
        - Modification impact preview, validation and contract state replay

        ## Persistence
        Stateless. Callers send the base terms and committed modifications
        with every request.

        ## Error Handling
        All errors return structured JSON responses with error codes.
        See the error response schemas in the API documentation.
        """,
        version="0.1.0",
        docs_url="/docs",  # Swagger UI
        redoc_url="/redoc",  # ReDoc alternative
        openapi_url="/openapi.json",  # OpenAPI schema
        contact={
            "name": "IFRS 16 Lite Team",
            "email": "dev@ifrs16-lite.com",
        },
        license_info={
            "name": "Proprietary",
        },
    )

    # Register global exception handlers
    register_exception_handlers(app)

    # Register routers
    app.include_router(health_router)
    app.include_router(leases_router, prefix="/v1")
    app.include_router(modifications_router, prefix="/v1")

    return app


app = build_app()
