"""
Inventory Ledger FastAPI Main Application
Entry point for the inventory ledger and costing REST API
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException

from inventory_engine.api.errors import register_exception_handlers
from inventory_engine.api.v1.api_router import api_router
from inventory_engine.core.config import settings
from inventory_engine.core.database import check_db_connection, init_db
from inventory_engine.core.logging import get_logger, setup_logging
from inventory_engine.schemas.common import HealthResponse

logger = get_logger("api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application startup and shutdown

    Configures logging, verifies the database and creates tables.
    """
    setup_logging()
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")

    if not check_db_connection():
        logger.error("Failed to connect to database on startup")
        raise RuntimeError("Database connection failed")

    init_db()
    logger.info("Application startup completed successfully")

    yield

    logger.info("Shutting down application")


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="""
        ## Inventory Transaction Ledger & Costing Engine

        ### Key Features:
        - **Ledger**: Append-only receipts, issues, transfers, adjustments and waste
        - **Stock Levels**: On-hand derived from the ledger per item and location
        - **Costing**: Weighted average cost with FIFO / LIFO / average valuation
        - **Requisitions**: Job material requests from draft to filled
        - **Physical Counts**: Variance capture and posting as adjustments
        """,
        docs_url=settings.DOCS_URL,
        redoc_url=settings.REDOC_URL,
        openapi_url=settings.OPENAPI_URL,
        lifespan=lifespan,
    )

    register_exception_handlers(app)

    @app.get("/health", response_model=HealthResponse, tags=["System"])
    def health_check():
        """
        Health check endpoint for monitoring and load balancers

        Returns system status and database connectivity
        """
        try:
            db_status = check_db_connection()
        except Exception as e:
            logger.error(f"Health check failed: {e}")
            raise HTTPException(status_code=503, detail="Service unavailable")

        return HealthResponse(
            status="healthy" if db_status else "degraded",
            version=settings.APP_VERSION,
            database="connected" if db_status else "disconnected",
            debug=settings.DEBUG,
        )

    app.include_router(api_router, prefix=settings.API_V1_STR)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "inventory_engine.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
