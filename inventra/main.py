import logging
import traceback
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from inventra.api import auth, categories, dashboard, items, transactions
from inventra.config import Settings
from inventra.config import settings as default_settings
from inventra.database import init_db, make_engine, make_session_factory
from inventra.errors import InventoryError, PersistenceError, ValidationError
from inventra.services.auth_service import ensure_default_admin

logger = logging.getLogger(__name__)


def _register_error_handlers(app: FastAPI, settings: Settings) -> None:
    @app.exception_handler(InventoryError)
    async def inventory_error_handler(request: Request, exc: InventoryError):
        body = exc.to_dict()
        if isinstance(exc, PersistenceError) and exc.details and not settings.is_production:
            body["details"] = exc.details
        return JSONResponse(status_code=exc.status_code, content=body)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content=ValidationError.from_pydantic(exc).to_dict())

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Return JSON for unhandled exceptions so clients can parse the error."""
        logger.error("Unhandled error: %s\n%s", exc, traceback.format_exc())
        body = {"success": False, "error": "Internal server error"}
        if not settings.is_production:
            body["details"] = str(exc)
        return JSONResponse(status_code=500, content=body)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or default_settings
    logging.basicConfig(level=settings.LOG_LEVEL.upper())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        engine = make_engine(settings)
        app.state.engine = engine
        app.state.session_factory = make_session_factory(engine)
        init_db(engine)
        db = app.state.session_factory()
        try:
            ensure_default_admin(db, settings)
        finally:
            db.close()
        logger.info("%s started (%s)", settings.APP_NAME, settings.ENVIRONMENT)
        yield
        engine.dispose()

    app = FastAPI(
        title=f"{settings.APP_NAME} API",
        description="Inventory items, stock levels and the audit ledger of every quantity change",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    _register_error_handlers(app, settings)

    app.include_router(auth.router, prefix="/api")
    app.include_router(items.router, prefix="/api")
    app.include_router(categories.router, prefix="/api")
    app.include_router(transactions.router, prefix="/api")
    app.include_router(dashboard.router, prefix="/api")

    @app.get("/health")
    def health(request: Request):
        try:
            with request.app.state.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            logger.error("Health check failed: %s", exc)
            return JSONResponse(status_code=500, content={"status": "error", "database": "disconnected"})
        return {"status": "ok", "database": "connected"}

    return app


app = create_app()
