"""
API exception handlers
Maps engine exceptions to HTTP responses shaped as ErrorResponse.
"""
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from inventory_engine.core.config import settings
from inventory_engine.core.exceptions import (
    InventoryError, LedgerImmutableError, NotFoundError, StateConflictError, ValidationError
)
from inventory_engine.core.logging import get_logger
from inventory_engine.schemas.common import ErrorResponse

logger = get_logger("api")


def _error(status_code: int, error: str, message: str, detail=None) -> JSONResponse:
    body = ErrorResponse(error=error, message=message, detail=detail)
    return JSONResponse(status_code=status_code, content=body.model_dump())


async def not_found_handler(request: Request, exc: NotFoundError):
    return _error(404, "not_found", str(exc), {"entity": exc.entity, "entity_id": exc.entity_id})


async def state_conflict_handler(request: Request, exc: StateConflictError):
    return _error(409, "state_conflict", str(exc), {
        "entity": exc.entity,
        "entity_id": exc.entity_id,
        "current_status": exc.current_status,
        "action": exc.action,
    })


async def validation_handler(request: Request, exc: ValidationError):
    return _error(422, "validation_error", str(exc))


async def ledger_immutable_handler(request: Request, exc: LedgerImmutableError):
    return _error(409, "ledger_immutable", str(exc))


async def inventory_error_handler(request: Request, exc: InventoryError):
    logger.error(f"Unmapped inventory error on {request.url.path}: {exc}", exc_info=True)
    return _error(400, "inventory_error", str(exc))


async def global_exception_handler(request: Request, exc: Exception):
    """
    Global exception handler for unhandled errors
    """
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return _error(
        500,
        "server_error",
        "Internal server error",
        {"reason": str(exc)} if settings.DEBUG else None,
    )


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(StateConflictError, state_conflict_handler)
    app.add_exception_handler(ValidationError, validation_handler)
    app.add_exception_handler(LedgerImmutableError, ledger_immutable_handler)
    app.add_exception_handler(InventoryError, inventory_error_handler)
    app.add_exception_handler(Exception, global_exception_handler)
