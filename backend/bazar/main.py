"""
Bazar - Backend API
Tienda de demostración: catálogo, autenticación JWT y pedidos
"""
import logging

from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from bazar.api import auth, orders, products
from bazar.core.config import settings
from bazar.core.database import check_connection, get_db
from bazar.core.errors import AuthError, ShopError

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# Crear aplicación FastAPI
app = FastAPI(
    title=settings.API_TITLE,
    version=settings.API_VERSION,
    description=settings.API_DESCRIPTION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_allowed_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


# =============================================================================
# Error handling
# =============================================================================

@app.exception_handler(ShopError)
async def shop_error_handler(request: Request, exc: ShopError):
    """Render domain errors as {"error": {"kind", "message", ...}}"""
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthError) else None
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.kind}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.to_dict()},
        headers=headers,
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies are client errors (400), not 422"""
    fields = [
        {"loc": [str(part) for part in error.get("loc", ())], "msg": error.get("msg", "")}
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": {
                "kind": "ValidationError",
                "message": "Request body is invalid",
                "fields": fields,
            }
        },
    )


# Include API routers
app.include_router(products.router, prefix="/products", tags=["Products"])
app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
app.include_router(orders.router, prefix="/orders", tags=["Orders"])


@app.get("/")
async def root():
    """Endpoint raíz - Verificación de estado de la API"""
    return {
        "message": "Bazar API",
        "status": "online",
        "version": settings.API_VERSION,
    }


@app.get("/health")
def health(db: Session = Depends(get_db)):
    """Health check endpoint para monitoreo - tests database connectivity"""
    db_ok = check_connection(db)
    return {
        "status": "healthy" if db_ok else "degraded",
        "database": "connected" if db_ok else "disconnected",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("bazar.main:app", host=settings.API_HOST, port=settings.API_PORT)
