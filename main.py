from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from app.database import get_db
from app.routers import properties, tenants, workers, documents, dashboard, diagnostic
from app.services.dashboard import dashboard_service
from app.core.config import settings
from app.schemas.common import ErrorResponse
from app.core.errors import register_error_handlers
from app.core.logging_config import logger

# Schema is managed by Alembic migrations
# Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="Hausverwaltung API",
    version="1.0.0",
    docs_url=None if settings.is_production else "/docs",
    redirect_slashes=False  # Disable automatic redirects to prevent POST data loss
)

# No authentication, so any configured origin may call the API
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Every router documents the {"error": ...} body
ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}

# Include routers
app.include_router(properties.router, prefix="/properties", tags=["Properties"], responses=ERROR_RESPONSES)
app.include_router(tenants.router, prefix="/tenants", tags=["Tenants"], responses=ERROR_RESPONSES)
app.include_router(workers.router, prefix="/workers", tags=["Workers"], responses=ERROR_RESPONSES)
app.include_router(documents.router, prefix="/documents", tags=["Documents"], responses=ERROR_RESPONSES)
app.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"], responses=ERROR_RESPONSES)
app.include_router(diagnostic.router, prefix="/api", tags=["Diagnostic"], responses=ERROR_RESPONSES)


@app.get("/health")
def health_check(db: Session = Depends(get_db)):
    if dashboard_service.ping(db):
        return {
            "status": "healthy",
            "database": "connected"
        }
    logger.error("Health check failed: database unreachable")
    return JSONResponse(
        status_code=503,
        content={"status": "unhealthy", "database": "disconnected"}
    )


if __name__ == "__main__":
    import uvicorn

    logger.info(f"Starting server on port {settings.PORT} ({settings.ENVIRONMENT})")
    uvicorn.run("main:app", host="0.0.0.0", port=settings.PORT)
