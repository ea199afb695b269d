"""
Campus Coffee - FastAPI Backend
Point-of-sale directory with OpenStreetMap import
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from campus_coffee.config import get_settings
from campus_coffee.database import close_db, health_check as db_health_check, init_db
from campus_coffee.exceptions import DuplicatePosName, MissingRequiredFields, NodeNotFound, PosNotFound
from campus_coffee.logging_config import setup_logging
from campus_coffee.routers import pos
from campus_coffee.utils.metrics import get_content_type, get_metrics

logger = logging.getLogger(__name__)
settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown"""
    setup_logging(settings)
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"CORS Origins: {settings.cors_origins_list}")
    await init_db()

    yield

    await close_db()
    logger.info("Shutting down...")


app = FastAPI(
    title=settings.app_name,
    description="Campus coffee point-of-sale directory with OpenStreetMap import",
    version=settings.app_version,
    lifespan=lifespan
)

# CORS middleware - MUST be added before exception handlers
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(PosNotFound)
async def pos_not_found_handler(request: Request, exc: PosNotFound):
    return JSONResponse(status_code=404, content={"detail": str(exc), "pos_id": exc.pos_id})


@app.exception_handler(NodeNotFound)
async def node_not_found_handler(request: Request, exc: NodeNotFound):
    return JSONResponse(status_code=404, content={"detail": str(exc), "node_id": exc.node_id})


@app.exception_handler(DuplicatePosName)
async def duplicate_pos_name_handler(request: Request, exc: DuplicatePosName):
    return JSONResponse(status_code=409, content={"detail": str(exc), "name": exc.name})


@app.exception_handler(MissingRequiredFields)
async def missing_required_fields_handler(request: Request, exc: MissingRequiredFields):
    return JSONResponse(
        status_code=422,
        content={"detail": str(exc), "node_id": exc.node_id, "fields": exc.fields}
    )


# Global exception handler to ensure proper error responses
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Catch all unhandled exceptions and return proper JSON response"""
    logger.exception(f"Unhandled exception: {exc}")
    return JSONResponse(
        status_code=500,
        content={"detail": f"Internal server error: {str(exc)}"}
    )

# Include routers
app.include_router(pos.router, prefix="/api/pos", tags=["POS"])


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    database = await db_health_check()
    return {
        "status": "healthy" if database["healthy"] else "degraded",
        "version": settings.app_version,
        "database": database
    }


@app.get("/metrics")
async def metrics():
    """Prometheus metrics endpoint"""
    return Response(
        content=get_metrics(),
        media_type=get_content_type()
    )


def run():
    import uvicorn
    uvicorn.run(
        "campus_coffee.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug
    )


if __name__ == "__main__":
    run()
