"""
Sensor Readings API
===================
FastAPI application exposing the sensor_readings table over HTTP.

ARCHITECTURE:
    [Client] --HTTP--> [This API] --SQL--> [PostgreSQL]

    Every request is one round trip to the database. Nothing is cached
    and nothing is kept between requests.

HOW TO RUN:
    # Install
    pip install -e .

    # Create the table and stored procedure
    psql "$DATABASE_URL" -f backend/schema.sql

    # Check the database is reachable
    python -m sensor_api.check_db

    # Run the server
    sensor-api
    # or: uvicorn sensor_api.main:app --reload --port 3000

API DOCUMENTATION:
    After starting the server, visit:
    - Swagger UI: http://localhost:3000/api-docs
    - ReDoc: http://localhost:3000/redoc
    - OpenAPI JSON: http://localhost:3000/openapi.json
"""

import logging
from contextlib import asynccontextmanager

import psycopg2
import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from sensor_api.config import Config
from sensor_api.database import Database, DatabaseError
from sensor_api.routers import readings_router


logging.basicConfig(
    level=getattr(logging, Config.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


# =============================================================================
# APPLICATION LIFESPAN
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    STARTUP:
        Open the database connection pool and put it on app.state.db.
        If the database is down we still start - requests get 500s and
        each one tries to open the pool again, so the API recovers on its
        own once the database comes up.

    SHUTDOWN:
        Close every pooled connection.
    """
    db = Database(
        Config.DATABASE_URL,
        min_connections=Config.DB_POOL_MIN,
        max_connections=Config.DB_POOL_MAX
    )
    try:
        db.connect()
    except psycopg2.Error as e:
        logger.error(f"Database pool initialization failed: {e}")
    app.state.db = db

    logger.info(f"Server is running on {Config.PUBLIC_URL}")
    logger.info(f"Swagger UI available at {Config.PUBLIC_URL}/api-docs")

    yield

    logger.info("Shutting down...")
    db.close()


# =============================================================================
# CREATE FASTAPI APPLICATION
# =============================================================================

app = FastAPI(
    title="Sensor API",
    description="API documentation for the sensor readings service",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/api-docs",
    redoc_url="/redoc",
    servers=[{"url": Config.PUBLIC_URL}],
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=Config.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(readings_router)


# =============================================================================
# ERROR HANDLERS
# =============================================================================

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Bad input is the caller's fault: 400 with a short text explanation."""
    problems = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )
    return PlainTextResponse(f"Invalid request: {problems}", status_code=400)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=exc.headers)


# =============================================================================
# ROOT ENDPOINTS
# =============================================================================

@app.get("/", response_class=PlainTextResponse, summary="Liveness check")
async def root():
    """Plain text liveness message."""
    return "Server is running!"


@app.get("/health", summary="Health Check")
def health(request: Request):
    """Check that the database answers. Returns its current timestamp."""
    db = getattr(request.app.state, "db", None)
    try:
        if db is None:
            raise DatabaseError("Database pool is not initialized")
        row = db.check_connection()
    except (psycopg2.Error, DatabaseError) as e:
        logger.error(f"Health check failed: {e}")
        return JSONResponse({"status": "unhealthy", "database": "unreachable"}, status_code=503)

    return {"status": "healthy", "database_time": row["now"].isoformat() if row else None}


def run():
    """Entry point for the sensor-api console script."""
    uvicorn.run("sensor_api.main:app", host=Config.HOST, port=Config.PORT)


if __name__ == "__main__":
    run()
