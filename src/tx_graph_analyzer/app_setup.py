import asyncio
import sys
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger  # type: ignore

from .api.routes import graph_router
from .config import RuntimeSettings, runtime_settings
from .domain.services import (
    CentralityService,
    ConnectionFailure,
    MalformedInputError,
    MalformedRecordError,
    QueryFailure,
    TransactionGraphService,
)
from .infrastructure import Neo4jConnectionManager, Neo4jGraphRepository

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)


def configure_logging(level: str) -> None:
    """Replace loguru's default sink with a single stderr sink."""
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format=LOG_FORMAT, colorize=True)
    logger.info("Logger configured with level: {}", level.upper())


def parse_allowed_origins(allowed_origins_str: str) -> list[str]:
    if allowed_origins_str == "*":
        return ["*"]
    allowed_origins = [
        origin.strip() for origin in allowed_origins_str.split(",") if origin.strip()
    ]
    if not allowed_origins:
        logger.warning(
            "APP__CORS_ALLOWED_ORIGINS_STR was not '*' and parsed to empty list. Defaulting to ['*']."
        )
        return ["*"]
    return allowed_origins


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the Neo4j driver on startup and release it on shutdown."""
    logger.info("Application startup sequence initiated.")
    connection: Neo4jConnectionManager = app.state.connection
    await asyncio.to_thread(connection.connect)
    logger.info("Application startup completed successfully.")

    try:
        yield
    finally:
        logger.info("Application shutdown sequence initiated.")
        connection.close()
        logger.info("Application shutdown completed.")


def _error_response(status_code: int, exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": type(exc).__name__, "detail": str(exc)},
    )


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(MalformedInputError)
    async def malformed_input_handler(request: Request, exc: MalformedInputError):
        return _error_response(422, exc)

    @app.exception_handler(ConnectionFailure)
    async def connection_failure_handler(request: Request, exc: ConnectionFailure):
        logger.error(f"Neo4j unavailable while serving {request.url.path}: {exc}")
        return _error_response(503, exc)

    @app.exception_handler(QueryFailure)
    async def query_failure_handler(request: Request, exc: QueryFailure):
        return _error_response(502, exc)

    @app.exception_handler(MalformedRecordError)
    async def malformed_record_handler(request: Request, exc: MalformedRecordError):
        logger.error(f"Unexpected record shape while serving {request.url.path}: {exc}")
        return _error_response(502, exc)


def create_app(
    settings: Optional[RuntimeSettings] = None,
    connection: Optional[Neo4jConnectionManager] = None,
) -> FastAPI:
    """
    Creates and configures the FastAPI application instance.

    Initializes logging, sets up CORS, wires the graph and centrality
    services to one Neo4j connection held on ``app.state`` and mounts the
    graph router.

    Returns:
        The configured FastAPI application instance.
    """
    settings = settings or runtime_settings
    configure_logging(settings.app.log_level)

    app = FastAPI(
        title=settings.app.name,
        version=settings.app.version,
        description="Analytic queries and node-link graphs over a Neo4j transaction graph",
        lifespan=lifespan,
    )

    connection = connection or Neo4jConnectionManager(settings.neo4j)
    repository = Neo4jGraphRepository(connection)
    app.state.connection = connection
    app.state.graph_service = TransactionGraphService(repository, settings.graph)
    app.state.centrality_service = CentralityService(repository, settings.graph)

    allowed_origins = parse_allowed_origins(settings.app.cors_allowed_origins_str)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["*"],
    )
    logger.info(f"CORS middleware configured with origins: {allowed_origins}")

    register_exception_handlers(app)

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok", "neo4j_connected": app.state.connection.is_connected}

    app.include_router(graph_router)
    return app
