from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api import study
from core.config import settings
from core.database import engine, Base
from core.logging import configure_logging, get_logger
from core.middleware import RequestLoggingMiddleware
from core.errors import register_error_handlers
import models  # noqa: F401  (registers tables on Base.metadata)

# Initialize logging before anything else
configure_logging(
    level=settings.LOG_LEVEL,
    json_logs=settings.LOG_JSON,
    log_sql=settings.LOG_SQL,
)

log = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    log.info("startup", message="Palabras API starting up")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    log.info("database_connected", message="Database tables initialized")

    yield

    log.info("shutdown", message="Palabras API shutting down")
    await engine.dispose()


app = FastAPI(
    title="Palabras API",
    description="Vocabulary trainer: fuzzy answer grading and prioritized study batches",
    version="0.1.0",
    lifespan=lifespan,
)

register_error_handlers(app)

app.add_middleware(RequestLoggingMiddleware, slow_threshold_ms=1000)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(study.router, prefix="/api/study", tags=["study"])


@app.get("/health")
async def health_check():
    return {"status": "healthy", "version": "0.1.0"}


if __name__ == "__main__":
    import uvicorn

    log.info("server_config", host=settings.BACKEND_HOST, port=settings.BACKEND_PORT, debug=settings.APP_DEBUG)
    uvicorn.run(
        "main:app",
        host=settings.BACKEND_HOST,
        port=settings.BACKEND_PORT,
        reload=settings.APP_DEBUG,
        log_config=None,
    )
