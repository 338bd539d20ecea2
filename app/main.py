import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import get_settings

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


def _create_tables() -> None:
    """Create missing tables for every registered model."""
    from app.database import Base, engine
    from app import models  # noqa: F401  (populates Base.metadata)

    Base.metadata.create_all(bind=engine)
    logger.info("Database tables verified (%d models).", len(Base.metadata.tables))


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.CREATE_TABLES_ON_STARTUP:
        _create_tables()
    yield


app = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    debug=settings.DEBUG,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/api/health")
def health_check():
    return {"status": "ok", "app": settings.APP_NAME}


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------

from app.routers import auth  # noqa: E402

app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])

# Projects (detail, access, stats)
from app.routers import projects  # noqa: E402

app.include_router(
    projects.router,
    prefix="/api/projects",
    tags=["Projects"],
)

# Advertising budgets
from app.routers import advertising  # noqa: E402

app.include_router(
    advertising.router,
    prefix="/api/advertising",
    tags=["Advertising"],
)
