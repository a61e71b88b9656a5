from contextlib import asynccontextmanager
from fastapi import FastAPI, APIRouter
from fastapi.middleware.cors import CORSMiddleware
from app.api.routes import events as events_router, bookings as bookings_router, health as health_router
from app.api.errors import register_exception_handlers
from app.db.session import database, Base
from app.core.config import settings
from app.core.logging import logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Connect the database handle on startup and release it on shutdown."""
    engine = await database.connect()
    # create tables (no migrations; schema is small and additive)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ready")
    yield
    await database.dispose()
    logger.info("Application shutdown")


app = FastAPI(title="DevEvent", lifespan=lifespan)

register_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

api_router = APIRouter(prefix="/api")
api_router.include_router(events_router.router)
api_router.include_router(bookings_router.router)
api_router.include_router(health_router.router)

app.include_router(api_router)
