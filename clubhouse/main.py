# clubhouse/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from clubhouse.api.v1.api import api_router
from clubhouse.core.config import settings
from clubhouse.core.error_handler import register_exception_handlers
from clubhouse.db.base_class import Base
from clubhouse.db.session import SessionLocal, engine
from clubhouse.store import SqlDocumentStore

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables checked and created if necessary.")

    app.state.store = SqlDocumentStore(
        SessionLocal, max_attempts=settings.TRANSACTION_MAX_ATTEMPTS
    )
    yield
    logger.info("Application shutting down...")


app = FastAPI(
    title="Clubhouse Service",
    version="1.0.0",
    description="""
        Backend for the club site: blog, calendar, comments, RSVPs,
        character sheets and member administration.

        ## Authentication

        Write endpoints require a JWT from the identity provider via the
        `Authorization: Bearer <token>` header. Reading the blog and the
        calendar is public.
        """,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(api_router, prefix="/api/v1")


@app.get("/")
def read_root():
    return {"status": "Clubhouse Service is running"}
