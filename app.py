import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import server_config
from db.migrations import run_migrations
from middleware.request_logging import setup_logging, register_request_logging
from routes.subscription_routes import router as subscription_router

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Subscriptions API",
    description="Subscription records and cost aggregation over reporting periods",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
register_request_logging(app)


@app.on_event("startup")
def startup():
    if not server_config.run_migrations_on_startup:
        return
    try:
        run_migrations()
    except Exception as e:
        logger.warning(f"Failed to create tables: {e}")

app.include_router(subscription_router, prefix="/api/v1")


@app.get("/", tags=["Health"])
def health_check():
    return {"status": "healthy", "service": "subscriptions"}


@app.get("/health", tags=["Health"])
def health():
    return {"status": "ok"}
