import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .config import CORS_ORIGINS
from .database import create_tables
from .routers import auth, tasks

logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Task Ledger API",
    description="Per-address task ledger with soft deletes and event log",
    version=__version__,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(tasks.router, prefix="/api", tags=["tasks"])

# Create tables on startup
@app.on_event("startup")
def on_startup():
    create_tables()
    logger.info("Task Ledger API started")

@app.get("/")
def read_root():
    return {"message": "Task Ledger API"}

@app.get("/health")
def health_check():
    return {"status": "healthy"}
