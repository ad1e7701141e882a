from pathlib import Path
import logging
import os

from dotenv import load_dotenv

# Load environment variables from the working directory and the project root (if present).
PROJECT_ROOT = Path(__file__).resolve().parents[1]
load_dotenv(Path.cwd() / ".env")
load_dotenv(PROJECT_ROOT / ".env")

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./task_ledger.db")
SECRET_KEY = os.getenv("SECRET_KEY", "change-me")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "30"))

_cors_origins = os.getenv("CORS_ORIGINS", "http://localhost:3000")
CORS_ORIGINS = [origin.strip() for origin in _cors_origins.split(",") if origin.strip()]

LOG_LEVEL = getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)
LOG_FILE = os.getenv("LOG_FILE") or None
