"""Application settings read from the environment (and a local .env file)."""

import os

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

APP_ENV = os.getenv("APP_ENV", "production").lower()
DEBUG = APP_ENV == "development"

UPLOAD_DIR = os.getenv("UPLOAD_DIR", "uploads")

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",")
    if origin.strip()
]
