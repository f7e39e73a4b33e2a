# backend/truck_sales/config.py
from __future__ import annotations
import os


def _split_origins(raw: str) -> set[str]:
    return {o.strip() for o in raw.split(",") if o.strip()}


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite DB stored next to the app by default
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///truck_sales.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Server-side salt mixed into visitor IP hashes; raw IPs are never stored
    VIEW_IP_SALT = os.environ.get("VIEW_IP_SALT", "dev-view-salt-change-me")
    VIEW_SESSION_COOKIE = "session_id"

    AUTH_COOKIE_NAME = "auth-token"

    # Object storage (S3 API; set STORAGE_ENDPOINT_URL for Supabase/MinIO)
    STORAGE_BUCKET = os.environ.get("STORAGE_BUCKET", "truck-images")
    STORAGE_ENDPOINT_URL = os.environ.get("STORAGE_ENDPOINT_URL")
    STORAGE_REGION = os.environ.get("STORAGE_REGION")
    STORAGE_ACCESS_KEY_ID = os.environ.get("STORAGE_ACCESS_KEY_ID")
    STORAGE_SECRET_ACCESS_KEY = os.environ.get("STORAGE_SECRET_ACCESS_KEY")
    STORAGE_PUBLIC_BASE_URL = os.environ.get("STORAGE_PUBLIC_BASE_URL")

    # Whole-request cap; the per-file 5MB limit is enforced by the upload service
    MAX_CONTENT_LENGTH = 50 * 1024 * 1024

    CORS_ALLOWED_ORIGINS = _split_origins(
        os.environ.get(
            "CORS_ALLOWED_ORIGINS",
            "http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173,http://127.0.0.1:5173",
        )
    )
