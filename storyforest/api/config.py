"""API configuration constants.

Single source of truth for environment-driven settings used across the API layer.
"""

import os

from dotenv import find_dotenv, load_dotenv

# Load .env from project root (find_dotenv searches parent directories)
load_dotenv(find_dotenv())

# Firebase
FIREBASE_CREDENTIALS = os.getenv("FIREBASE_CREDENTIALS", "")  # path to a service account JSON
FIREBASE_STORAGE_BUCKET = os.getenv("FIREBASE_STORAGE_BUCKET", "")
FIREBASE_PROJECT_ID = os.getenv("FIREBASE_PROJECT_ID", "")

# Background jobs
REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379")

# Logging
LOG_JSON = os.getenv("LOG_JSON", "true").lower() != "false"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# CORS
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# Collections
BOOKS = "books"
PAGES = "pages"
TRANSLATIONS = "translations"
DRAFTS = "drafts"
USERS = "users"
USER_SETTINGS = "userSettings"
VOICES = "voices"
USER_AUDIO_FILES = "user_audio_files"
CONFIG = "config"
ADMINS_DOC = "admins"

# Blob prefixes
TEMP_VOICE_SAMPLES_PREFIX = "temp_voice_samples"


def get_admin_emails() -> set[str]:
    """Emails allowed to claim admin ownership (comma-separated ADMIN_EMAILS)."""
    raw = os.getenv("ADMIN_EMAILS", "")
    return {e.strip().lower() for e in raw.split(",") if e.strip()}
