"""Configuration values for the app event sync."""

import os
from dotenv import load_dotenv

BASE_DIR = os.path.dirname(os.path.abspath(__file__))  # repo root where config.py lives
ENV_PATH = os.path.join(BASE_DIR, ".env")
if os.path.exists(ENV_PATH):
    load_dotenv(dotenv_path=ENV_PATH, override=True)
else:
    load_dotenv(override=True)  # fallback to process/working-dir envs

# --- Google Sheets ---
# Pre-provisioned document; one tab per app, named after the app.
GOOGLE_SHEET_ID = os.environ.get(
    "GOOGLE_SHEET_ID", "13W9lf1gZY3haffKXMApebmN8RqQQPTGwsA7eISf-Rnc"
)
GOOGLE_CREDENTIALS_FILE = os.environ.get("GOOGLE_CREDENTIALS_FILE", "credentials.json")

# --- Partner API ---
PARTNER_API_VERSION = os.environ.get("PARTNER_API_VERSION", "2024-07")
EVENTS_PAGE_SIZE = 100
HTTP_TIMEOUT = int(os.environ.get("HTTP_TIMEOUT", "30"))  # seconds

# --- Reporting day ---
LOCAL_UTC_OFFSET_HOURS = 7  # GMT+7, no DST

# --- Debugging ---
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")  # INFO|DEBUG
