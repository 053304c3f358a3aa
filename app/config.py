"""Application configuration."""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env / .env.local so STORAGE_ROOT and friends are available
load_dotenv(".env")
load_dotenv(".env.local")

# Root directory holding one namespace per client
STORAGE_ROOT = Path(os.getenv("STORAGE_ROOT", "storage-data")).resolve()

# URL prefix under which stored files are publicly served (/<prefix>/<client>/...)
STATIC_PREFIX = os.getenv("STATIC_PREFIX", "storage-data").strip("/")

# Header carrying the client key (query param "client" is accepted too)
CLIENT_HEADER_KEY = os.getenv("CLIENT_HEADER_KEY", "x-client-key").lower()

# Client key store, kept beside the storage root so it is never publicly served
CLIENT_KEYS_FILE = Path(
    os.getenv("CLIENT_KEYS_FILE", str(STORAGE_ROOT.parent / "client-keys.json"))
).resolve()

# Upload size limit (bytes)
MAX_UPLOAD_SIZE = int(os.getenv("MAX_UPLOAD_SIZE", 50 * 1024 * 1024))  # 50 MB

# Bearer token guarding /admin/client-keys; empty disables the check
ADMIN_TOKEN = os.getenv("ADMIN_TOKEN", "")

CORS_ORIGINS = [
    o.strip()
    for o in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000").split(",")
    if o.strip()
]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
