# facenotes/config.py
# Central place for thresholds and constants
import os

from dotenv import load_dotenv

load_dotenv()

ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Euclidean distance threshold for 128-d face-api.js descriptors.
# A login is accepted when the best distance is strictly below this value.
FACE_MATCH_THRESHOLD = float(os.getenv("FACE_MATCH_THRESHOLD", "0.6"))

# Distances below this still fail the threshold but are close enough that
# the user is probably enrolled and should simply retry.
RETRY_SUGGESTION_DISTANCE = 0.8

# Descriptor length produced by the browser-side model
DESCRIPTOR_DIM = int(os.getenv("DESCRIPTOR_DIM", "128"))

# "memory" for the in-process store, "mongo" for MongoDB
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "memory").lower()
MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017")
MONGO_DB = os.getenv("MONGO_DB", "facenotes")
USERS_COLLECTION_NAME = "users"
NOTES_COLLECTION_NAME = "notes"

# --- Security & JWT Config ---
# In production, use secure, environment-variable-based secrets
SECRET_KEY = os.getenv("SECRET_KEY", "a_very_secret_key_for_dev_only")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "CORS_ORIGINS",
        "http://localhost:5173,http://localhost:5174,http://127.0.0.1:5173,http://127.0.0.1:5174",
    ).split(",")
    if origin.strip()
]

# Requests allowed per client IP inside the window; 0 disables limiting
RATE_LIMIT_MAX_REQUESTS = int(os.getenv("RATE_LIMIT_MAX_REQUESTS", "100"))
RATE_LIMIT_WINDOW_SECONDS = float(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "60"))

SEED_DEMO_DATA = os.getenv("SEED_DEMO_DATA", "false").lower() in ("1", "true", "yes")
