import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./portal.db")

# Firebase Configuration (ID tokens issued to portal users)
FIREBASE_PROJECT_ID = os.getenv("FIREBASE_PROJECT_ID")

# n8n Configuration
# Shared secret sent by n8n in the x-n8n-signature header
N8N_WEBHOOK_SECRET = os.getenv("N8N_WEBHOOK_SECRET")
# Outgoing webhook that sets up workflows (e.g. the phone assistant)
N8N_WORKFLOW_WEBHOOK_URL = os.getenv("N8N_WORKFLOW_WEBHOOK_URL")
N8N_REQUEST_TIMEOUT = float(os.getenv("N8N_REQUEST_TIMEOUT", "15"))

# Cloudflare R2 Configuration (document storage)
R2_ACCOUNT_ID = os.getenv("R2_ACCOUNT_ID")
R2_ACCESS_KEY_ID = os.getenv("R2_ACCESS_KEY_ID")
R2_SECRET_ACCESS_KEY = os.getenv("R2_SECRET_ACCESS_KEY")
R2_BUCKET_NAME = os.getenv("R2_BUCKET_NAME", "documents")

# Dodo Payments Configuration
DODO_PAYMENTS_API_KEY = os.getenv("DODO_PAYMENTS_API_KEY")
# "test_mode" or "live_mode" - default to test for safety
DODO_PAYMENTS_ENVIRONMENT = os.getenv("DODO_PAYMENTS_ENVIRONMENT", "test_mode")
CHECKOUT_TRIAL_DAYS = int(os.getenv("CHECKOUT_TRIAL_DAYS", "30"))
MIN_CONTRACT_MONTHS = int(os.getenv("MIN_CONTRACT_MONTHS", "12"))
DEFAULT_TIER_NAME = os.getenv("DEFAULT_TIER_NAME", "Voice Agent Pro")

# Frontend base URL for redirects
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")

# Reservation scheduling policy
# Business hours are [BUSINESS_OPEN_HOUR, BUSINESS_CLOSE_HOUR): with the defaults the last slot is 21:30
RESERVATION_DURATION_MINUTES = int(os.getenv("RESERVATION_DURATION_MINUTES", "90"))
BUSINESS_OPEN_HOUR = int(os.getenv("BUSINESS_OPEN_HOUR", "11"))
BUSINESS_CLOSE_HOUR = int(os.getenv("BUSINESS_CLOSE_HOUR", "22"))
SLOT_MINUTE_OFFSETS = tuple(
    int(m) for m in os.getenv("SLOT_MINUTE_OFFSETS", "0,30").split(",") if m.strip()
)
MAX_ALTERNATIVE_SLOTS = int(os.getenv("MAX_ALTERNATIVE_SLOTS", "5"))
DEFAULT_PARTY_SIZE = int(os.getenv("DEFAULT_PARTY_SIZE", "2"))

# HTTP layer
IS_PRODUCTION = os.getenv("ENVIRONMENT", "development").lower() == "production"
ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "ALLOWED_ORIGINS", f"{FRONTEND_URL},http://localhost:5173,http://localhost:3000"
    ).split(",")
    if origin.strip()
]
SECURITY_HEADERS_ENABLED = os.getenv("SECURITY_HEADERS_ENABLED", "true").lower() == "true"
