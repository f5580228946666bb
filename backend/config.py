import os
from dotenv import load_dotenv

load_dotenv()

# --- Supabase Configuration ---
SUPABASE_URL = os.getenv("SUPABASE_URL", "").rstrip("/")
SUPABASE_ANON_KEY = os.getenv("SUPABASE_ANON_KEY", "")
SUPABASE_SERVICE_ROLE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY", "")
# Project JWT secret, used to verify user access tokens locally
SUPABASE_JWT_SECRET = os.getenv("SUPABASE_JWT_SECRET", "")

# --- JWT Configuration ---
JWT_ALGORITHM = "HS256"
JWT_AUDIENCE = os.getenv("JWT_AUDIENCE", "authenticated")

# --- Persistence ---
# "supabase" talks to PostgREST over HTTP; "sql" uses the local SQLAlchemy store
PERSISTENCE_BACKEND = os.getenv("PERSISTENCE_BACKEND", "supabase").strip().lower()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./data/roadmaps.db")

# Fix for common SQLAlchemy issues with postgres:// vs postgresql://
if DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql://", 1)

REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "10"))

# --- Presentation ---
# IANA name (e.g. "Europe/London") or "local" for the server's zone.
# Streaks are counted in calendar days of this zone.
TIMEZONE = os.getenv("TIMEZONE", "local")

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]


def is_supabase_configured() -> bool:
    """Check if Supabase is properly configured with required environment variables."""
    return bool(SUPABASE_URL and SUPABASE_ANON_KEY and SUPABASE_SERVICE_ROLE_KEY)


def require_supabase_config():
    """Fail fast at startup when the hosted backend is selected but not configured."""
    if PERSISTENCE_BACKEND != "supabase":
        return
    if not is_supabase_configured():
        raise ValueError(
            "SUPABASE_URL, SUPABASE_ANON_KEY and SUPABASE_SERVICE_ROLE_KEY must be set in environment variables"
        )
