"""
CONFIGURATION MODULE
====================

PURPOSE:
  Central place for all chat relay settings: the HuggingFace API key, the
  model to call, the server port, allowed frontend origins, and the fixed
  generation/retry policy used for every inference request.

WHAT THIS FILE DOES:
  - Loads environment variables from .env (so the API key stays out of code).
  - Exposes HUGGINGFACE_API_KEY, MODEL_ID and HUGGINGFACE_API_URL for the inference client.
  - Exposes PORT and ALLOWED_ORIGINS for the web server.
  - Defines the generation parameters, request timeout and retry budget.

USAGE:
  Import what you need: `from config import MODEL_ID, GENERATION_PARAMETERS`
  Values are read once at import time and never change while the server runs.
"""

import os
import logging
from dotenv import load_dotenv


logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# ENVIRONMENT
# -----------------------------------------------------------------------------
# Load environment variables from .env file (if it exists).
load_dotenv()


def _env(name: str, default: str) -> str:
    """Return the stripped value of an env var, or default when it is unset or blank."""
    return os.getenv(name, "").strip() or default


# ============================================================================
# HUGGINGFACE INFERENCE API CONFIGURATION
# ============================================================================
# The API key is required in practice, but it is NOT validated here: a missing
# key is reported when the first chat message tries to reach the model.
# MODEL_ID picks the hosted model; BlenderBot is conversational by default.

HUGGINGFACE_API_KEY = os.getenv("HUGGINGFACE_API_KEY", "").strip()
MODEL_ID = _env("MODEL_ID", "facebook/blenderbot-400M-distill")
HUGGINGFACE_API_URL = _env(
    "HUGGINGFACE_API_URL", "https://api-inference.huggingface.co/models"
).rstrip("/")

# Sent with every request. num_return_sequences=1 because only the first
# generated reply is ever used.
GENERATION_PARAMETERS = {
    "max_length": 128,
    "temperature": 0.8,
    "top_p": 0.95,
    "repetition_penalty": 1.2,
    "num_return_sequences": 1,
}

# ============================================================================
# RETRY POLICY
# ============================================================================
# Hosted models "cold start": the first calls return 503 while weights load.
# Each attempt is bounded by REQUEST_TIMEOUT_SECONDS; between attempts we wait
# 1s, 2s, 4s, 8s (doubling from INITIAL_RETRY_DELAY_SECONDS).

REQUEST_TIMEOUT_SECONDS = 30
MAX_RETRIES = 5
INITIAL_RETRY_DELAY_SECONDS = 1.0

# ============================================================================
# SERVER CONFIGURATION
# ============================================================================

def _load_port() -> int:
    raw = _env("PORT", "8080")
    try:
        return int(raw)
    except ValueError:
        logger.warning("Invalid PORT %r, falling back to 8080", raw)
        return 8080


def _load_allowed_origins() -> list:
    """
    Frontend origins allowed to call the API from a browser.
    ALLOWED_ORIGINS is a comma-separated list; blank entries are ignored.
    """
    raw = os.getenv("ALLOWED_ORIGINS", "")
    origins = [o.strip() for o in raw.split(",") if o.strip()]
    return origins or [
        "http://localhost:3000",
        "https://claude-clone-frontend.vercel.app",
    ]


PORT = _load_port()
ALLOWED_ORIGINS = _load_allowed_origins()
