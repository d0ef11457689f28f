import os
import logging

from dotenv import load_dotenv

# Load .env so the ward settings are available even when running via Streamlit
load_dotenv()

BASE_DIR = os.path.dirname(os.path.dirname(__file__))
DEFAULT_DB_PATH = os.path.join(BASE_DIR, "data", "ward.db")

DATABASE_URL = os.getenv("WARD_DATABASE_URL", f"sqlite:///{DEFAULT_DB_PATH}")

# Presentation only; the store always writes UTC
DISPLAY_TIMEZONE = os.getenv("WARD_DISPLAY_TIMEZONE", "Asia/Kolkata")

LOG_LEVEL = os.getenv("WARD_LOG_LEVEL", "INFO").upper()


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


# Forward-only unsent -> sent -> collected. Off unless explicitly enabled.
STRICT_STATUS_TRANSITIONS = _env_flag("WARD_STRICT_STATUS")


def configure_logging(level: str | None = None):
    """Set up root logging once for the Streamlit app and the ops scripts."""
    logging.basicConfig(
        level=level or LOG_LEVEL,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
