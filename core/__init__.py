from .database import get_db_context, init_db, configure_database, is_initialized, SessionLocal, Base
from .exceptions import WardError, ValidationError, DuplicateKeyError, NotInitializedError, StoreIOError

# Streamlit helpers (core.helpers, core.session_manager) are imported
# directly by the pages so the services stay usable without Streamlit.

__all__ = [
    "get_db_context",
    "init_db",
    "configure_database",
    "is_initialized",
    "SessionLocal",
    "Base",
    "WardError",
    "ValidationError",
    "DuplicateKeyError",
    "NotInitializedError",
    "StoreIOError",
]
