# core/setup_db.py

from core.database import init_db
from core.settings import DATABASE_URL, configure_logging


def main():
    configure_logging()
    print(f"Creating ward tables in {DATABASE_URL} ...")

    # Create all SQLAlchemy tables
    init_db()

    print("Database initialized successfully.")


if __name__ == "__main__":
    main()
