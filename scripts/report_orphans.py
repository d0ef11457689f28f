# scripts/report_orphans.py
#
# List dependent rows whose registration number no longer matches a patient.
# Older databases renamed patients without moving their consultations; this
# shows what was left behind so it can be re-keyed by hand.

import sys

from core.database import init_db, get_db_context
from core.settings import DATABASE_URL
from services.view_service import find_orphaned_rows


def main() -> int:
    print(f"Database: {DATABASE_URL}")
    init_db()

    with get_db_context() as db:
        orphans = find_orphaned_rows(db=db)

    if not orphans:
        print("No orphaned rows found.")
        return 0

    for table, keys in orphans.items():
        print(f"{table}:")
        for key, count in sorted(keys.items()):
            print(f"  {key}: {count} row(s)")
    return 1


if __name__ == "__main__":
    sys.exit(main())
