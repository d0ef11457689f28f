# scripts/inspect_db.py
#
# Print row counts per table and the most recent current tasks.

from core.database import init_db, get_db_context
from core.settings import DATABASE_URL
from models import Task
from services.view_service import table_counts


def main():
    print("DB:", DATABASE_URL)
    init_db()

    with get_db_context() as db:
        for table, count in table_counts(db=db).items():
            print(f"{table:<18} {count}")

        print("\nLatest tasks:")
        for t in db.query(Task).order_by(Task.id.desc()).limit(10).all():
            print(t.id, t.registration_number, t.date_and_time, t.item_type, t.subtype, t.task_status)


if __name__ == "__main__":
    main()
