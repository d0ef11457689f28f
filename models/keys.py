# models/keys.py
#
# Natural keys callers use to point at a ledger row. They are resolved to the
# internal surrogate id before anything is changed.

from dataclasses import dataclass

from models.enums import Category


@dataclass(frozen=True)
class WorkItemKey:
    """A lab or imaging row in tasks/oldlabs.

    subtype=None matches any subtype (the edit screen identifies a row by
    registration number, timestamp and type only).
    """
    registration_number: str
    date_and_time: str
    category: Category
    item_type: str
    subtype: str | None = None

    @classmethod
    def for_row(cls, row) -> "WorkItemKey":
        return cls(
            registration_number=row.registration_number,
            date_and_time=row.date_and_time,
            category=row.category,
            item_type=row.item_type,
            subtype=row.subtype,
        )


@dataclass(frozen=True)
class ConsultationKey:
    registration_number: str
    date_and_time: str
    consult: str

    @classmethod
    def for_row(cls, row) -> "ConsultationKey":
        return cls(
            registration_number=row.registration_number,
            date_and_time=row.date_and_time,
            consult=row.consult,
        )
