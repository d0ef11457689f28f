import enum


class Gender(str, enum.Enum):
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"


class Location(str, enum.Enum):
    EMERGENCY = "Emergency"
    ICU = "ICU"
    HDU = "HDU"
    WARD_MALE = "Ward Male"
    WARD_FEMALE = "Ward Female"
    OTHER = "Other"


class LabType(str, enum.Enum):
    BLOOD = "blood"
    URINE = "urine"
    MISCELLANEOUS = "miscellaneous"


class ImagingType(str, enum.Enum):
    XRAY = "X-RAY"
    CT = "CT"
    MRI = "MRI"
    USG = "USG"


class TaskStatus(str, enum.Enum):
    UNSENT = "unsent"
    SENT = "sent"
    COLLECTED = "collected"


# unsent -> sent -> collected
STATUS_ORDER = [TaskStatus.UNSENT, TaskStatus.SENT, TaskStatus.COLLECTED]


class Category(str, enum.Enum):
    """Which of the two payload shapes a work item carries."""
    LAB = "lab"
    IMAGING = "imaging"


class LedgerTable(str, enum.Enum):
    TASKS = "tasks"
    OLDLABS = "oldlabs"
    CONSULTATIONS = "consultations"
    OLDCONSULTATIONS = "oldconsultations"


def values(enum_cls) -> list[str]:
    return [member.value for member in enum_cls]


def check_in(column: str, enum_cls) -> str:
    """SQL CHECK expression restricting a column to the enum's values."""
    quoted = ", ".join("'" + v.replace("'", "''") + "'" for v in values(enum_cls))
    return f'"{column}" IN ({quoted})'
