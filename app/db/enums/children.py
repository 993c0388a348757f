"""Child and vaccination enums."""

from enum import Enum


class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"


class VaccinationStatus(str, Enum):
    """
    Derived status of a vaccination record.

    Never stored; computed from completion flag, child age and catalog
    age offset on every read.
    """

    COMPLETED = "completed"
    DUE = "due"
    UPCOMING = "upcoming"


class VaccinationView(str, Enum):
    """Filter views over a child's schedule."""

    ALL = "all"
    DUE = "due"
    COMPLETED = "completed"
