"""Auth-related enums."""

from enum import Enum


class Role(str, Enum):
    """
    User roles.

    - PARENT: Manages own children, vaccinations, medications, bookings
    - DOCTOR: Publishes availability, handles appointment requests
    - ADMIN: Reviews doctor applications
    """

    PARENT = "parent"
    DOCTOR = "doctor"
    ADMIN = "admin"

    @classmethod
    def has_value(cls, value: str) -> bool:
        """Check if value is a valid role."""
        return value in cls._value2member_map_
