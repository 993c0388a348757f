"""Structured logging helpers (PHI-safe).

Only opaque identifiers go into log context. Child names, dates of birth,
health issue labels and medication details never do.
"""

from typing import Any


def build_log_context(
    *,
    user_id: str | None = None,
    child_id: str | None = None,
    doctor_id: str | None = None,
    record_id: str | None = None,
    slot_id: str | None = None,
    appointment_id: str | None = None,
) -> dict[str, Any]:
    """Return a PHI-safe log context dict."""
    context: dict[str, Any] = {}
    if user_id:
        context["user_id"] = user_id
    if child_id:
        context["child_id"] = child_id
    if doctor_id:
        context["doctor_id"] = doctor_id
    if record_id:
        context["record_id"] = record_id
    if slot_id:
        context["slot_id"] = slot_id
    if appointment_id:
        context["appointment_id"] = appointment_id
    return context
