"""
Application status transitions.

    pending ──► approved
       │
       └─────► rejected

approved and rejected are terminal; nothing re-opens an application.
"""

from typing import Union

from worklink.models.application import ApplicationStatus

TERMINAL_STATUSES = frozenset({ApplicationStatus.APPROVED, ApplicationStatus.REJECTED})

ALLOWED_TRANSITIONS = {
    ApplicationStatus.PENDING: TERMINAL_STATUSES,
    ApplicationStatus.APPROVED: frozenset(),
    ApplicationStatus.REJECTED: frozenset(),
}


def to_status(value: Union[str, ApplicationStatus]) -> ApplicationStatus:
    """Coerce a raw status string, raising ValueError for unknown values."""
    try:
        return ApplicationStatus(value)
    except ValueError:
        valid = ", ".join(s.value for s in ApplicationStatus)
        raise ValueError(f"Invalid status '{value}'. Valid statuses: {valid}")


def is_terminal(status: Union[str, ApplicationStatus]) -> bool:
    return to_status(status) in TERMINAL_STATUSES


def can_transition(current: Union[str, ApplicationStatus], new: Union[str, ApplicationStatus]) -> bool:
    return to_status(new) in ALLOWED_TRANSITIONS[to_status(current)]
