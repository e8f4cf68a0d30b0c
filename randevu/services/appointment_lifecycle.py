"""Appointment status transitions.

``pending`` is the only initial state. ``rejected``, ``cancelled`` and
``completed`` are terminal; ``confirmed`` can still be completed or
cancelled by the provider.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Optional, Tuple

from randevu.exceptions import InvalidTransitionError
from randevu.schemas.appointment_schema import AppointmentStatus, TERMINAL_STATUSES


class ActorRole(str, Enum):
    customer = "customer"
    # Barbers and the employee assigned to the appointment
    provider = "provider"


TRANSITIONS: Dict[Tuple[AppointmentStatus, AppointmentStatus], FrozenSet[ActorRole]] = {
    (AppointmentStatus.pending, AppointmentStatus.confirmed): frozenset({ActorRole.provider}),
    (AppointmentStatus.pending, AppointmentStatus.rejected): frozenset({ActorRole.provider}),
    (AppointmentStatus.pending, AppointmentStatus.cancelled): frozenset({ActorRole.customer}),
    (AppointmentStatus.confirmed, AppointmentStatus.completed): frozenset({ActorRole.provider}),
    (AppointmentStatus.confirmed, AppointmentStatus.cancelled): frozenset({ActorRole.provider}),
}


@dataclass(frozen=True)
class AppointmentEvent:
    """Emitted after every committed creation or status change."""
    appointment_id: str
    previous_status: Optional[AppointmentStatus]
    new_status: AppointmentStatus
    customer_id: str
    barber_id: str
    employee_id: Optional[str] = None


def is_terminal(status: AppointmentStatus) -> bool:
    return AppointmentStatus(status) in TERMINAL_STATUSES


def can_transition(current: AppointmentStatus, target: AppointmentStatus, actor: ActorRole) -> bool:
    allowed = TRANSITIONS.get((AppointmentStatus(current), AppointmentStatus(target)))
    return allowed is not None and ActorRole(actor) in allowed


def ensure_transition(current: AppointmentStatus, target: AppointmentStatus, actor: ActorRole) -> None:
    if not can_transition(current, target, actor):
        raise InvalidTransitionError(
            f"Cannot move appointment from '{AppointmentStatus(current).value}' "
            f"to '{AppointmentStatus(target).value}' as {ActorRole(actor).value}"
        )


def slot_key(barber_id: str, employee_id: Optional[str], date: str, time: str) -> str:
    """Deterministic identifier of a (provider, employee, date, time) slot."""
    return f"{barber_id}|{employee_id or '-'}|{date}|{time}"
