from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import AppointmentStatus
from .model import PersonnelAppointment


class AppointmentRepository(Protocol):
    def create(self, *, employee_number: str, details: str, appointment_date: date) -> int:
        raise NotImplementedError

    def get(self, *, appointment_id: int) -> Optional[PersonnelAppointment]:
        raise NotImplementedError

    def list_due(self, *, until: date) -> Sequence[PersonnelAppointment]:
        """WAITING appointments whose appointment_date <= until, oldest first."""

        raise NotImplementedError

    def mark(
        self,
        *,
        appointment_id: int,
        status: AppointmentStatus,
        failure_reason: Optional[str] = None,
    ) -> bool:
        """Move a WAITING appointment to COMPLETE/FAILED; False if it was not WAITING."""

        raise NotImplementedError
