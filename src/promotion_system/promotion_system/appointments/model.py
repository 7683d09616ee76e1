from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import AppointmentStatus


@dataclass(frozen=True)
class PersonnelAppointment:
    """A personnel order approved earlier, waiting for its effective date."""

    appointment_id: int
    employee_number: str
    details: str
    appointment_date: date
    status: AppointmentStatus
    failure_reason: Optional[str] = None


@dataclass(frozen=True)
class SweepReport:
    run_date: date
    completed: list[int]
    failed: dict[int, str]

    @property
    def total(self) -> int:
        return len(self.completed) + len(self.failed)
