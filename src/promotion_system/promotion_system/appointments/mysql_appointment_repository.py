from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import AppointmentStatus
from ..database.mysql_base import fetchall, fetchone
from .model import PersonnelAppointment
from .repository import AppointmentRepository


def _to_appointment(r: dict) -> PersonnelAppointment:
    return PersonnelAppointment(
        appointment_id=int(r["appointment_id"]),
        employee_number=r["employee_number"],
        details=r["details"],
        appointment_date=r["appointment_date"],
        status=AppointmentStatus(r["status"]),
        failure_reason=r.get("failure_reason"),
    )


class MySQLAppointmentRepository(AppointmentRepository):
    def __init__(self, cur):
        self._cur = cur

    def create(self, *, employee_number: str, details: str, appointment_date: date) -> int:
        self._cur.execute(
            """
            INSERT INTO personnel_appointments(employee_number, details, appointment_date, status)
            VALUES(%s,%s,%s,%s)
            """,
            (employee_number, details, appointment_date, AppointmentStatus.WAITING.value),
        )
        return int(self._cur.lastrowid)

    def get(self, *, appointment_id: int) -> Optional[PersonnelAppointment]:
        self._cur.execute(
            """
            SELECT appointment_id, employee_number, details, appointment_date, status, failure_reason
            FROM personnel_appointments
            WHERE appointment_id=%s
            """,
            (int(appointment_id),),
        )
        r = fetchone(self._cur)
        return _to_appointment(r) if r else None

    def list_due(self, *, until: date) -> Sequence[PersonnelAppointment]:
        self._cur.execute(
            """
            SELECT appointment_id, employee_number, details, appointment_date, status, failure_reason
            FROM personnel_appointments
            WHERE appointment_date <= %s AND status=%s
            ORDER BY appointment_date, appointment_id
            """,
            (until, AppointmentStatus.WAITING.value),
        )
        return [_to_appointment(r) for r in fetchall(self._cur)]

    def mark(
        self,
        *,
        appointment_id: int,
        status: AppointmentStatus,
        failure_reason: Optional[str] = None,
    ) -> bool:
        self._cur.execute(
            """
            UPDATE personnel_appointments
            SET status=%s, failure_reason=%s, processed_at=NOW()
            WHERE appointment_id=%s AND status=%s
            """,
            (status.value, failure_reason, int(appointment_id), AppointmentStatus.WAITING.value),
        )
        return self._cur.rowcount > 0
