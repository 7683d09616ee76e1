from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import ContextManager, Iterator, Protocol

from ..appointments.mysql_appointment_repository import MySQLAppointmentRepository
from ..appointments.repository import AppointmentRepository
from ..organization.mysql_directory import MySQLDirectory
from ..organization.mysql_employee_repository import MySQLEmployeeRepository
from ..organization.repository import Directory, EmployeeRepository
from ..promotions.mysql_promotion_repository import MySQLPromotionRepository
from ..promotions.repository import PromotionRepository
from .connection import DatabaseConnection
from .mysql_base import db_cursor


@dataclass(frozen=True)
class TransactionScope:
    """Repositories that share one connection; everything commits or rolls back together."""

    promotions: PromotionRepository
    directory: Directory
    employees: EmployeeRepository
    appointments: AppointmentRepository


class UnitOfWork(Protocol):
    def transaction(self) -> ContextManager[TransactionScope]:
        raise NotImplementedError


class MySQLUnitOfWork(UnitOfWork):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @contextmanager
    def transaction(self) -> Iterator[TransactionScope]:
        with db_cursor(self._conn_factory) as (_, cur):
            yield TransactionScope(
                promotions=MySQLPromotionRepository(cur),
                directory=MySQLDirectory(cur),
                employees=MySQLEmployeeRepository(cur),
                appointments=MySQLAppointmentRepository(cur),
            )
