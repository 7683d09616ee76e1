from __future__ import annotations

from dataclasses import dataclass

from .appointments.service import AppointmentSweepService
from .core.constants import PERSONNEL_APPOINTMENT_FORM_KEY
from .database.connection import DatabaseConnection, DBConfig
from .database.unit_of_work import MySQLUnitOfWork, UnitOfWork
from .events.bridge import ExternalEventBridge
from .promotions.service import PromotionService


@dataclass(frozen=True)
class Container:
    uow: UnitOfWork

    promotion_service: PromotionService
    appointment_service: AppointmentSweepService
    event_bridge: ExternalEventBridge


def build_services(uow: UnitOfWork, *, form_key: str = PERSONNEL_APPOINTMENT_FORM_KEY) -> Container:
    promotion_service = PromotionService(uow)
    return Container(
        uow=uow,
        promotion_service=promotion_service,
        appointment_service=AppointmentSweepService(uow),
        event_bridge=ExternalEventBridge(uow, promotion_service, form_key=form_key),
    )


def build_container(*, db_config: dict, form_key: str = PERSONNEL_APPOINTMENT_FORM_KEY) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return build_services(MySQLUnitOfWork(conn), form_key=form_key)
