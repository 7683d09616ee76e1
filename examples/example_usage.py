"""Example: drive the promotion lifecycle through the service layer (no Flask).

Registers a plan for department 1 and prints the new plan id.
"""

import importlib
from datetime import date, timedelta

from config import get_settings_module

from src.promotion_system.promotion_system.container import build_container
from src.promotion_system.promotion_system.promotions.model import NewDetailPlan


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)
    service = container.promotion_service

    today = date.today()
    plan_id = service.register_plan(
        plan_name="Regular promotion (example)",
        nomination_deadline=today + timedelta(days=14),
        appointment_date=today + timedelta(days=30),
        plan_content="Created by examples/example_usage.py",
        details=[NewDetailPlan(department_id=1, target_grade_id=5, quota_count=2)],
    )
    print(f"plan_id={plan_id}")


if __name__ == "__main__":
    main()
