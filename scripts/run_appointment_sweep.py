"""Daily personnel-appointment sweep.

Schedule once a day shortly after midnight, e.g. cron:
    0 0 * * *  cd /srv/hr-promotion && python scripts/run_appointment_sweep.py
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import importlib

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.promotion_system.promotion_system.common.datetime_utils import parse_iso_date
from src.promotion_system.promotion_system.common.logging_config import configure_logging
from src.promotion_system.promotion_system.container import build_container


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Apply personnel appointments whose date has come.")
    parser.add_argument("--date", type=parse_iso_date, default=None, help="Run as if today were YYYY-MM-DD")
    args = parser.parse_args(argv)

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    configure_logging(level=getattr(settings, "LOG_LEVEL", "INFO"), log_json=bool(getattr(settings, "LOG_JSON", False)))

    container = build_container(db_config=dict(settings.DB_CONFIG))
    report = container.appointment_service.run(today=args.date)

    print(
        f"OK: appointment sweep {report.run_date.isoformat()} -> "
        f"completed={len(report.completed)} failed={len(report.failed)}"
    )
    return 1 if report.failed else 0


if __name__ == "__main__":
    sys.exit(main())
