"""Contoh: memakai service layer langsung (tanpa Flask).

Controllers hanya lapisan tipis; aturan bisnis ada di services.
"""

import importlib
from datetime import date

from config import get_settings_module

from src.plantation_hr.plantation_hr.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, rest_weekday=settings.WEEKLY_REST_DAY)

    print("Hari kerja Januari 2024:", container.calendar_service.count_working_days(date(2024, 1, 1), date(2024, 1, 31)))
    report = container.transfer_service.auto_complete_due()
    print("Mutasi selesai:", [t.transfer_id for t in report.completed], "gagal:", report.failures)


if __name__ == "__main__":
    main()
