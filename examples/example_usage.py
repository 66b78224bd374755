"""Use the service layer without Flask: print today's attendance figures."""

import importlib

from config import get_settings_module

from taskora.container import AppSettings, build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, settings=AppSettings.from_module(settings))

    today = container.clock().date()
    summary = container.attendance_service.daily_summary(today)
    print(f"{today}: {summary.present} present, {summary.late} late, {summary.absent} absent, {summary.leave} on leave")
    for row in container.attendance_service.daily_sheet(today):
        print(f"  {row.full_name:<24} {row.status.value:<8} {row.worked}")


if __name__ == "__main__":
    main()
