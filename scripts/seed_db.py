from __future__ import annotations

import importlib
from pathlib import Path

from config import get_settings_module

from taskora.database.bootstrap import DEMO_USERS, apply_seed_sql, ensure_demo_users


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    seed_path = Path(__file__).resolve().parents[1] / "database" / "seed.sql"
    apply_seed_sql(db_config, seed_path=seed_path)
    ensure_demo_users(db_config)

    print(f"OK: Seeded {db_config.get('database')} with demo accounts:")
    for email, password, _, role, _ in DEMO_USERS:
        print(f"  {role:<12} {email} / {password}")


if __name__ == "__main__":
    main()
