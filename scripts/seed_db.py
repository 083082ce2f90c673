from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.timeclock.timeclock.database.bootstrap import DEMO_EMPLOYEES, ensure_demo_employees


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    ensure_demo_employees(db_config)

    pins = ", ".join(f"{pin} ({role})" for pin, _, _, role in DEMO_EMPLOYEES)
    print(
        "OK: Seeded demo employees -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')} "
        f"PINs: {pins}"
    )


if __name__ == "__main__":
    main()
