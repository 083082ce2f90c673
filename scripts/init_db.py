"""Create the timeclock schema in the configured MySQL database.

Usage: ``APP_ENV=production python scripts/init_db.py``
"""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.timeclock.timeclock.database.bootstrap import apply_schema, list_tables
from src.timeclock.timeclock.main import SCHEMA_PATH


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_schema(db_config, schema_path=SCHEMA_PATH)
    tables = sorted(list_tables(db_config))
    print(f"OK: {db_config.get('database')} has tables: {', '.join(tables)}")


if __name__ == "__main__":
    main()
