"""Create the stored-collection table for the sql store backend.

Reads DATABASE_URL (or PG* variables) from .env / environment.

Usage:
  python scripts/create_tables.py
"""

from __future__ import annotations

import pathlib
import sys

from dotenv import load_dotenv

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from lotto_hub.config import resolve_database_url
from lotto_hub.db import create_app_engine
from lotto_hub.models.base import Base

# Import models so they register with Base.metadata
from lotto_hub import models  # noqa: F401


def main() -> int:
    """Create all ORM tables in the target database."""

    load_dotenv()
    env_local = PROJECT_ROOT / ".env.local"
    if env_local.exists():
        load_dotenv(dotenv_path=env_local, override=True)

    engine = create_app_engine(resolve_database_url())
    Base.metadata.create_all(bind=engine)

    print(f"Tables created (or already exist) on {engine.url.render_as_string(hide_password=True)}.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
