#!/usr/bin/env python
"""Create every table directly from the models (local SQLite setups).

Use `alembic upgrade head` against PostgreSQL instead.
"""
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from fdp_portal.database import Base, create_sync_engine
import fdp_portal.models  # noqa: F401


def main():
    engine = create_sync_engine()
    Base.metadata.create_all(engine)
    print(f"[OK] Created {len(Base.metadata.tables)} tables")


if __name__ == '__main__':
    main()
