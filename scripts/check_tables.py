#!/usr/bin/env python
"""List the portal tables present in the database and report missing ones."""
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from sqlalchemy import inspect

from fdp_portal.database import create_sync_engine, metadata
import fdp_portal.models  # noqa: F401


def main():
    engine = create_sync_engine()
    present = set(inspect(engine).get_table_names())
    expected = set(metadata.tables)

    print("tables:", sorted(present & expected))
    missing = sorted(expected - present)
    if missing:
        print("missing:", missing)
        sys.exit(1)
    print("[OK] All tables present")


if __name__ == '__main__':
    main()
