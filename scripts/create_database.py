#!/usr/bin/env python
"""Create the PostgreSQL database named in `DATABASE_URL` (.env).

Usage:
  python scripts/create_database.py [--password PASSWORD]
"""
import argparse
import os
import sys
from getpass import getpass

import psycopg2
from psycopg2 import OperationalError, sql
from sqlalchemy.engine import make_url

# Ensure project root is on sys.path so `fdp_portal` can be imported
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from fdp_portal.config import settings


def connect_admin(url, password):
    return psycopg2.connect(
        dbname="postgres",
        user=url.username,
        password=password,
        host=url.host or "localhost",
        port=url.port or 5432,
    )


def ensure_database(conn, name):
    conn.autocommit = True
    cur = conn.cursor()
    try:
        cur.execute("SELECT 1 FROM pg_database WHERE datname=%s", (name,))
        if cur.fetchone():
            print(f"Database '{name}' already exists.")
        else:
            cur.execute(sql.SQL("CREATE DATABASE {};").format(sql.Identifier(name)))
            print(f"Database '{name}' created.")
    finally:
        cur.close()
        conn.close()


def main():
    url = make_url(settings.DATABASE_URL)
    if not url.drivername.startswith("postgresql"):
        print("DATABASE_URL is not a PostgreSQL URL; nothing to create")
        sys.exit(1)
    if not url.database:
        print("No database name found in DATABASE_URL")
        sys.exit(1)

    parser = argparse.ArgumentParser()
    parser.add_argument("--password", "-p", help="Postgres admin password")
    args = parser.parse_args()

    password = args.password or os.getenv("POSTGRES_PASSWORD") or url.password

    try:
        conn = connect_admin(url, password)
    except OperationalError:
        if not sys.stdin.isatty():
            print("Password authentication failed. Provide the password via --password or POSTGRES_PASSWORD env var.")
            sys.exit(1)
        print("Password authentication failed. Please enter the Postgres password for user:", url.username)
        try:
            conn = connect_admin(url, getpass())
        except OperationalError as e:
            print("Error creating database:", e)
            sys.exit(1)

    try:
        ensure_database(conn, url.database)
    except psycopg2.Error as e:
        print("Error creating database:", e)
        sys.exit(1)


if __name__ == "__main__":
    main()
