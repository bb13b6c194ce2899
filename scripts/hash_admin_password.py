#!/usr/bin/env python
"""Print an ADMIN_PASSWORD_HASH value for .env.

Usage:
  python scripts/hash_admin_password.py
"""
import os
import sys
from getpass import getpass

sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from fdp_portal.auth.password import hash_password


def main():
    password = getpass("Admin password: ")
    if len(password) < 8:
        print("Password must be at least 8 characters")
        sys.exit(1)
    if password != getpass("Confirm password: "):
        print("Passwords do not match")
        sys.exit(1)

    print(f"ADMIN_PASSWORD_HASH={hash_password(password)}")


if __name__ == '__main__':
    main()
