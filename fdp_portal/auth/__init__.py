"""
Authentication Module
Admin credential checks and JWT bearer tokens
"""

from fdp_portal.auth.password import hash_password, verify_password, authenticate_admin
from fdp_portal.auth.dependencies import (
    ADMIN_ROLE,
    create_access_token,
    create_admin_token,
    decode_access_token,
    get_current_admin
)

__all__ = [
    "ADMIN_ROLE",
    "hash_password",
    "verify_password",
    "authenticate_admin",
    "create_access_token",
    "create_admin_token",
    "decode_access_token",
    "get_current_admin",
]
