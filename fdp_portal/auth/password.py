"""
Admin Credential Checks
The admin password lives in settings only as a passlib hash
"""

from typing import Optional

from passlib.context import CryptContext

# pbkdf2 keeps passlib independent of the bcrypt backend version
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    """Hash for ADMIN_PASSWORD_HASH"""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """
    Verify a password against a hash
    
    An empty or unreadable hash never matches.
    """
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        return False


def authenticate_admin(
    email: str,
    password: str,
    admin_email: Optional[str],
    admin_password_hash: Optional[str]
) -> bool:
    """
    Check a login against the configured admin account
    
    Args:
        email: Submitted email, compared case-insensitively
        password: Submitted plain password
        admin_email: ADMIN_EMAIL
        admin_password_hash: ADMIN_PASSWORD_HASH
        
    Returns:
        True only when both the email and the password match
    """
    if not admin_email or email.strip().lower() != admin_email.strip().lower():
        # Same hashing cost as a wrong password
        pwd_context.dummy_verify()
        return False
    return verify_password(password, admin_password_hash)
