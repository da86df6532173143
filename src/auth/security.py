"""
Password hashing for Civic Reporter accounts
"""

import secrets

from passlib.context import CryptContext

password_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(plain_password: str) -> str:
    return password_context.hash(plain_password)


def verify_password(plain_password: str, password_hash: str) -> bool:
    return password_context.verify(plain_password, password_hash)


def unusable_password_hash() -> str:
    """
    Hash of a random secret nobody knows.

    Used for accounts that cannot log in with a password (the anonymous
    user, accounts created through OTP login).
    """
    return hash_password(secrets.token_urlsafe(32))
