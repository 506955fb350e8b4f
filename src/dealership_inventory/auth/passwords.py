"""
dealership_inventory.auth.passwords

Password hashing (Passlib CryptContext).
"""

from __future__ import annotations

from passlib.context import CryptContext
from passlib.exc import UnknownHashError

# pbkdf2_sha256 is pure-Python in passlib; no native bcrypt build required.
_pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return _pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return _pwd_context.verify(password, password_hash)
    except (UnknownHashError, ValueError):
        # Malformed/foreign hashes are bad credentials, not server errors.
        return False
