"""Password hashing.

New hashes use PBKDF2-SHA256 (salted, adaptive). bcrypt hashes written by
earlier installs still verify and are flagged for re-hashing.
"""

from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["pbkdf2_sha256", "bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def verify_and_update(plain_password: str, hashed_password: str) -> tuple[bool, str | None]:
    """Verify and, when the stored hash uses a deprecated scheme, return a replacement."""
    return pwd_context.verify_and_update(plain_password, hashed_password)
