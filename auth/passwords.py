"""Password hashing."""

from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    """Check a plain password against a stored hash. Unknown hash formats never match."""
    try:
        return pwd_context.verify(plain, hashed)
    except ValueError:
        return False
