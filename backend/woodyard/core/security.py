"""Password hashing and session tokens"""
import secrets

from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=12)


def hash_password(plain: str) -> str:
    return pwd_context.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    """False for malformed hashes instead of raising"""
    try:
        return pwd_context.verify(plain, hashed)
    except ValueError:
        return False


def generate_session_id() -> str:
    return secrets.token_urlsafe(32)
