import secrets
import string
from passlib.context import CryptContext

bcrypt_context = CryptContext(schemes=['bcrypt'], deprecated='auto')

SPECIAL_CHARS = "!@#$%&*?"


def hash_password(password: str) -> str:
    return bcrypt_context.hash(password)


def verify_password(password: str, hashed: str | None) -> bool:
    if not hashed:
        return False
    return bcrypt_context.verify(password, hashed)


def generate_temporary_password(length: int = 12) -> str:
    """Random password with at least one upper, lower, digit and symbol."""
    length = max(length, 8)
    pools = [string.ascii_uppercase, string.ascii_lowercase,
             string.digits, SPECIAL_CHARS]

    chars = [secrets.choice(pool) for pool in pools]
    alphabet = "".join(pools)
    chars.extend(secrets.choice(alphabet) for _ in range(length - len(chars)))
    secrets.SystemRandom().shuffle(chars)
    return "".join(chars)
