import hashlib
from datetime import datetime, timedelta
from typing import Optional

from jose import JWTError, jwt

from shared.core.config import settings

RESET_PURPOSE = "password_reset"


class InvalidResetToken(Exception):
    pass


def password_fingerprint(password_hash: Optional[str]) -> str:
    """Short digest of the stored hash; changes whenever the password does."""
    return hashlib.sha256((password_hash or "").encode("utf-8")).hexdigest()[:16]


def create_reset_token(user_id: str, email: str, password_hash: Optional[str],
                       expire_minutes: int = None) -> str:
    expires = datetime.utcnow() + timedelta(minutes=expire_minutes or settings.RESET_TOKEN_EXPIRE_MINUTES)
    payload = {
        "sub": user_id,
        "email": email,
        "pwd": password_fingerprint(password_hash),
        "purpose": RESET_PURPOSE,
        "exp": expires,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def verify_reset_token(token: str) -> dict:
    try:
        claims = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        raise InvalidResetToken(str(e)) from e

    if claims.get("purpose") != RESET_PURPOSE or not claims.get("sub"):
        raise InvalidResetToken("not a password reset token")
    return claims
