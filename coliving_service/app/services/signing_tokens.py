from datetime import datetime, timedelta

from jose import JWTError, jwt

from shared.core.config import settings
from ..enum.contract_enum import SignerRole


class InvalidSigningToken(Exception):
    pass


def create_signing_token(contract_id: str, signer_email: str, signer_name: str,
                         signer_role: str = SignerRole.TENANT.value, expire_days: int = None) -> str:
    expires = datetime.utcnow() + timedelta(days=expire_days or settings.SIGNING_TOKEN_EXPIRE_DAYS)
    payload = {
        "contractId": contract_id,
        "signerEmail": signer_email,
        "signerName": signer_name,
        "signerRole": signer_role,
        "purpose": "contract_signature",
        "exp": expires,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def verify_signing_token(token: str) -> dict:
    """Decoded claims of a valid, unexpired signing token."""
    try:
        claims = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        raise InvalidSigningToken(str(e)) from e

    if claims.get("purpose") != "contract_signature" or not claims.get("contractId"):
        raise InvalidSigningToken("not a signing token")
    return claims
