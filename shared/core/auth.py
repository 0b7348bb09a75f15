import logging
from datetime import datetime, timedelta
from typing import Optional
from fastapi import status, Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from shared.models.users import User
from shared.core.config import settings
from shared.helpers.json_response_helper import error_response
from shared.core.schemas import UserToken
from shared.core.database import get_db
from shared.utils.enums import STAFF_ROLES, UserRole, UserStatus

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def create_access_token(data: dict, expires_minutes: Optional[int] = None):
    payload = data.copy()
    expires = datetime.utcnow() + timedelta(
        minutes=expires_minutes or settings.JWT_EXPIRE_MINUTES)
    payload["exp"] = expires

    return jwt.encode(payload, settings.JWT_SECRET,
                      algorithm=settings.JWT_ALGORITHM)


def create_user_token(user: User) -> str:
    return create_access_token({
        "user_id": user.id,
        "email": user.email,
        "role": user.role,
        "name": user.full_name,
    })


def verify_token(token: str) -> UserToken:
    """Verify and decode a JWT access token."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET,
                             algorithms=[settings.JWT_ALGORITHM])
        return UserToken(**payload)
    except (JWTError, ValueError):
        return error_response(
            message="Token invalide ou expiré",
            http_status=status.HTTP_401_UNAUTHORIZED
        )


def validate_current_token(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
) -> UserToken:
    if credentials is None:
        return error_response(
            message="Non autorisé",
            http_status=status.HTTP_401_UNAUTHORIZED
        )

    user_data = verify_token(credentials.credentials)

    user = db.query(User).filter(User.id == user_data.user_id).first()

    if not user:
        return error_response(message="Utilisateur non trouvé", http_status=404)

    if user.status != UserStatus.ACTIVE.value:
        return error_response(
            message="Compte inactif, accès refusé",
            http_status=status.HTTP_403_FORBIDDEN
        )

    user_data.status = user.status
    user_data.role = user.role
    return user_data


def require_staff(current_user: UserToken = Depends(validate_current_token)) -> UserToken:
    if current_user.role not in STAFF_ROLES:
        logger.info(f"Staff access refused for user {current_user.user_id}")
        return error_response(
            message="Accès réservé à l'équipe de gestion",
            http_status=status.HTTP_403_FORBIDDEN
        )
    return current_user


def require_admin(current_user: UserToken = Depends(validate_current_token)) -> UserToken:
    if current_user.role != UserRole.ADMIN.value:
        logger.info(f"Admin access refused for user {current_user.user_id}")
        return error_response(
            message="Accès réservé aux administrateurs",
            http_status=status.HTTP_403_FORBIDDEN
        )
    return current_user
