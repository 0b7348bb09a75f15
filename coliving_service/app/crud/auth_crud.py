import logging

from sqlalchemy.orm import Session

from shared.core.auth import create_user_token
from shared.core.config import settings
from shared.core.schemas import UserToken
from shared.helpers.email_helper import EmailHelper
from shared.helpers.json_response_helper import error_response
from shared.models.users import User
from shared.utils.app_status_code import AppStatusCode
from shared.utils.enums import STAFF_ROLES, UserStatus
from ..schemas.users_schemas import ChangePasswordRequest, ForgotPasswordRequest, LoginRequest, ResetPasswordRequest
from ..services.email_templates import get_password_reset_email_template
from ..services.password_reset_tokens import (
    InvalidResetToken, create_reset_token, password_fingerprint, verify_reset_token)
from .users_crud import find_user_by_email, get_user_or_404

logger = logging.getLogger(__name__)


def login(db: Session, data: LoginRequest):
    user: User = find_user_by_email(db, data.email)

    if not user or not user.verify_password(data.password):
        logger.info(f"Failed login for {data.email}")
        return error_response(
            message="Email ou mot de passe incorrect",
            status_code=AppStatusCode.AUTHENTICATION_USER_INVALID,
            http_status=401
        )

    if user.role not in STAFF_ROLES:
        return error_response(
            message="Accès réservé à l'équipe de gestion",
            status_code=AppStatusCode.AUTHENTICATION_FORBIDDEN,
            http_status=403
        )

    if user.status != UserStatus.ACTIVE.value:
        return error_response(
            message="Compte inactif, accès refusé",
            status_code=AppStatusCode.AUTHENTICATION_USER_INACTIVE,
            http_status=403
        )

    return user, create_user_token(user)


def change_password(db: Session, current_user: UserToken, data: ChangePasswordRequest):
    user = get_user_or_404(db, current_user.user_id)

    if not user.verify_password(data.current_password):
        return error_response(
            message="Mot de passe actuel incorrect",
            status_code=AppStatusCode.AUTHENTICATION_USER_INVALID
        )

    user.set_password(data.new_password)
    db.commit()
    logger.info(f"Password changed for {user.email}")


# ----------------- Password reset -----------------
def _can_reset(user: User) -> bool:
    return bool(user and user.password and user.role in STAFF_ROLES
                and user.status == UserStatus.ACTIVE.value)


def request_password_reset(db: Session, data: ForgotPasswordRequest) -> bool:
    """Email a reset link to an active staff account; silent for anything else."""
    user = find_user_by_email(db, data.email)
    if not _can_reset(user):
        logger.info(f"Password reset requested for unknown or ineligible account {data.email}")
        return False

    token = create_reset_token(user.id, user.email, user.password)
    reset_url = f"{settings.APP_BASE_URL.rstrip('/')}/auth/reset-password?token={token}"
    logger.info(f"Password reset link issued for {user.email}")
    return EmailHelper().send_email(
        recipients=[user.email],
        subject="Réinitialisation de votre mot de passe",
        html_body=get_password_reset_email_template(
            user.first_name, reset_url, settings.RESET_TOKEN_EXPIRE_MINUTES)
    )


def get_reset_user(db: Session, token: str) -> User:
    try:
        claims = verify_reset_token(token)
    except InvalidResetToken as e:
        logger.info(f"Rejected password reset token: {e}")
        claims = None

    user = db.query(User).filter(User.id == claims["sub"]).first() if claims else None

    # a used link no longer matches the stored password
    if not _can_reset(user) or claims.get("pwd") != password_fingerprint(user.password):
        return error_response(
            message="Token invalide ou expiré",
            status_code=AppStatusCode.AUTHENTICATION_TOKEN_INVALID
        )
    return user


def reset_password(db: Session, data: ResetPasswordRequest):
    user = get_reset_user(db, data.token)
    user.set_password(data.password)
    db.commit()
    logger.info(f"Password reset for {user.email}")
