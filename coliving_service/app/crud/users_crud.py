import logging
from typing import List, Tuple

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from shared.core.schemas import UserToken
from shared.helpers.email_helper import EmailHelper
from shared.helpers.json_response_helper import error_response, not_found_response
from shared.helpers.password_helper import generate_temporary_password
from shared.models.users import User
from shared.utils.app_status_code import AppStatusCode
from shared.utils.enums import UserRole, UserStatus
from ..enum.coliving_enum import BLOCKING_BOOKING_STATUSES, BookingStatus
from ..models.bookings import Booking
from ..schemas.users_schemas import UserCreate, UserOut, UserRequest, UserUpdate
from ..services.email_templates import get_welcome_email_template

logger = logging.getLogger(__name__)

USER_DELETE_BLOCKING_STATUSES = BLOCKING_BOOKING_STATUSES + (BookingStatus.PENDING.value,)
LOCKED_OUT_STATUSES = (UserStatus.INACTIVE.value, UserStatus.SUSPENDED.value)


def _count_user_bookings(db: Session, user_id: str, statuses=None) -> int:
    query = db.query(func.count(Booking.id)).filter(Booking.user_id == user_id)
    if statuses:
        query = query.filter(Booking.status.in_(statuses))
    return query.scalar() or 0


def _count_admins(db: Session) -> int:
    return db.query(func.count(User.id)).filter(User.role == UserRole.ADMIN.value).scalar() or 0


def to_user_out(db: Session, user: User) -> UserOut:
    out = UserOut.model_validate(user)
    out.bookings_count = _count_user_bookings(db, user.id)
    return out


def get_user_or_404(db: Session, user_id: str) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        return not_found_response("Utilisateur non trouvé")
    return user


def build_user_filters(params: UserRequest):
    filters = []

    if params.role and params.role.lower() != "all":
        filters.append(User.role == params.role.upper())

    if params.status and params.status.lower() != "all":
        filters.append(User.status == params.status.upper())

    if params.search:
        search_term = f"%{params.search}%"
        filters.append(or_(
            User.first_name.ilike(search_term),
            User.last_name.ilike(search_term),
            User.email.ilike(search_term),
        ))

    return filters


# ----------------- Get All Users -----------------
def get_users(db: Session, params: UserRequest) -> Tuple[List[UserOut], int]:
    base_query = db.query(User).filter(*build_user_filters(params))
    total = base_query.with_entities(func.count(User.id)).scalar() or 0

    users = (
        base_query
        .order_by(User.created_at.desc(), User.last_name.asc())
        .offset(params.skip)
        .limit(params.limit)
        .all()
    )
    return [to_user_out(db, u) for u in users], total


def find_user_by_email(db: Session, email: str):
    return db.query(User).filter(func.lower(User.email) == email.strip().lower()).first()


# ----------------- Create User -----------------
def create_user(db: Session, data: UserCreate, send_welcome: bool = True) -> User:
    if find_user_by_email(db, data.email):
        return error_response(
            message="Un utilisateur avec cet email existe déjà",
            status_code=AppStatusCode.BUSINESS_RULE_VIOLATION
        )

    user = User(**data.model_dump(mode="json"))
    user.email = user.email.lower()

    temporary_password = None
    if data.role in (UserRole.ADMIN, UserRole.MANAGER):
        temporary_password = generate_temporary_password()
        user.set_password(temporary_password)

    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"User {user.email} created with role {user.role}")

    if temporary_password and send_welcome:
        EmailHelper().send_email(
            recipients=[user.email],
            subject="Bienvenue - vos identifiants",
            html_body=get_welcome_email_template(user.first_name, user.email, temporary_password)
        )
    return user


# ----------------- Update User -----------------
def update_user(db: Session, user_id: str, data: UserUpdate, current_user: UserToken) -> User:
    user = get_user_or_404(db, user_id)
    update_data = data.model_dump(exclude_unset=True, mode="json")

    new_email = update_data.get("email")
    if new_email and new_email.lower() != user.email.lower():
        if find_user_by_email(db, new_email):
            return error_response(
                message="Un utilisateur avec cet email existe déjà",
                status_code=AppStatusCode.BUSINESS_RULE_VIOLATION
            )
        update_data["email"] = new_email.lower()

    if (update_data.get("status") in LOCKED_OUT_STATUSES
            and _count_user_bookings(db, user.id, BLOCKING_BOOKING_STATUSES)):
        return error_response(
            message="Impossible de désactiver un utilisateur avec des réservations actives",
            status_code=AppStatusCode.BUSINESS_RULE_VIOLATION
        )

    demoting = (
        user.role == UserRole.ADMIN.value
        and update_data.get("role") not in (None, UserRole.ADMIN.value)
    )
    if demoting and _count_admins(db) <= 1:
        return error_response(
            message="Impossible de retirer le rôle du dernier administrateur",
            status_code=AppStatusCode.BUSINESS_RULE_VIOLATION
        )

    for key, value in update_data.items():
        setattr(user, key, value)

    db.commit()
    db.refresh(user)
    return user


# ----------------- Delete User -----------------
def delete_user(db: Session, user_id: str, current_user: UserToken):
    user = get_user_or_404(db, user_id)

    if user.id == current_user.user_id:
        return error_response(message="Vous ne pouvez pas supprimer votre propre compte")

    if user.role == UserRole.ADMIN.value and _count_admins(db) <= 1:
        return error_response(
            message="Impossible de supprimer le dernier administrateur",
            status_code=AppStatusCode.BUSINESS_RULE_VIOLATION
        )

    if _count_user_bookings(db, user.id, USER_DELETE_BLOCKING_STATUSES):
        return error_response(
            message="Impossible de supprimer un utilisateur avec des réservations en cours",
            status_code=AppStatusCode.BUSINESS_RULE_VIOLATION
        )

    for booking in list(user.bookings):
        db.delete(booking)
    db.delete(user)
    db.commit()
    logger.info(f"User {user_id} deleted")
