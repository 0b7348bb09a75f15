from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from shared.core.auth import validate_current_token
from shared.core.database import get_db
from shared.core.schemas import JsonOutResult, UserToken
from shared.helpers.json_response_helper import success_response
from ..crud import auth_crud as crud
from ..crud.users_crud import get_user_or_404, to_user_out
from ..schemas.users_schemas import (
    ChangePasswordRequest, ForgotPasswordRequest, LoginOut, LoginRequest, ResetPasswordRequest, ResetTokenOut, UserOut)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post("/login", response_model=JsonOutResult[LoginOut])
def login(data: LoginRequest, db: Session = Depends(get_db)):
    user, token = crud.login(db, data)
    return success_response(
        data=LoginOut(access_token=token, user=to_user_out(db, user)),
        message="Connexion réussie"
    )


@router.get("/me", response_model=JsonOutResult[UserOut])
def me(
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return success_response(data=to_user_out(db, get_user_or_404(db, current_user.user_id)))


@router.post("/change-password", response_model=JsonOutResult)
def change_password(
    data: ChangePasswordRequest,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    crud.change_password(db, current_user, data)
    return success_response(message="Mot de passe modifié avec succès")


@router.post("/forgot-password", response_model=JsonOutResult)
def forgot_password(data: ForgotPasswordRequest, db: Session = Depends(get_db)):
    crud.request_password_reset(db, data)
    # same answer whether or not the account exists
    return success_response(message="Si un compte existe, vous recevrez un email")


@router.get("/verify-reset-token", response_model=JsonOutResult[ResetTokenOut])
def verify_reset_token(token: str = Query(...), db: Session = Depends(get_db)):
    user = crud.get_reset_user(db, token)
    return success_response(data=ResetTokenOut(email=user.email))


@router.post("/reset-password", response_model=JsonOutResult)
def reset_password(data: ResetPasswordRequest, db: Session = Depends(get_db)):
    crud.reset_password(db, data)
    return success_response(message="Mot de passe réinitialisé avec succès")
