from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session
from stratwealth.auth.dependencies import COOKIE_NAME, get_current_user, load_identity
from stratwealth.auth.models import User
from stratwealth.auth.schemas import PasswordChange, TokenResponse, UserCreate, UserLogin, UserResponse
from stratwealth.auth.service import authenticate, change_password, register_user
from stratwealth.core.config import settings
from stratwealth.core.database import get_db

router = APIRouter()


def set_session_cookie(response: Response, access_token: str) -> None:
    response.set_cookie(
        key=COOKIE_NAME,
        value=f"Bearer {access_token}",
        httponly=True,
        samesite="lax",
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        expires=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )


def build_user_response(db: Session, user: User) -> UserResponse:
    identity = load_identity(db, user)
    return UserResponse(
        id=user.id,
        first_name=user.first_name,
        last_name=user.last_name,
        email=user.email,
        role=user.role,
        email_verified=identity.email_verified,
        kyc_status=identity.kyc_status,
        is_banned=user.is_banned,
        referral_code=user.referral_code,
        created_at=user.created_at
    )


@router.post("/register", response_model=TokenResponse, status_code=201)
def register(response: Response, data: UserCreate, db: Session = Depends(get_db)):
    user, access_token = register_user(db, data)
    # Auto-login after registration
    set_session_cookie(response, access_token)
    return TokenResponse(access_token=access_token, user_id=user.id, role=user.role)


@router.post("/login", response_model=TokenResponse)
def login(response: Response, data: UserLogin, db: Session = Depends(get_db)):
    user, access_token = authenticate(db, data.email, data.password)
    set_session_cookie(response, access_token)
    return TokenResponse(access_token=access_token, user_id=user.id, role=user.role)


@router.post("/logout")
def logout(response: Response):
    response.delete_cookie(COOKIE_NAME)
    return {"message": "Logged out"}


@router.get("/me", response_model=UserResponse)
def me(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return build_user_response(db, user)


@router.post("/change-password")
def update_password(data: PasswordChange, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    change_password(db, user, data.current_password, data.new_password)
    return {"message": "Password updated"}
