from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from stratwealth.admin.schemas import DashboardStats
from stratwealth.admin.service import dashboard_stats, get_user, list_users, set_banned, verify_email
from stratwealth.auth.dependencies import require_admin
from stratwealth.auth.gate import Identity
from stratwealth.auth.router import build_user_response
from stratwealth.auth.schemas import UserResponse
from stratwealth.core.database import get_db

router = APIRouter()


@router.get("/dashboard/stats", response_model=DashboardStats)
def stats(db: Session = Depends(get_db), identity: Identity = Depends(require_admin)):
    return dashboard_stats(db)


@router.get("/users", response_model=List[UserResponse])
def users(
    search: Optional[str] = None,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_admin)
) -> List[UserResponse]:
    return [build_user_response(db, user) for user in list_users(db, search)]


@router.get("/users/{user_id}", response_model=UserResponse)
def user_detail(user_id: str, db: Session = Depends(get_db), identity: Identity = Depends(require_admin)):
    return build_user_response(db, get_user(db, user_id))


@router.post("/users/{user_id}/ban", response_model=UserResponse)
def ban(user_id: str, db: Session = Depends(get_db), identity: Identity = Depends(require_admin)):
    return build_user_response(db, set_banned(db, user_id, True, identity.user_id))


@router.post("/users/{user_id}/unban", response_model=UserResponse)
def unban(user_id: str, db: Session = Depends(get_db), identity: Identity = Depends(require_admin)):
    return build_user_response(db, set_banned(db, user_id, False, identity.user_id))


@router.post("/users/{user_id}/verify-email", response_model=UserResponse)
def verify(user_id: str, db: Session = Depends(get_db), identity: Identity = Depends(require_admin)):
    return build_user_response(db, verify_email(db, user_id, identity.user_id))
