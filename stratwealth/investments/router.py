from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from stratwealth.auth.dependencies import require_admin, require_investor, require_user
from stratwealth.auth.gate import Identity
from stratwealth.core.database import get_db
from stratwealth.investments.models import InvestmentSector, InvestmentStatus
from stratwealth.investments.schemas import (
    InvestmentCreate,
    InvestmentResponse,
    InvestmentSummary,
    MarketPlanCreate,
    MarketPlanResponse,
    MarketPlanUpdate,
)
from stratwealth.investments.service import (
    cancel_investment,
    create_investment,
    create_market_plan,
    get_investment,
    list_investments,
    list_market_plans,
    mature_investment,
    portfolio_summary,
    update_market_plan,
    withdraw_investment,
)

router = APIRouter()
market_router = APIRouter()
admin_router = APIRouter()


@router.post("", response_model=InvestmentResponse, status_code=201)
def invest(data: InvestmentCreate, db: Session = Depends(get_db), identity: Identity = Depends(require_investor)):
    """
    Creates an investment funded from the wallet balance.
    Requires approved KYC and a verified email.

    - **sector**: REAL_ESTATE, GREEN_ENERGY or MARKET
    - **category**: SEMI_ANNUAL (6 months, 15%) or ANNUAL (12 months, 30%)
    - **plan_id**: market plan, MARKET only
    """
    return create_investment(db, identity.user_id, data)


@router.get("", response_model=List[InvestmentResponse])
def my_investments(
    sector: Optional[InvestmentSector] = None,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_user)
):
    return list_investments(db, identity.user_id, sector=sector)


@router.get("/summary", response_model=InvestmentSummary)
def summary(db: Session = Depends(get_db), identity: Identity = Depends(require_user)):
    return portfolio_summary(db, identity.user_id)


@router.get("/{investment_id}", response_model=InvestmentResponse)
def detail(investment_id: str, db: Session = Depends(get_db), identity: Identity = Depends(require_user)):
    return get_investment(db, investment_id, identity.user_id)


@router.post("/{investment_id}/withdraw", response_model=InvestmentResponse)
def withdraw(investment_id: str, db: Session = Depends(get_db), identity: Identity = Depends(require_user)):
    """Credits principal plus return of a matured investment to the wallet."""
    return withdraw_investment(db, investment_id, identity.user_id)


@market_router.get("", response_model=List[MarketPlanResponse])
def available_market_plans(db: Session = Depends(get_db), identity: Identity = Depends(require_user)):
    return list_market_plans(db, active_only=True)


@admin_router.get("/investments", response_model=List[InvestmentResponse])
def all_investments(
    sector: Optional[InvestmentSector] = None,
    status: Optional[InvestmentStatus] = None,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_admin)
):
    return list_investments(db, sector=sector, status=status)


@admin_router.post("/investments/{investment_id}/mature", response_model=InvestmentResponse)
def mature(investment_id: str, db: Session = Depends(get_db), identity: Identity = Depends(require_admin)):
    return mature_investment(db, investment_id, identity.user_id)


@admin_router.post("/investments/{investment_id}/cancel", response_model=InvestmentResponse)
def cancel(investment_id: str, db: Session = Depends(get_db), identity: Identity = Depends(require_admin)):
    """Cancels an active investment and refunds its principal."""
    return cancel_investment(db, investment_id, identity.user_id)


@admin_router.get("/market-plans", response_model=List[MarketPlanResponse])
def market_plans(db: Session = Depends(get_db), identity: Identity = Depends(require_admin)):
    return list_market_plans(db)


@admin_router.post("/market-plans", response_model=MarketPlanResponse, status_code=201)
def new_market_plan(data: MarketPlanCreate, db: Session = Depends(get_db), identity: Identity = Depends(require_admin)):
    return create_market_plan(db, data, identity.user_id)


@admin_router.patch("/market-plans/{plan_id}", response_model=MarketPlanResponse)
def edit_market_plan(
    plan_id: str,
    data: MarketPlanUpdate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_admin)
):
    return update_market_plan(db, plan_id, data, identity.user_id)
