from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from stratwealth.auth.dependencies import require_admin, require_investor, require_user
from stratwealth.auth.gate import Identity
from stratwealth.core.database import get_db
from stratwealth.properties.models import PropertyStatus
from stratwealth.properties.schemas import (
    InstallmentScheduleResponse,
    PropertyCreate,
    PropertyResponse,
    PropertyTransactionResponse,
    PropertyUpdate,
    PurchaseRequest,
)
from stratwealth.properties.service import (
    create_property,
    get_property,
    get_transaction,
    installment_schedule,
    list_properties,
    list_transactions,
    pay_installment,
    purchase_property,
    update_property,
)

router = APIRouter()
admin_router = APIRouter()


@router.get("", response_model=List[PropertyResponse])
def catalogue(
    status: Optional[PropertyStatus] = None,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_user)
):
    return list_properties(db, status)


@router.get("/transactions", response_model=List[PropertyTransactionResponse])
def my_transactions(db: Session = Depends(get_db), identity: Identity = Depends(require_user)):
    return list_transactions(db, identity.user_id)


@router.get("/transactions/{transaction_id}/schedule", response_model=InstallmentScheduleResponse)
def schedule(transaction_id: str, db: Session = Depends(get_db), identity: Identity = Depends(require_user)):
    """Installment plan of a purchase with due dates and paid flags."""
    return installment_schedule(get_transaction(db, transaction_id, identity.user_id))


@router.post("/transactions/{transaction_id}/pay", response_model=PropertyTransactionResponse)
def pay(transaction_id: str, db: Session = Depends(get_db), identity: Identity = Depends(require_investor)):
    return pay_installment(db, transaction_id, identity.user_id)


@router.get("/{property_id}", response_model=PropertyResponse)
def detail(property_id: str, db: Session = Depends(get_db), identity: Identity = Depends(require_user)):
    return get_property(db, property_id)


@router.post("/{property_id}/purchase", response_model=PropertyTransactionResponse, status_code=201)
def purchase(
    property_id: str,
    data: PurchaseRequest,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_investor)
):
    """
    Buys a property with the wallet balance.

    - **FULL**: charges the price, the property is sold
    - **INSTALLMENT**: 2 to 12 installments every 30 days, the first charged now
    """
    return purchase_property(db, property_id, identity.user_id, data)


@admin_router.post("/properties", response_model=PropertyResponse, status_code=201)
def new_property(data: PropertyCreate, db: Session = Depends(get_db), identity: Identity = Depends(require_admin)):
    return create_property(db, data, identity.user_id)


@admin_router.patch("/properties/{property_id}", response_model=PropertyResponse)
def edit_property(
    property_id: str,
    data: PropertyUpdate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_admin)
):
    return update_property(db, property_id, data, identity.user_id)
