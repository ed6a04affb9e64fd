"""
Business logic for the property catalogue and purchases.

Installment amounts come from the terms engine as exact quotients. Regular charges are
truncated to cents and the final installment charges whatever is still
outstanding, so the payments of a plan always add up to the price.
"""
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional
from sqlalchemy.orm import Session

from stratwealth.core.config import settings
from stratwealth.core.errors import ConflictError, NotFoundError, ValidationError
from stratwealth.core.logger import logger, audit_log
from stratwealth.core.utils import CENT, as_utc, format_money, quantize_money, truncate_money, utcnow
from stratwealth.notifications.models import NotificationType
from stratwealth.notifications.service import notify
from stratwealth.properties.models import (
    Property,
    PropertyStatus,
    PropertyTransaction,
    PropertyTransactionStatus,
    PurchaseType,
)
from stratwealth.properties.schemas import PropertyCreate, PropertyUpdate, PurchaseRequest
from stratwealth.referrals.models import ReferralTransactionType
from stratwealth.referrals.service import process_referral_commission
from stratwealth.terms.engine import TermsError, build_payment_schedule, next_payment_date, split_into_installments
from stratwealth.wallet.models import WalletTransactionType
from stratwealth.wallet.service import debit, get_wallet


def list_properties(db: Session, status: Optional[PropertyStatus] = None) -> List[Property]:
    query = db.query(Property)
    if status:
        query = query.filter(Property.status == status)
    return query.order_by(Property.created_at.desc()).all()


def get_property(db: Session, property_id: str) -> Property:
    prop = db.query(Property).filter(Property.id == property_id).first()
    if not prop:
        raise NotFoundError("Property", property_id)
    return prop


def create_property(db: Session, data: PropertyCreate, admin_id: str) -> Property:
    prop = Property(**data.model_dump(), status=PropertyStatus.AVAILABLE)
    db.add(prop)
    db.commit()
    db.refresh(prop)

    audit_log(action="property_created", user=admin_id, resource=f"property_id={prop.id}", details=data.model_dump())
    return prop


def update_property(db: Session, property_id: str, data: PropertyUpdate, admin_id: str) -> Property:
    prop = get_property(db, property_id)
    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    for field, value in changes.items():
        setattr(prop, field, value)
    db.commit()
    db.refresh(prop)

    audit_log(action="property_updated", user=admin_id, resource=f"property_id={prop.id}", details=changes)
    return prop


def installment_amounts(total: Decimal, count: int) -> List[Decimal]:
    """
    Cent amounts charged for each installment of a plan.
    Every installment but the last is the engine quotient truncated to cents; the
    last one takes the remainder, so it is never smaller than the others.
    Example: 1000.00 over 3 -> [333.33, 333.33, 333.34]
    """
    regular = truncate_money(split_into_installments(total, count))
    if regular < CENT:
        raise ValidationError(f"Price is too low to split into {count} installments")
    amounts = [regular] * (count - 1)
    amounts.append(quantize_money(total) - regular * (count - 1))
    return amounts


def _validate_installment_count(count: Optional[int]) -> int:
    minimum = settings.MIN_PROPERTY_INSTALLMENTS
    maximum = settings.MAX_PROPERTY_INSTALLMENTS
    if count is None or count < minimum or count > maximum:
        raise ValidationError(f"Installments must be between {minimum} and {maximum}")
    return count


def purchase_property(db: Session, property_id: str, user_id: str, data: PurchaseRequest) -> PropertyTransaction:
    """
    Buys a property outright or opens an installment plan.
    An installment plan charges its first installment immediately.
    """
    prop = get_property(db, property_id)
    if prop.status != PropertyStatus.AVAILABLE:
        raise ConflictError(f"Property is not available (status={prop.status.value})")

    wallet = get_wallet(db, user_id)
    now = utcnow()

    if data.type == PurchaseType.FULL:
        debit(db, wallet, prop.price, WalletTransactionType.PROPERTY_PAYMENT, f"Purchase of {prop.name}")
        transaction = PropertyTransaction(
            property_id=prop.id,
            user_id=user_id,
            type=PurchaseType.FULL,
            amount=prop.price,
            paid_installments=1,
            amount_paid=prop.price,
            status=PropertyTransactionStatus.COMPLETED,
            created_at=now
        )
        prop.status = PropertyStatus.SOLD
        message = f"You purchased {prop.name} for {format_money(prop.price)}."
    else:
        count = _validate_installment_count(data.installments)
        try:
            first = installment_amounts(prop.price, count)[0]
        except TermsError as e:
            raise ValidationError(str(e))
        debit(
            db,
            wallet,
            first,
            WalletTransactionType.PROPERTY_PAYMENT,
            f"Installment 1/{count} for {prop.name}"
        )
        transaction = PropertyTransaction(
            property_id=prop.id,
            user_id=user_id,
            type=PurchaseType.INSTALLMENT,
            amount=prop.price,
            installments=count,
            installment_amount=first,
            paid_installments=1,
            amount_paid=first,
            next_payment_due=next_payment_date(now),
            status=PropertyTransactionStatus.PENDING,
            created_at=now
        )
        prop.status = PropertyStatus.PENDING
        message = (
            f"Your installment plan for {prop.name} is open: {count} payments of "
            f"{format_money(first)}. Next payment due {transaction.next_payment_due:%Y-%m-%d}."
        )

    db.add(transaction)
    db.flush()

    process_referral_commission(db, user_id, prop.price, ReferralTransactionType.PROPERTY_PURCHASE, transaction.id)
    notify(
        db,
        user_id,
        NotificationType.PROPERTY_PURCHASED,
        "Property Purchase",
        message,
        action_url=f"/properties/{prop.id}"
    )
    db.commit()
    db.refresh(transaction)

    audit_log(
        action="property_purchased",
        user=user_id,
        resource=f"property_transaction_id={transaction.id}",
        details={
            "property_id": prop.id,
            "type": data.type.value,
            "installments": transaction.installments,
            "charged": str(transaction.amount_paid)
        }
    )
    logger.info(f"Property purchase: property={prop.id}, type={data.type.value}, user={user_id}")
    return transaction


def get_transaction(db: Session, transaction_id: str, user_id: str, for_update: bool = False) -> PropertyTransaction:
    query = db.query(PropertyTransaction).filter(
        PropertyTransaction.id == transaction_id,
        PropertyTransaction.user_id == user_id
    )
    if for_update:
        query = query.with_for_update()
    transaction = query.first()
    if not transaction:
        raise NotFoundError("Property transaction", transaction_id)
    return transaction


def list_transactions(db: Session, user_id: str) -> List[PropertyTransaction]:
    return db.query(PropertyTransaction).filter(
        PropertyTransaction.user_id == user_id
    ).order_by(PropertyTransaction.created_at.desc()).all()


def pay_installment(db: Session, transaction_id: str, user_id: str) -> PropertyTransaction:
    """Charges the next installment. Paying the last one completes the purchase."""
    transaction = get_transaction(db, transaction_id, user_id, for_update=True)
    if transaction.type != PurchaseType.INSTALLMENT:
        raise ConflictError("Only installment purchases have installments to pay")
    if transaction.status != PropertyTransactionStatus.PENDING:
        raise ConflictError("All installments have already been paid")

    prop = get_property(db, transaction.property_id)
    sequence = transaction.paid_installments + 1
    is_last = sequence == transaction.installments
    charge = transaction.outstanding if is_last else transaction.installment_amount

    wallet = get_wallet(db, user_id)
    debit(
        db,
        wallet,
        charge,
        WalletTransactionType.PROPERTY_PAYMENT,
        f"Installment {sequence}/{transaction.installments} for {prop.name}"
    )
    transaction.paid_installments = sequence
    transaction.amount_paid = quantize_money(transaction.amount_paid + charge)

    if is_last:
        transaction.status = PropertyTransactionStatus.COMPLETED
        transaction.next_payment_due = None
        prop.status = PropertyStatus.SOLD
        notify(
            db,
            user_id,
            NotificationType.PROPERTY_PURCHASED,
            "Property Paid In Full",
            f"Your final installment for {prop.name} has been received. The property is yours.",
            action_url=f"/properties/{prop.id}"
        )
    else:
        transaction.next_payment_due = next_payment_date(as_utc(transaction.next_payment_due))

    db.commit()
    db.refresh(transaction)

    audit_log(
        action="installment_paid",
        user=user_id,
        resource=f"property_transaction_id={transaction.id}",
        details={"sequence": sequence, "amount": str(charge)}
    )
    return transaction


def installment_schedule(transaction: PropertyTransaction) -> Dict[str, object]:
    """Full plan of a purchase, starting on the purchase date, with paid flags."""
    count = transaction.installments or 1
    start: datetime = as_utc(transaction.created_at)
    amounts = installment_amounts(transaction.amount, count)
    payments = build_payment_schedule(transaction.amount, count, start)
    return {
        "transaction_id": transaction.id,
        "total_amount": transaction.amount,
        "amount_paid": transaction.amount_paid,
        "outstanding": transaction.outstanding,
        "installments": [
            {
                "sequence": payment.sequence,
                "due_date": payment.due_date,
                "amount": amount,
                "paid": payment.sequence <= transaction.paid_installments,
            }
            for payment, amount in zip(payments, amounts)
        ],
    }
