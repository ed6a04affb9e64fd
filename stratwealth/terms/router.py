"""
FastAPI router exposing the investment terms engine.
Validation is left to the engine so the API and in-process callers reject the
same inputs with the same messages. The only request-level check is the cap on
schedule length (MAX_SCHEDULE_INSTALLMENTS), which fails with 422.
"""
from datetime import datetime, timezone
from typing import List
from uuid import uuid4

from fastapi import APIRouter, Depends, Header, HTTPException

from stratwealth.auth.dependencies import require_user
from stratwealth.auth.gate import Identity
from stratwealth.core.logger import get_logger_with_correlation
from stratwealth.terms.engine import (
    PlanCategory,
    TermsError,
    build_payment_schedule,
    investment_terms,
    maturity_date,
    resolve_duration_months,
    return_rate,
    split_into_installments,
)
from stratwealth.terms.schemas import (
    PlanTermsResponse,
    QuoteRequest,
    QuoteResponse,
    ScheduledPaymentResponse,
    ScheduleRequest,
    ScheduleResponse,
)

router = APIRouter()


@router.get("/plans", response_model=List[PlanTermsResponse])
def list_plan_terms(identity: Identity = Depends(require_user)) -> List[PlanTermsResponse]:
    """Fixed duration and return rate of each plan category."""
    return [
        PlanTermsResponse(
            category=category,
            duration_months=resolve_duration_months(category),
            return_rate=return_rate(category)
        )
        for category in PlanCategory
    ]


@router.post("/quote", response_model=QuoteResponse)
def quote(
    data: QuoteRequest,
    identity: Identity = Depends(require_user),
    x_correlation_id: str = Header(default=None)
) -> QuoteResponse:
    """
    Computes duration, rate and expected return for a prospective investment.

    - **category**: SEMI_ANNUAL (6 months, 15%) or ANNUAL (12 months, 30%)
    - **principal**: amount to invest, must be positive
    """
    logger = get_logger_with_correlation(x_correlation_id or str(uuid4()))

    try:
        terms = investment_terms(data.category, data.principal)
    except TermsError as e:
        logger.warning(f"Quote rejected: {str(e)}")
        raise HTTPException(status_code=400, detail=str(e))

    return QuoteResponse(
        category=terms.category,
        principal=terms.principal,
        duration_months=terms.duration_months,
        return_rate=terms.return_rate,
        expected_return=terms.expected_return,
        maturity_date=maturity_date(datetime.now(timezone.utc), terms.category)
    )


@router.post("/schedule", response_model=ScheduleResponse)
def schedule(
    data: ScheduleRequest,
    identity: Identity = Depends(require_user),
    x_correlation_id: str = Header(default=None)
) -> ScheduleResponse:
    """
    Splits an amount into equal installments due every 30 days.
    Amounts are exact quotients; no rounding policy is applied.
    """
    logger = get_logger_with_correlation(x_correlation_id or str(uuid4()))
    start = data.start_date or datetime.now(timezone.utc)

    try:
        installment_amount = split_into_installments(data.total_amount, data.installments)
        payments = build_payment_schedule(data.total_amount, data.installments, start)
    except TermsError as e:
        logger.warning(f"Schedule rejected: {str(e)}")
        raise HTTPException(status_code=400, detail=str(e))

    return ScheduleResponse(
        total_amount=data.total_amount,
        installments=data.installments,
        installment_amount=installment_amount,
        payments=[
            ScheduledPaymentResponse(sequence=p.sequence, due_date=p.due_date, amount=p.amount)
            for p in payments
        ]
    )
