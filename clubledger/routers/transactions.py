"""Transactions API router."""
from datetime import date
from typing import Optional
from uuid import UUID
import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from clubledger.database import get_db
from clubledger.dependencies import get_change_notifier, require_cashier
from clubledger.models.staff_user import StaffUser
from clubledger.routers.errors import to_http_exception
from clubledger.schemas.report import DailyReportResponse
from clubledger.schemas.transaction import CreateTransactionRequest, TransactionResponse
from clubledger.services import ChangeNotifier, ReportService, TransactionService
from clubledger.utils.datetime_helpers import utc_today
from clubledger.utils.exceptions import LedgerException

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=TransactionResponse, status_code=201)
async def create_transaction(
    request: CreateTransactionRequest,
    user: StaffUser = Depends(require_cashier),
    db: AsyncSession = Depends(get_db),
    notifier: ChangeNotifier = Depends(get_change_notifier),
):
    """Record a buy-in, cash-out, deposit, withdrawal or rakeback payout."""
    transaction_service = TransactionService(db, notifier=notifier)
    try:
        transaction = await transaction_service.record(
            player_id=request.player_id,
            transaction_type=request.type,
            amount=request.amount,
            recorded_by_user_id=user.user_id,
            notes=request.notes,
            payment_method=request.payment_method,
            bank_account_id=request.bank_account_id,
        )
    except LedgerException as e:
        raise to_http_exception(e)

    return TransactionResponse.from_transaction(transaction)


@router.get("", response_model=list[TransactionResponse])
async def list_transactions(
    player_id: Optional[UUID] = None,
    type: Optional[str] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    limit: Optional[int] = Query(default=None, ge=1),
    user: StaffUser = Depends(require_cashier),
    db: AsyncSession = Depends(get_db),
):
    """List transactions newest first."""
    try:
        transactions = await TransactionService(db).list_transactions(
            player_id=player_id,
            transaction_type=type,
            date_from=date_from,
            date_to=date_to,
            limit=limit,
        )
    except LedgerException as e:
        raise to_http_exception(e)

    return [TransactionResponse.from_transaction(t) for t in transactions]


@router.get("/reports", response_model=DailyReportResponse)
async def daily_report(
    date: Optional[date] = None,
    user: StaffUser = Depends(require_cashier),
    db: AsyncSession = Depends(get_db),
):
    """End-of-day reconciliation: summary, per-channel balances and the day's transactions."""
    report = await ReportService(db).build_daily_report(date or utc_today())
    return DailyReportResponse.from_report(report)
