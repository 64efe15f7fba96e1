"""Bank accounts API router."""
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from clubledger.database import get_db
from clubledger.dependencies import get_change_notifier, require_admin, require_cashier
from clubledger.models.staff_user import StaffUser
from clubledger.routers.errors import to_http_exception
from clubledger.schemas.bank_account import BankAccountNameRequest, BankAccountResponse
from clubledger.services import BankAccountService, ChangeNotifier
from clubledger.utils.exceptions import LedgerException

router = APIRouter()


@router.get("", response_model=list[BankAccountResponse])
async def list_bank_accounts(
    user: StaffUser = Depends(require_cashier),
    db: AsyncSession = Depends(get_db),
):
    accounts = await BankAccountService(db).list_active()
    return [BankAccountResponse.model_validate(a) for a in accounts]


@router.post("", response_model=BankAccountResponse, status_code=201)
async def create_bank_account(
    request: BankAccountNameRequest,
    user: StaffUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    notifier: ChangeNotifier = Depends(get_change_notifier),
):
    try:
        account = await BankAccountService(db, notifier=notifier).create(request.name)
    except LedgerException as e:
        raise to_http_exception(e)
    return BankAccountResponse.model_validate(account)


@router.put("/{bank_account_id}", response_model=BankAccountResponse)
async def rename_bank_account(
    bank_account_id: UUID,
    request: BankAccountNameRequest,
    user: StaffUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    notifier: ChangeNotifier = Depends(get_change_notifier),
):
    try:
        account = await BankAccountService(db, notifier=notifier).rename(bank_account_id, request.name)
    except LedgerException as e:
        raise to_http_exception(e)
    return BankAccountResponse.model_validate(account)


@router.delete("/{bank_account_id}")
async def deactivate_bank_account(
    bank_account_id: UUID,
    user: StaffUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    notifier: ChangeNotifier = Depends(get_change_notifier),
):
    """Soft delete: the account disappears from lists but keeps its history."""
    try:
        await BankAccountService(db, notifier=notifier).deactivate(bank_account_id)
    except LedgerException as e:
        raise to_http_exception(e)
    return {"ok": True}
