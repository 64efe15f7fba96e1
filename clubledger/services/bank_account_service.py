"""Bank account registry."""
from typing import Optional
from uuid import UUID
import logging
import uuid

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from clubledger.models.bank_account import BankAccount
from clubledger.services.change_notifier import ChangeNotifier
from clubledger.utils.exceptions import (
    DuplicateBankAccountError,
    InvalidBankAccountNameError,
    NotFoundError,
)

logger = logging.getLogger(__name__)


def _clean_name(name: str | None) -> str:
    cleaned = " ".join((name or "").split())
    if not cleaned:
        raise InvalidBankAccountNameError("Name required")
    if len(cleaned) > 100:
        raise InvalidBankAccountNameError("Name must be at most 100 characters")
    return cleaned


class BankAccountService:
    def __init__(self, db: AsyncSession, notifier: Optional[ChangeNotifier] = None):
        self.db = db
        self.notifier = notifier

    async def list_active(self) -> list[BankAccount]:
        result = await self.db.execute(
            select(BankAccount).where(BankAccount.active.is_(True)).order_by(BankAccount.name)
        )
        return list(result.scalars().all())

    async def get(self, bank_account_id: UUID) -> BankAccount:
        account = await self.db.get(BankAccount, bank_account_id)
        if account is None:
            raise NotFoundError("Bank account", bank_account_id)
        return account

    async def create(self, name: str) -> BankAccount:
        name = _clean_name(name)
        await self._ensure_name_free(name)

        account = BankAccount(bank_account_id=uuid.uuid4(), name=name, active=True)
        self.db.add(account)
        await self._commit(name)

        logger.info(f"Bank account created: id={account.bank_account_id}, name={name!r}")
        if self.notifier:
            self.notifier.bump("bank_accounts")
        return account

    async def rename(self, bank_account_id: UUID, name: str) -> BankAccount:
        account = await self.get(bank_account_id)
        name = _clean_name(name)
        if account.active and name != account.name:
            await self._ensure_name_free(name, exclude_id=account.bank_account_id)

        old_name = account.name
        account.name = name
        await self._commit(name)

        logger.info(f"Bank account renamed: id={bank_account_id}, {old_name!r} -> {name!r}")
        if self.notifier:
            self.notifier.bump("bank_accounts")
        return account

    async def deactivate(self, bank_account_id: UUID) -> BankAccount:
        """Soft delete; historical transactions keep their reference."""
        account = await self.get(bank_account_id)
        if not account.active:
            return account

        account.active = False
        await self._commit(account.name)

        logger.info(f"Bank account deactivated: id={bank_account_id}, name={account.name!r}")
        if self.notifier:
            self.notifier.bump("bank_accounts")
        return account

    async def _ensure_name_free(self, name: str, exclude_id: UUID | None = None) -> None:
        stmt = select(BankAccount.bank_account_id).where(
            BankAccount.active.is_(True),
            func.lower(BankAccount.name) == name.lower(),
        )
        if exclude_id is not None:
            stmt = stmt.where(BankAccount.bank_account_id != exclude_id)
        result = await self.db.execute(stmt)
        if result.first() is not None:
            raise DuplicateBankAccountError(f"An active bank account named {name!r} already exists")

    async def _commit(self, name: str) -> None:
        try:
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            raise DuplicateBankAccountError(
                f"An active bank account named {name!r} already exists"
            ) from exc
