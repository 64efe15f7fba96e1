"""Ledger API routers."""
from fastapi import APIRouter

from clubledger.routers import (
    bank_accounts,
    health,
    opening_balances,
    players,
    rake,
    rakeback,
    tips,
    transactions,
    version,
)

router = APIRouter(prefix="/api")

router.include_router(health.router, tags=["health"])
router.include_router(version.router, tags=["version"])
router.include_router(transactions.router, prefix="/transactions", tags=["transactions"])
router.include_router(opening_balances.router, prefix="/opening-balances", tags=["opening-balances"])
router.include_router(rake.router, prefix="/rake", tags=["rake"])
router.include_router(rakeback.router, prefix="/rakeback", tags=["rakeback"])
router.include_router(players.router, prefix="/players", tags=["players"])
router.include_router(bank_accounts.router, prefix="/bank-accounts", tags=["bank-accounts"])
router.include_router(tips.router, prefix="/tips", tags=["tips"])
