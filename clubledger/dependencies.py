"""FastAPI dependencies."""
import logging
from typing import Callable
from uuid import UUID

from fastapi import Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from clubledger.config import get_settings
from clubledger.database import get_db
from clubledger.models.base import StaffRole
from clubledger.models.staff_user import StaffUser
from clubledger.services.change_notifier import ChangeNotifier

logger = logging.getLogger(__name__)

settings = get_settings()


def _mask_identifier(identifier: str) -> str:
    """Mask a sensitive identifier for logging."""
    if not identifier:
        return "<missing>"
    if len(identifier) <= 8:
        return f"{identifier[:2]}...{identifier[-2:]}"
    return f"{identifier[:4]}...{identifier[-4:]}"


def get_change_notifier(request: Request) -> ChangeNotifier:
    """Return the application's change notifier."""
    return request.app.state.change_notifier


async def get_current_staff(
        request: Request,
        db: AsyncSession = Depends(get_db),
) -> StaffUser:
    """Resolve the calling staff member.

    Sessions are owned by the auth collaborator, which forwards the
    authenticated user id in a trusted header.
    """
    raw_user_id = request.headers.get(settings.staff_user_header)
    if not raw_user_id:
        raise HTTPException(status_code=401, detail="missing_credentials")

    try:
        user_id = UUID(raw_user_id)
    except ValueError as exc:
        logger.warning(f"Malformed staff id header: {_mask_identifier(raw_user_id)}")
        raise HTTPException(status_code=401, detail="invalid_credentials") from exc

    user = await db.get(StaffUser, user_id)
    if user is None or not user.active:
        logger.warning(f"Unknown or inactive staff user: {_mask_identifier(raw_user_id)}")
        raise HTTPException(status_code=401, detail="invalid_credentials")

    return user


def require_roles(*roles: StaffRole) -> Callable:
    """Build a dependency that admits only the given staff roles."""
    allowed = {role.value for role in roles}

    async def _require_roles(user: StaffUser = Depends(get_current_staff)) -> StaffUser:
        if user.role not in allowed:
            logger.info(f"Forbidden: user={user.user_id} role={user.role} needs one of {sorted(allowed)}")
            raise HTTPException(status_code=403, detail="forbidden")
        return user

    return _require_roles


require_cashier = require_roles(StaffRole.ADMIN, StaffRole.CASHIER)
require_admin = require_roles(StaffRole.ADMIN)
require_floor = require_roles(StaffRole.ADMIN, StaffRole.PITBOSS, StaffRole.DEALER)
