"""Translate ledger exceptions into HTTP errors."""
from fastapi import HTTPException

from clubledger.utils.exceptions import (
    DuplicateBankAccountError,
    InsufficientFundsError,
    LedgerConflictError,
    LedgerException,
    NotFoundError,
)


def to_http_exception(exc: LedgerException) -> HTTPException:
    detail = {"error": exc.code, "message": str(exc)}

    if isinstance(exc, InsufficientFundsError):
        detail["available"] = float(exc.available)
        detail["channel"] = exc.channel_name
        return HTTPException(status_code=400, detail=detail)
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=404, detail=detail)
    if isinstance(exc, LedgerConflictError):
        return HTTPException(status_code=409, detail=detail, headers={"Retry-After": "1"})
    if isinstance(exc, DuplicateBankAccountError):
        return HTTPException(status_code=409, detail=detail)
    return HTTPException(status_code=400, detail=detail)
