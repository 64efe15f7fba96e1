"""Database models."""
from clubledger.models.bank_account import BankAccount
from clubledger.models.base import PaymentMethod, StaffRole, TransactionType
from clubledger.models.opening_balance import OpeningBalance
from clubledger.models.player import Player
from clubledger.models.rake_record import RakeRecord
from clubledger.models.staff_user import StaffUser
from clubledger.models.tip_collection import TipCollection
from clubledger.models.transaction import Transaction

__all__ = [
    "BankAccount",
    "OpeningBalance",
    "PaymentMethod",
    "Player",
    "RakeRecord",
    "StaffRole",
    "StaffUser",
    "TipCollection",
    "Transaction",
    "TransactionType",
]
