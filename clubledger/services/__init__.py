"""Ledger services."""
from clubledger.services.bank_account_service import BankAccountService
from clubledger.services.change_notifier import ChangeNotifier
from clubledger.services.opening_balance_service import OpeningBalanceService
from clubledger.services.player_service import PlayerService
from clubledger.services.rake_service import RakeService
from clubledger.services.rakeback_service import RakebackService
from clubledger.services.report_service import ReportService
from clubledger.services.solvency_service import SolvencyService
from clubledger.services.tip_service import TipService
from clubledger.services.transaction_service import TransactionService

__all__ = [
    "BankAccountService",
    "ChangeNotifier",
    "OpeningBalanceService",
    "PlayerService",
    "RakeService",
    "RakebackService",
    "ReportService",
    "SolvencyService",
    "TipService",
    "TransactionService",
]
