"""Daily reconciliation report schemas."""
import datetime as dt
from clubledger.schemas.base import BaseSchema, Money
from clubledger.schemas.transaction import TransactionResponse
from clubledger.services.report_service import DailyReport


class DailySummaryResponse(BaseSchema):
    total_buy_ins: Money
    total_buy_ins_cash: Money
    total_buy_ins_bank: Money
    total_cash_outs: Money
    total_deposits: Money
    total_withdrawals: Money
    total_rakeback_payouts: Money
    transaction_count: int
    total_rake: Money
    total_tips_collected: Money


class ChannelReportResponse(BaseSchema):
    """One money channel for the day: opening + in - out = balance."""
    channel: str
    name: str
    kind: str  # cash | bank | deposit
    opening: Money
    inflow: Money
    outflow: Money
    net: Money
    balance: Money


class DailyReportResponse(BaseSchema):
    date: dt.date
    summary: DailySummaryResponse
    channels: list[ChannelReportResponse]
    transactions: list[TransactionResponse]

    @classmethod
    def from_report(cls, report: DailyReport) -> "DailyReportResponse":
        return cls(
            date=report.date,
            summary=DailySummaryResponse.model_validate(report.summary),
            channels=[ChannelReportResponse.model_validate(c) for c in report.channels],
            transactions=[TransactionResponse.from_transaction(t) for t in report.transactions],
        )
