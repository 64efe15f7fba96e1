"""Initial ledger schema

Revision ID: 0001_initial_ledger_schema
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa

from clubledger.migrations.util import (
    active_only_where,
    get_money_type,
    get_timestamp_default,
    get_uuid_type,
)

# revision identifiers, used by Alembic.
revision = '0001_initial_ledger_schema'
down_revision = None
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None


def upgrade() -> None:
    uuid_type = get_uuid_type()
    money = get_money_type()
    now = get_timestamp_default()

    op.create_table(
        'players',
        sa.Column('player_id', uuid_type, nullable=False),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('last_name', sa.String(100), nullable=False, server_default=''),
        sa.Column('rakeback_percent', sa.Numeric(5, 2), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=now),
        sa.PrimaryKeyConstraint('player_id'),
    )

    op.create_table(
        'staff_users',
        sa.Column('user_id', uuid_type, nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('role', sa.String(20), nullable=False),
        sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=now),
        sa.PrimaryKeyConstraint('user_id'),
    )

    op.create_table(
        'bank_accounts',
        sa.Column('bank_account_id', uuid_type, nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=now),
        sa.PrimaryKeyConstraint('bank_account_id'),
    )
    op.create_index('ix_bank_accounts_active', 'bank_accounts', ['active'])
    op.create_index(
        'uq_bank_accounts_active_name', 'bank_accounts', ['name'], unique=True, **active_only_where()
    )

    op.create_table(
        'ledger_transactions',
        sa.Column('transaction_id', uuid_type, nullable=False),
        sa.Column('player_id', uuid_type, nullable=False),
        sa.Column('type', sa.String(20), nullable=False),
        sa.Column('amount', money, nullable=False),
        sa.Column('payment_method', sa.String(10), nullable=True),
        sa.Column('bank_account_id', uuid_type, nullable=True),
        sa.Column('channel', sa.String(64), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('recorded_by_user_id', uuid_type, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=now),
        sa.CheckConstraint('amount > 0', name='ck_ledger_transactions_amount_positive'),
        sa.ForeignKeyConstraint(['player_id'], ['players.player_id']),
        sa.ForeignKeyConstraint(['bank_account_id'], ['bank_accounts.bank_account_id']),
        sa.ForeignKeyConstraint(['recorded_by_user_id'], ['staff_users.user_id']),
        sa.PrimaryKeyConstraint('transaction_id'),
    )
    op.create_index('ix_ledger_transactions_player_id', 'ledger_transactions', ['player_id'])
    op.create_index('ix_ledger_transactions_type', 'ledger_transactions', ['type'])
    op.create_index('ix_ledger_transactions_created_at', 'ledger_transactions', ['created_at'])
    op.create_index('ix_ledger_transactions_channel_created', 'ledger_transactions', ['channel', 'created_at'])
    op.create_index('ix_ledger_transactions_player_type', 'ledger_transactions', ['player_id', 'type'])

    op.create_table(
        'opening_balances',
        sa.Column('opening_balance_id', uuid_type, nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('channel', sa.String(64), nullable=False),
        sa.Column('amount', money, nullable=False, server_default='0'),
        sa.Column('entry_time', sa.String(8), nullable=False),
        sa.Column('set_by_user_id', uuid_type, nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=now),
        sa.ForeignKeyConstraint(['set_by_user_id'], ['staff_users.user_id']),
        sa.PrimaryKeyConstraint('opening_balance_id'),
        sa.UniqueConstraint('date', 'channel', name='uq_opening_balances_date_channel'),
    )
    op.create_index('ix_opening_balances_date', 'opening_balances', ['date'])

    op.create_table(
        'rake_records',
        sa.Column('rake_record_id', uuid_type, nullable=False),
        sa.Column('table_session_id', uuid_type, nullable=False),
        sa.Column('pot_amount', money, nullable=False),
        sa.Column('rake_amount', money, nullable=False),
        sa.Column('tip_amount', money, nullable=False, server_default='0'),
        sa.Column('player_id', uuid_type, nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=now),
        sa.ForeignKeyConstraint(['player_id'], ['players.player_id']),
        sa.PrimaryKeyConstraint('rake_record_id'),
    )
    op.create_index('ix_rake_records_table_session_id', 'rake_records', ['table_session_id'])
    op.create_index('ix_rake_records_player_id', 'rake_records', ['player_id'])
    op.create_index('ix_rake_records_created_at', 'rake_records', ['created_at'])
    op.create_index('ix_rake_records_session_created', 'rake_records', ['table_session_id', 'created_at'])

    op.create_table(
        'tip_collections',
        sa.Column('tip_collection_id', uuid_type, nullable=False),
        sa.Column('table_id', uuid_type, nullable=False),
        sa.Column('table_name', sa.String(100), nullable=True),
        sa.Column('amount', money, nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('collected_by_user_id', uuid_type, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=now),
        sa.ForeignKeyConstraint(['collected_by_user_id'], ['staff_users.user_id']),
        sa.PrimaryKeyConstraint('tip_collection_id'),
    )
    op.create_index('ix_tip_collections_table_id', 'tip_collections', ['table_id'])
    op.create_index('ix_tip_collections_created_at', 'tip_collections', ['created_at'])


def downgrade() -> None:
    op.drop_table('tip_collections')
    op.drop_table('rake_records')
    op.drop_table('opening_balances')
    op.drop_table('ledger_transactions')
    op.drop_index('uq_bank_accounts_active_name', table_name='bank_accounts')
    op.drop_index('ix_bank_accounts_active', table_name='bank_accounts')
    op.drop_table('bank_accounts')
    op.drop_table('staff_users')
    op.drop_table('players')
