"""init

Revision ID: 0001
Revises:
Create Date: 2024-07-26 10:12:31.418220

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    # Create family_members table
    op.create_table(
        'family_members',
        sa.Column('id', sa.Integer(), nullable=False, autoincrement=True),
        sa.Column('account_id', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('relation', sa.String(), nullable=False, server_default='self'),
        sa.Column('birth_date', sa.Date(), nullable=True),
        sa.Column('gender', sa.String(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_family_members_account_id', 'family_members', ['account_id'])

    # Create weight_records table
    op.create_table(
        'weight_records',
        sa.Column('id', sa.Integer(), nullable=False, autoincrement=True),
        sa.Column('member_id', sa.Integer(), sa.ForeignKey('family_members.id'), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('weight', sa.Numeric(5, 1), nullable=False),
        sa.Column('memo', sa.String(length=100), nullable=False, server_default=''),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_weight_records_member_id_date', 'weight_records', ['member_id', 'date'])

    # Create goals table
    op.create_table(
        'goals',
        sa.Column('id', sa.Integer(), nullable=False, autoincrement=True),
        sa.Column('member_id', sa.Integer(), sa.ForeignKey('family_members.id'), nullable=False),
        sa.Column('start_weight', sa.Numeric(5, 1), nullable=False),
        sa.Column('target_weight', sa.Numeric(5, 1), nullable=False),
        sa.Column('target_date', sa.Date(), nullable=False),
        sa.Column('goal_type', sa.String(), nullable=False),
        sa.Column('weekly_target', sa.Float(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_goals_member_id_is_active', 'goals', ['member_id', 'is_active'])

    # Create member_settings table
    op.create_table(
        'member_settings',
        sa.Column('member_id', sa.Integer(), sa.ForeignKey('family_members.id'), nullable=False),
        sa.Column('unit', sa.String(), nullable=False, server_default='kg'),
        sa.Column('theme', sa.String(), nullable=False, server_default='light'),
        sa.Column('daily_reminder', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('reminder_time', sa.String(), nullable=False, server_default='08:00'),
        sa.Column('goal_achievement_alert', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('member_id'),
    )


def downgrade():
    op.drop_table('member_settings')
    op.drop_index('idx_goals_member_id_is_active', table_name='goals')
    op.drop_table('goals')
    op.drop_index('idx_weight_records_member_id_date', table_name='weight_records')
    op.drop_table('weight_records')
    op.drop_index('idx_family_members_account_id', table_name='family_members')
    op.drop_table('family_members')
