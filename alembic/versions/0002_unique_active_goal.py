"""unique active goal per member

Revision ID: 0002
Revises: 0001
Create Date: 2024-08-02 09:41:05.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0002'
down_revision = '0001'
branch_labels = None
depends_on = None


def upgrade():
    # Keep only the newest active goal per member before adding the index
    op.execute(
        """
        UPDATE goals SET is_active = false
        WHERE is_active
          AND id NOT IN (
              SELECT MAX(id) FROM goals WHERE is_active GROUP BY member_id
          )
        """
    )

    op.create_index(
        'uq_goals_member_id_active',
        'goals',
        ['member_id'],
        unique=True,
        sqlite_where=sa.text('is_active'),
        postgresql_where=sa.text('is_active'),
    )


def downgrade():
    op.drop_index('uq_goals_member_id_active', table_name='goals')
