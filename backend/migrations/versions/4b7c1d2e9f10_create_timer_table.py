"""create timer table

Revision ID: 4b7c1d2e9f10
Revises:
Create Date: 2026-10-17 00:00:00
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '4b7c1d2e9f10'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'timer',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('event', sa.String(length=255), nullable=False),
        sa.Column('state', sa.String(length=16), nullable=False, server_default='undefined'),
        sa.Column('end_date', sa.String(length=32), nullable=False, server_default=''),
        sa.Column('paused_date', sa.String(length=32), nullable=False, server_default=''),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('timer') as batch_op:
        batch_op.create_index(batch_op.f('ix_timer_event'), ['event'], unique=True)


def downgrade():
    with op.batch_alter_table('timer') as batch_op:
        batch_op.drop_index(batch_op.f('ix_timer_event'))
    op.drop_table('timer')
