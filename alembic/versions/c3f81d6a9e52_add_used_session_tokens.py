"""add used session tokens

Revision ID: c3f81d6a9e52
Revises: a1c4e2f0b7d3
Create Date: 2026-10-19 15:40:03.118904

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'c3f81d6a9e52'
down_revision: Union[str, None] = 'a1c4e2f0b7d3'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'used_session_tokens',
        sa.Column('token_hash', sa.String(length=64), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('used_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('token_hash'),
    )
    op.create_index(op.f('ix_used_session_tokens_used_at'), 'used_session_tokens', ['used_at'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_used_session_tokens_used_at'), table_name='used_session_tokens')
    op.drop_table('used_session_tokens')
