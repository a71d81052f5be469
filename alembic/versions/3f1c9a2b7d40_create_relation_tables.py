"""Create users and relation tables

Revision ID: 3f1c9a2b7d40
Revises:
Create Date: 2026-10-19 10:12:31.408112

"""
import enum
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '3f1c9a2b7d40'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


class DirectedRelationKindEnum(str, enum.Enum):
    TRUST = "TRUST"
    FRIEND = "FRIEND"

directed_relation_kind_enum = postgresql.ENUM(*[e.value for e in DirectedRelationKindEnum], name="directedrelationkind", create_type=False)

def upgrade() -> None:
    """Create the users table and the three relation tables.

    Symmetric uniqueness is enforced by the database:
    - relation_requests is unique on the sorted (pair_low, pair_high) pair
    - mutual_relations stores each pair sorted and is unique on it
    - directed_relations is unique per (kind, giver_id, receiver_id)
    """
    directed_relation_kind_enum.create(op.get_bind(), checkfirst=True)

    op.create_table(
        'users',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('username', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_username', 'users', ['username'], unique=True)

    op.create_table(
        'directed_relations',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('kind', directed_relation_kind_enum, nullable=False),
        sa.Column('giver_id', sa.String(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('receiver_id', sa.String(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint('kind', 'giver_id', 'receiver_id', name='uq_directed_relations_kind_giver_receiver'),
        sa.CheckConstraint('giver_id <> receiver_id', name='ck_directed_relations_not_self'),
    )
    op.create_index('ix_directed_relations_id', 'directed_relations', ['id'])
    op.create_index('ix_directed_relations_kind', 'directed_relations', ['kind'])
    op.create_index('ix_directed_relations_giver_id', 'directed_relations', ['giver_id'])
    op.create_index('ix_directed_relations_receiver_id', 'directed_relations', ['receiver_id'])

    op.create_table(
        'relation_requests',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('sender_id', sa.String(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('receiver_id', sa.String(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('pair_low', sa.String(), nullable=False),
        sa.Column('pair_high', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint('pair_low', 'pair_high', name='uq_relation_requests_pair'),
        sa.CheckConstraint('sender_id <> receiver_id', name='ck_relation_requests_not_self'),
    )
    op.create_index('ix_relation_requests_id', 'relation_requests', ['id'])
    op.create_index('ix_relation_requests_sender_id', 'relation_requests', ['sender_id'])
    op.create_index('ix_relation_requests_receiver_id', 'relation_requests', ['receiver_id'])

    op.create_table(
        'mutual_relations',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('user_one_id', sa.String(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_two_id', sa.String(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint('user_one_id', 'user_two_id', name='uq_mutual_relations_pair'),
        sa.CheckConstraint('user_one_id < user_two_id', name='ck_mutual_relations_canonical'),
    )
    op.create_index('ix_mutual_relations_id', 'mutual_relations', ['id'])
    op.create_index('ix_mutual_relations_user_one_id', 'mutual_relations', ['user_one_id'])
    op.create_index('ix_mutual_relations_user_two_id', 'mutual_relations', ['user_two_id'])


def downgrade() -> None:
    op.drop_table('mutual_relations')
    op.drop_table('relation_requests')
    op.drop_table('directed_relations')
    op.drop_table('users')
    directed_relation_kind_enum.drop(op.get_bind(), checkfirst=True)
