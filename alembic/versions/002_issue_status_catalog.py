"""Issue status catalog

Revision ID: 002
Revises: 001
Create Date: 2025-02-03 00:00:00.000000

Replaces the free-text issues.status column with a reference to the new
issue_statuses catalog and lets comments record status transitions.
Legacy status values are mapped onto the seeded catalog; unknown values
become 'open'.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '002'
down_revision: Union[str, None] = '001'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


DEFAULT_STATUSES = [
    {'name': 'open', 'color': '#EF4444', 'sort_order': 1},
    {'name': 'investigation', 'color': '#F59E0B', 'sort_order': 2},
    {'name': 'resolved', 'color': '#10B981', 'sort_order': 3},
    {'name': 'closed', 'color': '#6B7280', 'sort_order': 4},
]


def upgrade() -> None:
    """Create and seed issue_statuses, then move issues and comments onto it."""

    # Create issue_statuses table
    statuses = op.create_table(
        'issue_statuses',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('color', sa.String(length=20), server_default='#6B7280', nullable=True),
        sa.Column('sort_order', sa.Integer(), server_default='0', nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name')
    )
    op.create_index('ix_issue_statuses_is_active', 'issue_statuses', ['is_active'], unique=False)
    op.bulk_insert(statuses, DEFAULT_STATUSES)

    # Add status_id, filled from the legacy text column
    with op.batch_alter_table('issues') as batch_op:
        batch_op.add_column(sa.Column('status_id', sa.Integer(), nullable=True))

    op.execute(
        """
        UPDATE issues SET status_id = (
            SELECT s.id FROM issue_statuses s WHERE s.name = CASE
                WHEN issues.status IN ('in_progress', 'investigation') THEN 'investigation'
                WHEN issues.status IN ('open', 'resolved', 'closed') THEN issues.status
                ELSE 'open'
            END
        )
        """
    )

    with op.batch_alter_table('issues') as batch_op:
        batch_op.alter_column('status_id', existing_type=sa.Integer(), nullable=False)
        batch_op.create_foreign_key(
            'fk_issues_status_id_issue_statuses',
            'issue_statuses',
            ['status_id'],
            ['id'],
            ondelete='RESTRICT'
        )
        batch_op.drop_column('status')
    op.create_index('ix_issues_status_id', 'issues', ['status_id'], unique=False)

    # Comments: kind plus the transition they record
    with op.batch_alter_table('comments') as batch_op:
        batch_op.add_column(
            sa.Column('comment_type', sa.String(length=20), server_default='comment', nullable=False)
        )
        batch_op.add_column(sa.Column('old_status_id', sa.Integer(), nullable=True))
        batch_op.add_column(sa.Column('new_status_id', sa.Integer(), nullable=True))
        batch_op.create_foreign_key(
            'fk_comments_old_status_id_issue_statuses',
            'issue_statuses',
            ['old_status_id'],
            ['id'],
            ondelete='SET NULL'
        )
        batch_op.create_foreign_key(
            'fk_comments_new_status_id_issue_statuses',
            'issue_statuses',
            ['new_status_id'],
            ['id'],
            ondelete='SET NULL'
        )
        batch_op.create_check_constraint(
            'check_valid_comment_type',
            "comment_type IN ('comment', 'status_change')"
        )
        batch_op.create_check_constraint(
            'check_plain_comment_has_no_status',
            "comment_type = 'status_change' OR (old_status_id IS NULL AND new_status_id IS NULL)"
        )
        batch_op.create_check_constraint(
            'check_status_change_differs',
            "old_status_id IS NULL OR new_status_id IS NULL OR old_status_id <> new_status_id"
        )
    op.create_index('ix_comments_created_at', 'comments', ['created_at'], unique=False)


def downgrade() -> None:
    """Restore the free-text status column and drop the catalog."""
    op.drop_index('ix_comments_created_at', table_name='comments')
    # Audit entries have no representation in the legacy schema
    op.execute("DELETE FROM comments WHERE comment_type = 'status_change'")
    # Check constraints on the dropped columns go with them
    with op.batch_alter_table('comments') as batch_op:
        batch_op.drop_constraint('fk_comments_new_status_id_issue_statuses', type_='foreignkey')
        batch_op.drop_constraint('fk_comments_old_status_id_issue_statuses', type_='foreignkey')
        batch_op.drop_column('new_status_id')
        batch_op.drop_column('old_status_id')
        batch_op.drop_column('comment_type')

    with op.batch_alter_table('issues') as batch_op:
        batch_op.add_column(sa.Column('status', sa.String(length=50), server_default='open', nullable=True))

    op.execute(
        """
        UPDATE issues SET status = COALESCE(
            (SELECT s.name FROM issue_statuses s WHERE s.id = issues.status_id),
            'open'
        )
        """
    )

    op.drop_index('ix_issues_status_id', table_name='issues')
    with op.batch_alter_table('issues') as batch_op:
        batch_op.drop_constraint('fk_issues_status_id_issue_statuses', type_='foreignkey')
        batch_op.drop_column('status_id')

    op.drop_index('ix_issue_statuses_is_active', table_name='issue_statuses')
    op.drop_table('issue_statuses')
