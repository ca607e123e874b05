"""Create accounts and creator_applications tables

Revision ID: 001_initial_schema
Revises:
Create Date: 2025-06-02 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    """
    Creates the two independent tables.

    creator_applications still carries the first-generation applicant fields
    (bio, experience, portfolio, project_category, project_description);
    002_replace_legacy_creator_fields moves them to the current columns.
    """
    op.create_table(
        'accounts',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=256), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('accounts', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_accounts_email'), ['email'], unique=True)

    op.create_table(
        'creator_applications',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('wallet_address', sa.String(length=255), nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('experience', sa.Text(), nullable=True),
        sa.Column('portfolio', sa.String(length=500), nullable=True),
        sa.Column('project_category', sa.String(length=255), nullable=True),
        sa.Column('project_description', sa.Text(), nullable=True),
        sa.Column('verification_docs', sa.JSON(), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='PENDING'),
        sa.Column('submitted_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint(
            "status IN ('PENDING', 'APPROVED', 'REJECTED')",
            name='ck_creator_applications_status',
        ),
    )
    with op.batch_alter_table('creator_applications', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_creator_applications_wallet_address'), ['wallet_address'], unique=True)
        batch_op.create_index(batch_op.f('ix_creator_applications_status'), ['status'], unique=False)
        batch_op.create_index(batch_op.f('ix_creator_applications_submitted_at'), ['submitted_at'], unique=False)


def downgrade():
    with op.batch_alter_table('creator_applications', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_creator_applications_submitted_at'))
        batch_op.drop_index(batch_op.f('ix_creator_applications_status'))
        batch_op.drop_index(batch_op.f('ix_creator_applications_wallet_address'))
    op.drop_table('creator_applications')

    with op.batch_alter_table('accounts', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_accounts_email'))
    op.drop_table('accounts')
