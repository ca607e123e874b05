"""Replace legacy creator application fields

Revision ID: 002_replace_legacy_creator_fields
Revises: 001_initial_schema
Create Date: 2025-07-14 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '002_replace_legacy_creator_fields'
down_revision = '001_initial_schema'
branch_labels = None
depends_on = None

LEGACY_COLUMNS = ('project_category', 'project_description', 'bio', 'experience', 'portfolio')


def upgrade():
    """
    Moves creator applications to the current field set.

    Migration strategy:
    1. Add professional_title, linkedin_url, website_url
    2. Backfill professional_title from experience and website_url from portfolio
    3. Drop the legacy columns
    """
    # Step 1: Add the new columns
    with op.batch_alter_table('creator_applications', schema=None) as batch_op:
        batch_op.add_column(sa.Column('professional_title', sa.String(length=255), nullable=True))
        batch_op.add_column(sa.Column('linkedin_url', sa.String(length=500), nullable=True))
        batch_op.add_column(sa.Column('website_url', sa.String(length=500), nullable=True))

    # Step 2: Carry existing answers over
    op.execute(
        "UPDATE creator_applications "
        "SET professional_title = experience, website_url = portfolio"
    )

    # Step 3: Drop the legacy columns
    with op.batch_alter_table('creator_applications', schema=None) as batch_op:
        for column in LEGACY_COLUMNS:
            batch_op.drop_column(column)


def downgrade():
    """
    Restores the legacy columns.

    WARNING: linkedin_url has no legacy counterpart and is lost.
    """
    with op.batch_alter_table('creator_applications', schema=None) as batch_op:
        batch_op.add_column(sa.Column('bio', sa.Text(), nullable=True))
        batch_op.add_column(sa.Column('experience', sa.Text(), nullable=True))
        batch_op.add_column(sa.Column('portfolio', sa.String(length=500), nullable=True))
        batch_op.add_column(sa.Column('project_category', sa.String(length=255), nullable=True))
        batch_op.add_column(sa.Column('project_description', sa.Text(), nullable=True))

    op.execute(
        "UPDATE creator_applications "
        "SET experience = professional_title, portfolio = website_url"
    )

    with op.batch_alter_table('creator_applications', schema=None) as batch_op:
        batch_op.drop_column('website_url')
        batch_op.drop_column('linkedin_url')
        batch_op.drop_column('professional_title')
