"""Create restaurants table

Revision ID: 001
Revises: None
Create Date: 2026-10-18 00:00:00.000000+00:00

What:  Creates the `restaurants` table backing the restaurants collection.
How:   Scalar fields as VARCHAR; `address` and `grades` as JSON (JSONB on
       PostgreSQL) so their structure stays opaque to the service.

Rollback: downgrade() drops the table entirely (destructive).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

DocumentType = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def upgrade() -> None:
    op.create_table(
        "restaurants",
        # 32-char hex id generated by the application on insert
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("borough", sa.String(255), nullable=True),
        sa.Column("cuisine", sa.String(255), nullable=True),
        sa.Column("address", DocumentType, nullable=True),
        sa.Column("grades", DocumentType, nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    op.drop_table("restaurants")
