"""salon admission schema

Revision ID: c3a91f5e2d47
Revises: 
Create Date: 2026-10-19 09:12:44.531806

"""
from pathlib import Path
from typing import Sequence, Union

from alembic import op


# revision identifiers, used by Alembic.
revision: str = 'c3a91f5e2d47'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    project_root = Path(__file__).resolve().parents[2]
    sql_dir = project_root / "sql"

    for filename in ("010_schema.sql", "030_commit_booking.sql"):
        op.execute((sql_dir / filename).read_text())


def downgrade() -> None:
    op.execute("DROP FUNCTION IF EXISTS lock_time_slot(date, text, text, timestamptz);")
    op.execute("DROP FUNCTION IF EXISTS lock_date(date, text, timestamptz);")
    op.execute(
        """
        DROP FUNCTION IF EXISTS commit_booking(
          text, text, text, text, jsonb, date, text,
          text, timestamptz, numeric, integer
        );
        """
    )
    op.execute("DROP FUNCTION IF EXISTS salon_day_key(date);")
    op.drop_table("locked_time_slot", schema="public")
    op.drop_table("locked_date", schema="public")
    op.drop_table("booking", schema="public")
