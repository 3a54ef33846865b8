"""Initial schema: users, types, events, event_participants; seed event types.

Revision ID: 001
Revises: None
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

SEED_TYPES = [
    {"id": 1, "name": "Animals"},
    {"id": 2, "name": "Fun"},
    {"id": 3, "name": "Discussion"},
    {"id": 4, "name": "Work"},
]


def upgrade() -> None:
    # Users mirror the external identity store
    op.create_table(
        "users",
        sa.Column("id", sa.String(450), primary_key=True),
        sa.Column("username", sa.String(256), nullable=False),
        sa.Column("email", sa.String(256), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)

    types = op.create_table(
        "types",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(15), nullable=False),
    )
    op.create_index("ix_types_id", "types", ["id"])

    op.create_table(
        "events",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(20), nullable=False),
        sa.Column("description", sa.String(150), nullable=False),
        sa.Column("start", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end", sa.DateTime(timezone=True), nullable=False),
        sa.Column("organiser_id", sa.String(450), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("type_id", sa.Integer(), sa.ForeignKey("types.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_events_id", "events", ["id"])
    op.create_index("ix_events_organiser_id", "events", ["organiser_id"])
    # The listing is ordered by start time
    op.create_index("ix_events_start", "events", ["start"])

    op.create_table(
        "event_participants",
        sa.Column("event_id", sa.Integer(), sa.ForeignKey("events.id"), primary_key=True),
        sa.Column("user_id", sa.String(450), sa.ForeignKey("users.id"), primary_key=True),
    )
    op.create_index("ix_event_participants_user_id", "event_participants", ["user_id"])

    op.bulk_insert(types, SEED_TYPES)


def downgrade() -> None:
    op.drop_table("event_participants")
    op.drop_table("events")
    op.drop_table("types")
    op.drop_table("users")
