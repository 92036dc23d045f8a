"""Initial schema — all tables

Revision ID: 001
Revises:
Create Date: 2026-10-17 00:00:00.000000
"""
import uuid
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# kg CO2e per kg of food, by item category
CARBON_PER_KG = {
    "dairy": 3.2,
    "fruits": 1.1,
    "vegetables": 0.7,
    "meat": 27.0,
    "bakery": 1.6,
    "beverages": 1.0,
    "snacks": 2.5,
    "frozen": 3.0,
    "other": 2.0,
}


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    # --- users ---
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("email", sa.String, unique=True, index=True, nullable=False),
        sa.Column("name", sa.String),
        sa.Column("password_hash", sa.String, nullable=False),
        *_timestamps(),
    )

    # --- user_settings ---
    op.create_table(
        "user_settings",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("user_id", sa.Uuid, sa.ForeignKey("users.id"), unique=True, nullable=False, index=True),
        sa.Column("theme", sa.String, nullable=False, server_default="system"),
        sa.Column("notification_enabled", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("expiry_warning_days", sa.Integer, nullable=False, server_default="3"),
        sa.Column("notification_frequency", sa.String, nullable=False, server_default="daily"),
        sa.Column("notification_time", sa.String, nullable=False, server_default="08:00"),
        *_timestamps(),
    )

    # --- food_items ---
    op.create_table(
        "food_items",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("user_id", sa.Uuid, sa.ForeignKey("users.id"), nullable=False, index=True),
        sa.Column("name", sa.String, nullable=False),
        sa.Column("category", sa.String, nullable=False, index=True),
        sa.Column("quantity", sa.Float, nullable=False, server_default="1"),
        sa.Column("unit", sa.String, nullable=False, server_default="pcs"),
        sa.Column("expiry_date", sa.Date, nullable=False, index=True),
        sa.Column("added_date", sa.Date, nullable=False),
        sa.Column("barcode", sa.String),
        sa.Column("notes", sa.Text),
        sa.Column("image_url", sa.String),
        sa.Column("deleted_at", sa.DateTime(timezone=True), index=True),
        *_timestamps(),
    )

    # --- notifications ---
    op.create_table(
        "notifications",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("user_id", sa.Uuid, sa.ForeignKey("users.id"), nullable=False, index=True),
        sa.Column("type", sa.String, nullable=False, index=True),
        sa.Column("message", sa.Text, nullable=False),
        sa.Column("item_id", sa.Uuid, index=True),
        sa.Column("read", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("date", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        *_timestamps(),
    )

    # --- waste_log ---
    op.create_table(
        "waste_log",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("user_id", sa.Uuid, sa.ForeignKey("users.id"), nullable=False, index=True),
        sa.Column("food_item_id", sa.Uuid, sa.ForeignKey("food_items.id", ondelete="SET NULL"), nullable=True),
        sa.Column("item_name", sa.String, nullable=False),
        sa.Column("category", sa.String, nullable=False),
        sa.Column("quantity", sa.Float, nullable=False),
        sa.Column("unit", sa.String, nullable=False),
        sa.Column("disposal_type", sa.String, nullable=False, index=True),
        sa.Column("disposal_date", sa.Date, nullable=False, index=True, server_default=sa.func.current_date()),
        sa.Column("expiry_date", sa.Date, nullable=False),
        sa.Column("reason", sa.String),
        sa.Column("estimated_cost", sa.Float, server_default="0"),
        sa.Column("carbon_footprint_kg", sa.Float, server_default="0"),
        *_timestamps(),
    )

    # --- waste_goals ---
    op.create_table(
        "waste_goals",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("user_id", sa.Uuid, sa.ForeignKey("users.id"), nullable=False, index=True),
        sa.Column("goal_type", sa.String, nullable=False),
        sa.Column("target_value", sa.Float, nullable=False),
        sa.Column("current_value", sa.Float, nullable=False, server_default="0"),
        sa.Column("target_period", sa.String, nullable=False, server_default="monthly"),
        sa.Column("start_date", sa.Date, nullable=False, server_default=sa.func.current_date()),
        sa.Column("end_date", sa.Date),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        *_timestamps(),
    )

    # --- carbon_footprint_data ---
    carbon = op.create_table(
        "carbon_footprint_data",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("category", sa.String, unique=True, index=True, nullable=False),
        sa.Column("carbon_per_kg", sa.Float, nullable=False),
        *_timestamps(),
    )
    op.bulk_insert(
        carbon,
        [{"id": uuid.uuid4(), "category": k, "carbon_per_kg": v} for k, v in CARBON_PER_KG.items()],
    )


def downgrade() -> None:
    op.drop_table("carbon_footprint_data")
    op.drop_table("waste_goals")
    op.drop_table("waste_log")
    op.drop_table("notifications")
    op.drop_table("food_items")
    op.drop_table("user_settings")
    op.drop_table("users")
