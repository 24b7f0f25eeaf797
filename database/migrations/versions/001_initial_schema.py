"""Initial schema with catalog seed.

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""

import uuid
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


STYLE_SEED = [
    ("modern", "Modern", "Modern minimalist interior with clean lines, neutral colors, and contemporary furniture. PRESERVE ALL WINDOWS EXACTLY - no modifications to window frames, glass, or views. Only add furniture that fits naturally in the visible space."),
    ("scandinavian", "Scandinavian", "Scandinavian style with light woods, cozy textiles, and hygge atmosphere. MAINTAIN WINDOWS AS-IS - no changes to windows, frames, or natural light. Place furniture naturally without overcrowding."),
    ("industrial", "Industrial", "Industrial loft style with exposed elements, metal fixtures, and urban character. DO NOT ALTER WINDOWS - keep original window appearance and natural light. Stage only visible areas naturally."),
    ("traditional", "Traditional", "Classic traditional style with elegant furniture and timeless appeal. WINDOWS MUST REMAIN UNCHANGED - preserve exact window structure and views. Add furniture that fits the space naturally."),
    ("contemporary", "Contemporary", "Contemporary design with current trends and sophisticated elements. KEEP WINDOWS EXACTLY AS SHOWN - no window modifications allowed. Natural furniture placement only."),
    ("bohemian", "Bohemian", "Bohemian eclectic style with artistic flair and layered textures. PRESERVE ORIGINAL WINDOWS - maintain all window features unchanged. Stage visible space naturally without forcing furniture."),
    ("farmhouse", "Farmhouse", "Rustic farmhouse charm with natural materials and cozy comfort. DO NOT MODIFY WINDOWS - keep all windows in their original state. Place furniture naturally in available space."),
    ("mid_century", "Mid-Century Modern", "Mid-century modern with retro flair and iconic design pieces. WINDOWS REMAIN UNTOUCHED - no changes to window appearance. Natural, uncrowded furniture arrangement."),
    ("luxury", "Luxury", "Luxury high-end staging with premium materials and sophisticated design. MAINTAIN EXACT WINDOW APPEARANCE - no window alterations. Stage elegantly without overcrowding."),
    ("coastal", "Coastal", "Coastal beach house style with light, airy atmosphere and ocean-inspired palette. PRESERVE ALL WINDOWS - keep original windows and natural light. Natural furniture placement for the visible space."),
]

ROOM_TYPE_SEED = [
    ("living_room", "Living Room"),
    ("bedroom", "Bedroom"),
    ("kitchen", "Kitchen"),
    ("dining_room", "Dining Room"),
    ("bathroom", "Bathroom"),
    ("home_office", "Home Office"),
]

PALETTE_SEED = [
    ("warm_neutrals", "Warm Neutrals", ["#F5F5DC", "#D2B48C", "#8B7355"]),
    ("cool_grays", "Cool Grays", ["#F8F8FF", "#B0B7BF", "#4A4E54"]),
    ("earth_tones", "Earth Tones", ["#E2C29F", "#A0522D", "#556B2F"]),
    ("monochrome", "Monochrome", ["#FFFFFF", "#808080", "#000000"]),
]


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
    ]


def _catalog_columns() -> list[sa.Column]:
    return [
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("code", sa.String(50), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("sort_order", sa.Integer(), server_default="0", nullable=False),
    ]


def upgrade() -> None:
    # ========================================
    # Accounts
    # ========================================

    op.create_table(
        "profiles",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("full_name", sa.String(255), nullable=True),
        sa.Column("role", sa.String(20), server_default="user", nullable=False),
        sa.Column("tokens_available", sa.Integer(), server_default="0", nullable=False),
        sa.Column("tokens_total_purchased", sa.Integer(), server_default="0", nullable=False),
        sa.Column("tokens_total_used", sa.Integer(), server_default="0", nullable=False),
        sa.Column("auth_provider", sa.String(20), server_default="magic_link", nullable=False),
        sa.Column("password_set", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("last_active_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
        sa.CheckConstraint("tokens_available >= 0", name="ck_profiles_tokens_available"),
    )
    op.create_index("idx_profiles_email", "profiles", ["email"])

    # ========================================
    # Catalog
    # ========================================

    op.create_table(
        "design_styles",
        *_catalog_columns(),
        sa.Column("base_prompt", sa.Text(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("code"),
    )
    op.create_table(
        "room_types",
        *_catalog_columns(),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("code"),
    )
    op.create_table(
        "color_palettes",
        *_catalog_columns(),
        sa.Column(
            "primary_colors",
            postgresql.JSONB(astext_type=sa.Text()),
            server_default="[]",
            nullable=False,
        ),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("code"),
    )
    op.create_table(
        "seasonal_themes",
        *_catalog_columns(),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("code"),
    )

    # ========================================
    # Projects and images
    # ========================================

    op.create_table(
        "projects",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status", sa.String(20), server_default="active", nullable=False),
        sa.Column("is_public", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("cover_image_url", sa.Text(), nullable=True),
        sa.Column("total_transformations", sa.Integer(), server_default="0", nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["profiles.id"], ondelete="CASCADE"),
    )
    op.create_index("idx_projects_user_id", "projects", ["user_id"])
    op.create_index("idx_projects_status", "projects", ["status"])

    op.create_table(
        "images",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("project_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("url", sa.Text(), nullable=False),
        sa.Column("storage_key", sa.String(500), nullable=False),
        sa.Column("thumbnail_url", sa.Text(), nullable=True),
        sa.Column("image_type", sa.String(20), server_default="room", nullable=False),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("width", sa.Integer(), nullable=True),
        sa.Column("height", sa.Integer(), nullable=True),
        sa.Column("size_bytes", sa.Integer(), server_default="0", nullable=False),
        sa.Column("content_type", sa.String(50), server_default="image/jpeg", nullable=False),
        sa.Column("upload_order", sa.Integer(), server_default="1", nullable=False),
        sa.Column("is_primary", sa.Boolean(), server_default=sa.false(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["profiles.id"], ondelete="CASCADE"),
    )
    op.create_index("idx_images_project_id", "images", ["project_id"])
    op.create_index("idx_images_user_id", "images", ["user_id"])

    # ========================================
    # Variants
    # ========================================

    op.create_table(
        "transformations",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("project_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("base_image_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("style_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("room_type_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("palette_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("seasonal_theme_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("provider", sa.String(20), server_default="gemini", nullable=False),
        sa.Column("prompt_used", sa.Text(), nullable=False),
        sa.Column("custom_instructions", sa.Text(), nullable=True),
        sa.Column("tokens_consumed", sa.Integer(), server_default="0", nullable=False),
        sa.Column("status", sa.String(20), server_default="requested", nullable=False),
        sa.Column("is_favorite", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("result_image_url", sa.Text(), nullable=True),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("processing_time_ms", sa.Integer(), nullable=True),
        sa.Column(
            "metadata",
            postgresql.JSONB(astext_type=sa.Text()),
            server_default="{}",
            nullable=False,
        ),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["base_image_id"], ["images.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["style_id"], ["design_styles.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["room_type_id"], ["room_types.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["palette_id"], ["color_palettes.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["seasonal_theme_id"], ["seasonal_themes.id"], ondelete="SET NULL"),
    )
    op.create_index("idx_transformations_user_id", "transformations", ["user_id"])
    op.create_index("idx_transformations_project_id", "transformations", ["project_id"])
    op.create_index("idx_transformations_base_image_id", "transformations", ["base_image_id"])
    op.create_index("idx_transformations_status", "transformations", ["status"])

    # ========================================
    # Ledger and shares
    # ========================================

    op.create_table(
        "token_transactions",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("amount", sa.Integer(), nullable=False),
        sa.Column("balance_before", sa.Integer(), nullable=False),
        sa.Column("balance_after", sa.Integer(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("transformation_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(
            ["transformation_id"], ["transformations.id"], ondelete="SET NULL"
        ),
    )
    op.create_index(
        "idx_token_transactions_user_created", "token_transactions", ["user_id", "created_at"]
    )

    op.create_table(
        "project_shares",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("share_token", sa.String(64), nullable=False),
        sa.Column("created_by", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("project_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("visibility", sa.String(20), server_default="unlisted", nullable=False),
        sa.Column("title", sa.String(200), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "featured_items",
            postgresql.JSONB(astext_type=sa.Text()),
            server_default="[]",
            nullable=False,
        ),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("max_views", sa.Integer(), nullable=True),
        sa.Column("current_views", sa.Integer(), server_default="0", nullable=False),
        sa.Column("last_viewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("password_hash", sa.String(64), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("share_token"),
        sa.ForeignKeyConstraint(["created_by"], ["profiles.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="CASCADE"),
    )
    op.create_index("idx_project_shares_created_by", "project_shares", ["created_by"])
    op.create_index("idx_project_shares_project_id", "project_shares", ["project_id"])

    # ========================================
    # Seed catalog
    # ========================================

    styles = sa.table(
        "design_styles",
        sa.column("id", postgresql.UUID(as_uuid=True)),
        sa.column("code", sa.String),
        sa.column("name", sa.String),
        sa.column("base_prompt", sa.Text),
        sa.column("sort_order", sa.Integer),
    )
    op.bulk_insert(
        styles,
        [
            {"id": uuid.uuid4(), "code": code, "name": name, "base_prompt": prompt, "sort_order": i}
            for i, (code, name, prompt) in enumerate(STYLE_SEED)
        ],
    )

    room_types = sa.table(
        "room_types",
        sa.column("id", postgresql.UUID(as_uuid=True)),
        sa.column("code", sa.String),
        sa.column("name", sa.String),
        sa.column("sort_order", sa.Integer),
    )
    op.bulk_insert(
        room_types,
        [
            {"id": uuid.uuid4(), "code": code, "name": name, "sort_order": i}
            for i, (code, name) in enumerate(ROOM_TYPE_SEED)
        ],
    )

    palettes = sa.table(
        "color_palettes",
        sa.column("id", postgresql.UUID(as_uuid=True)),
        sa.column("code", sa.String),
        sa.column("name", sa.String),
        sa.column("primary_colors", postgresql.JSONB),
        sa.column("sort_order", sa.Integer),
    )
    op.bulk_insert(
        palettes,
        [
            {"id": uuid.uuid4(), "code": code, "name": name, "primary_colors": colors, "sort_order": i}
            for i, (code, name, colors) in enumerate(PALETTE_SEED)
        ],
    )


def downgrade() -> None:
    op.drop_table("project_shares")
    op.drop_table("token_transactions")
    op.drop_table("transformations")
    op.drop_table("images")
    op.drop_table("projects")
    op.drop_table("seasonal_themes")
    op.drop_table("color_palettes")
    op.drop_table("room_types")
    op.drop_table("design_styles")
    op.drop_table("profiles")
