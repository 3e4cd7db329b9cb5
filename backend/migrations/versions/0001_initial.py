"""Initial schema – identities, organizations, ciphers, links and events

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-18

Link tables (folders_ciphers, ciphers_collections, attachments) reference
ciphers without ON DELETE CASCADE: the application removes them explicitly,
in order, before it removes a cipher.
"""

from alembic import op
import sqlalchemy as sa

# Alembic revision identifiers
revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def _uuid(name, **kw):
    return sa.Column(name, sa.String(36), **kw)


def upgrade() -> None:
    # -- users / organizations -------------------------------------------
    op.create_table(
        "users",
        _uuid("uuid", primary_key=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_table(
        "organizations",
        _uuid("uuid", primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_table(
        "users_organizations",
        _uuid("uuid", primary_key=True),
        _uuid("user_uuid", sa.ForeignKey("users.uuid"), nullable=False),
        _uuid("org_uuid", sa.ForeignKey("organizations.uuid"), nullable=False),
        sa.Column("access_all", sa.Boolean(), nullable=False, server_default=sa.false()),
        # 0 owner, 1 admin, 2 manager, 3 member
        sa.Column("atype", sa.Integer(), nullable=False, server_default="3"),
        sa.UniqueConstraint("user_uuid", "org_uuid", name="uq_users_organizations_user_org"),
    )
    op.create_index("idx_users_organizations_user_uuid", "users_organizations", ["user_uuid"])
    op.create_index("idx_users_organizations_org_uuid", "users_organizations", ["org_uuid"])

    # -- collections / folders -------------------------------------------
    op.create_table(
        "collections",
        _uuid("uuid", primary_key=True),
        _uuid("org_uuid", sa.ForeignKey("organizations.uuid"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
    )
    op.create_index("idx_collections_org_uuid", "collections", ["org_uuid"])
    op.create_table(
        "users_collections",
        _uuid("user_uuid", sa.ForeignKey("users.uuid"), primary_key=True),
        _uuid("collection_uuid", sa.ForeignKey("collections.uuid"), primary_key=True),
    )
    op.create_table(
        "folders",
        _uuid("uuid", primary_key=True),
        _uuid("user_uuid", sa.ForeignKey("users.uuid"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("idx_folders_user_uuid", "folders", ["user_uuid"])

    # -- ciphers and everything hanging off them -------------------------
    op.create_table(
        "ciphers",
        _uuid("uuid", primary_key=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        _uuid("user_uuid", sa.ForeignKey("users.uuid"), nullable=True),
        _uuid("organization_uuid", sa.ForeignKey("organizations.uuid"), nullable=True),
        sa.Column("atype", sa.Integer(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("fields", sa.Text(), nullable=True),
        sa.Column("data", sa.Text(), nullable=False),
        sa.Column("favorite", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.CheckConstraint(
            "(user_uuid IS NULL) <> (organization_uuid IS NULL)",
            name="ck_ciphers_single_owner",
        ),
    )
    op.create_index("idx_ciphers_user_uuid", "ciphers", ["user_uuid"])
    op.create_index("idx_ciphers_organization_uuid", "ciphers", ["organization_uuid"])

    op.create_table(
        "folders_ciphers",
        _uuid("cipher_uuid", sa.ForeignKey("ciphers.uuid"), primary_key=True),
        _uuid("folder_uuid", sa.ForeignKey("folders.uuid"), primary_key=True),
    )
    op.create_table(
        "ciphers_collections",
        _uuid("cipher_uuid", sa.ForeignKey("ciphers.uuid"), primary_key=True),
        _uuid("collection_uuid", sa.ForeignKey("collections.uuid"), primary_key=True),
    )
    op.create_table(
        "attachments",
        _uuid("id", primary_key=True),
        _uuid("cipher_uuid", sa.ForeignKey("ciphers.uuid"), nullable=False),
        sa.Column("file_name", sa.Text(), nullable=False),
        sa.Column("file_size", sa.Integer(), nullable=False),
        sa.Column("akey", sa.Text(), nullable=True),
    )
    op.create_index("idx_attachments_cipher_uuid", "attachments", ["cipher_uuid"])

    # -- event -----------------------------------------------------------
    # No foreign keys: events outlive the rows they mention.
    op.create_table(
        "event",
        _uuid("uuid", primary_key=True),
        sa.Column("event_type", sa.Integer(), nullable=False),
        _uuid("user_uuid", nullable=True),
        _uuid("org_uuid", nullable=True),
        _uuid("cipher_uuid", nullable=True),
        _uuid("collection_uuid", nullable=True),
        _uuid("group_uuid", nullable=True),
        _uuid("org_user_uuid", nullable=True),
        _uuid("act_user_uuid", nullable=True),
        sa.Column("device_type", sa.Integer(), nullable=True),
        sa.Column("ip_address", sa.String(45), nullable=True),
        sa.Column("event_date", sa.DateTime(), nullable=False),
    )
    op.create_index("idx_event_org_uuid", "event", ["org_uuid"])
    op.create_index("idx_event_cipher_uuid", "event", ["cipher_uuid"])
    op.create_index("idx_event_event_date", "event", ["event_date"])


def downgrade() -> None:
    op.drop_index("idx_event_event_date", table_name="event")
    op.drop_index("idx_event_cipher_uuid", table_name="event")
    op.drop_index("idx_event_org_uuid", table_name="event")
    op.drop_table("event")
    op.drop_index("idx_attachments_cipher_uuid", table_name="attachments")
    op.drop_table("attachments")
    op.drop_table("ciphers_collections")
    op.drop_table("folders_ciphers")
    op.drop_index("idx_ciphers_organization_uuid", table_name="ciphers")
    op.drop_index("idx_ciphers_user_uuid", table_name="ciphers")
    op.drop_table("ciphers")
    op.drop_index("idx_folders_user_uuid", table_name="folders")
    op.drop_table("folders")
    op.drop_table("users_collections")
    op.drop_index("idx_collections_org_uuid", table_name="collections")
    op.drop_table("collections")
    op.drop_index("idx_users_organizations_org_uuid", table_name="users_organizations")
    op.drop_index("idx_users_organizations_user_uuid", table_name="users_organizations")
    op.drop_table("users_organizations")
    op.drop_table("organizations")
    op.drop_table("users")
