"""Initial schema - users, roles, permissions, grants, custom rules, audit log.

Revision ID: 001
Revises:
Create Date: 2025-03-10

"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "role",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("description", sa.String(255), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_role_name", "role", ["name"], unique=True)

    op.create_table(
        "permission",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("resource", sa.String(50), nullable=False),
        sa.Column("action", sa.String(50), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("category", sa.String(50), nullable=False, server_default="general"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_permission_name", "permission", ["name"], unique=True)

    op.create_table(
        "role_permission",
        sa.Column("role_id", sa.Integer(), sa.ForeignKey("role.id", ondelete="CASCADE"), primary_key=True),
        sa.Column(
            "permission_id", sa.Integer(), sa.ForeignKey("permission.id", ondelete="CASCADE"), primary_key=True
        ),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "user_account",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("username", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("display_name", sa.String(255), nullable=False),
        sa.Column("role", sa.String(50), nullable=False, server_default="atendente"),
        sa.Column("role_id", sa.Integer(), sa.ForeignKey("role.id"), nullable=True),
        sa.Column("data_key", sa.String(255), nullable=True),
        sa.Column("channels", postgresql.ARRAY(sa.Text()), nullable=False, server_default="{}"),
        sa.Column("macrosetores", postgresql.ARRAY(sa.Text()), nullable=False, server_default="{}"),
        sa.Column("team_id", sa.Integer(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        sa.Column("is_online", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_activity_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_user_account_email", "user_account", ["email"], unique=True)
    op.create_index("ix_user_account_username", "user_account", ["username"], unique=True)

    op.create_table(
        "custom_rule",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "user_id", sa.Integer(), sa.ForeignKey("user_account.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column(
            "permission_id", sa.Integer(), sa.ForeignKey("permission.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("conditions", postgresql.JSONB(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_custom_rule_user", "custom_rule", ["user_id", "is_active"])

    # Append-only; user_id is kept when the user row is gone.
    op.create_table(
        "audit_log",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("user_id", sa.Integer(), nullable=True),
        sa.Column("action", sa.String(50), nullable=False),
        sa.Column("resource", sa.String(255), nullable=False),
        sa.Column("resource_id", sa.String(255), nullable=True),
        sa.Column("channel", sa.String(50), nullable=True),
        sa.Column("macrosetor", sa.String(50), nullable=True),
        sa.Column("data_key", sa.String(255), nullable=True),
        sa.Column("details", sa.Text(), nullable=True),
        sa.Column("ip_address", sa.String(64), nullable=True),
        sa.Column("user_agent", sa.Text(), nullable=True),
        sa.Column("result", sa.String(20), nullable=False, server_default="success"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_audit_log_created_at", "audit_log", ["created_at"])
    op.create_index("ix_audit_log_user_action", "audit_log", ["user_id", "action"])

    op.execute("""
        INSERT INTO role (name, description) VALUES
        ('admin', 'Acesso total'),
        ('gerente', 'Gestão de equipe e usuários'),
        ('atendente', 'Atendimento de conversas')
    """)
    op.execute("""
        INSERT INTO permission (name, resource, action, description, category) VALUES
        ('permissao:gerenciar', 'permissao', 'gerenciar', 'Gerenciar permissões e funções', 'admin'),
        ('usuario:ver', 'usuario', 'ver', 'Ver usuários', 'usuarios'),
        ('usuario:editar', 'usuario', 'editar', 'Editar usuários', 'usuarios'),
        ('conversa:ver', 'conversa', 'ver', 'Ver conversas', 'conversas'),
        ('conversa:editar_proprio', 'conversa', 'editar_proprio', 'Editar conversas atribuídas', 'conversas'),
        ('contato:ver', 'contato', 'ver', 'Ver contatos', 'contatos'),
        ('contato:editar_proprio', 'contato', 'editar_proprio', 'Editar contatos atribuídos', 'contatos')
    """)
    op.execute("""
        INSERT INTO role_permission (role_id, permission_id)
        SELECT r.id, p.id FROM role r, permission p
        WHERE r.name = 'gerente'
        AND p.name IN ('usuario:ver', 'usuario:editar', 'conversa:ver', 'contato:ver')
    """)
    op.execute("""
        INSERT INTO role_permission (role_id, permission_id)
        SELECT r.id, p.id FROM role r, permission p
        WHERE r.name = 'atendente'
        AND p.name IN ('conversa:ver', 'conversa:editar_proprio', 'contato:ver', 'contato:editar_proprio')
    """)


def downgrade() -> None:
    op.drop_table("audit_log")
    op.drop_table("custom_rule")
    op.drop_table("user_account")
    op.drop_table("role_permission")
    op.drop_table("permission")
    op.drop_table("role")
