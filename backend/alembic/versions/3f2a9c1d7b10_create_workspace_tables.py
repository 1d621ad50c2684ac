"""create_workspace_tables

Revision ID: 3f2a9c1d7b10
Revises:
Create Date: 2026-10-18 09:12:31.204117

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f2a9c1d7b10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

LIVE_PREDICATE = sa.text("status IN ('active', 'trialing')")


def upgrade() -> None:
    # Users are created before teams; users.team_id gets its foreign key afterwards
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid, primary_key=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('user_type', sa.String(20), nullable=False, server_default='individual'),
        sa.Column('business_name', sa.String(255)),
        sa.Column('business_size', sa.String(50)),
        sa.Column('industry', sa.String(100)),
        sa.Column('website', sa.String(500)),
        sa.Column('plan', sa.String(20), nullable=False, server_default='free'),
        sa.Column('role', sa.String(20), nullable=False, server_default='user'),
        sa.Column('team_id', sa.Uuid),
        sa.Column('is_team_member', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('api_key_hash', sa.String(64)),
        sa.Column('documents_uploaded', sa.Integer, nullable=False, server_default='0'),
        sa.Column('models_created', sa.Integer, nullable=False, server_default='0'),
        sa.Column('total_tokens_used', sa.BigInteger, nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column('last_active_at', sa.DateTime),
        sa.Column('created_at', sa.DateTime, nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime, server_default=sa.text('CURRENT_TIMESTAMP')),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_team_id', 'users', ['team_id'])
    op.create_index('ix_users_api_key_hash', 'users', ['api_key_hash'])
    op.create_index('ix_users_is_active', 'users', ['is_active'])

    # Teams
    op.create_table(
        'teams',
        sa.Column('id', sa.Uuid, primary_key=True),
        sa.Column('name', sa.String(50), nullable=False),
        sa.Column('description', sa.String(500)),
        sa.Column('owner_id', sa.Uuid, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('created_at', sa.DateTime, nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime, server_default=sa.text('CURRENT_TIMESTAMP')),
    )
    op.create_index('ix_teams_owner_id', 'teams', ['owner_id'])
    op.create_foreign_key(
        'fk_users_team_id_teams', 'users', 'teams', ['team_id'], ['id'], ondelete='SET NULL'
    )

    op.create_table(
        'team_members',
        sa.Column('id', sa.Uuid, primary_key=True),
        sa.Column('team_id', sa.Uuid, sa.ForeignKey('teams.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.Uuid, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('role', sa.String(20), nullable=False, server_default='member'),
        sa.Column('position', sa.Integer, nullable=False, server_default='0'),
        sa.Column('added_at', sa.DateTime, nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.UniqueConstraint('team_id', 'user_id', name='uq_team_members_team_user'),
    )
    op.create_index('ix_team_members_team_id', 'team_members', ['team_id'])
    op.create_index('ix_team_members_user_id', 'team_members', ['user_id'])

    # Documents and models
    op.create_table(
        'documents',
        sa.Column('id', sa.Uuid, primary_key=True),
        sa.Column('title', sa.String(100), nullable=False),
        sa.Column('description', sa.String(500)),
        sa.Column('file_name', sa.String(255), nullable=False),
        sa.Column('file_path', sa.String(1000), nullable=False),
        sa.Column('file_size', sa.BigInteger, nullable=False, server_default='0'),
        sa.Column('file_type', sa.String(100), nullable=False),
        sa.Column('is_public', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('user_id', sa.Uuid, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('team_id', sa.Uuid, sa.ForeignKey('teams.id', ondelete='SET NULL')),
        sa.Column('created_at', sa.DateTime, nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime, server_default=sa.text('CURRENT_TIMESTAMP')),
    )
    op.create_index('ix_documents_user_id', 'documents', ['user_id'])
    op.create_index('ix_documents_team_id', 'documents', ['team_id'])

    op.create_table(
        'ai_models',
        sa.Column('id', sa.Uuid, primary_key=True),
        sa.Column('name', sa.String(50), nullable=False),
        sa.Column('description', sa.String(500)),
        sa.Column('base_model', sa.String(20), nullable=False, server_default='gpt'),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('training_progress', sa.Integer, nullable=False, server_default='0'),
        sa.Column('training_error', sa.Text),
        sa.Column('training_started_at', sa.DateTime),
        sa.Column('training_completed_at', sa.DateTime),
        sa.Column('is_public', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('user_id', sa.Uuid, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('team_id', sa.Uuid, sa.ForeignKey('teams.id', ondelete='SET NULL')),
        sa.Column('created_at', sa.DateTime, nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime, server_default=sa.text('CURRENT_TIMESTAMP')),
    )
    op.create_index('ix_ai_models_status', 'ai_models', ['status'])
    op.create_index('ix_ai_models_user_id', 'ai_models', ['user_id'])
    op.create_index('ix_ai_models_team_id', 'ai_models', ['team_id'])

    op.create_table(
        'ai_model_documents',
        sa.Column('ai_model_id', sa.Uuid, sa.ForeignKey('ai_models.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('document_id', sa.Uuid, sa.ForeignKey('documents.id', ondelete='CASCADE'), primary_key=True),
    )

    # Chats
    op.create_table(
        'chats',
        sa.Column('id', sa.Uuid, primary_key=True),
        sa.Column('title', sa.String(100), nullable=False, server_default='New Chat'),
        sa.Column('ai_model_id', sa.Uuid, sa.ForeignKey('ai_models.id', ondelete='CASCADE'), nullable=False),
        sa.Column('language', sa.String(20), nullable=False, server_default='english'),
        sa.Column('total_tokens_used', sa.BigInteger, nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column('reply_pending', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('user_id', sa.Uuid, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('team_id', sa.Uuid, sa.ForeignKey('teams.id', ondelete='SET NULL')),
        sa.Column('created_at', sa.DateTime, nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime, server_default=sa.text('CURRENT_TIMESTAMP')),
    )
    op.create_index('ix_chats_ai_model_id', 'chats', ['ai_model_id'])
    op.create_index('ix_chats_user_id', 'chats', ['user_id'])
    op.create_index('ix_chats_team_id', 'chats', ['team_id'])

    op.create_table(
        'chat_messages',
        sa.Column('id', sa.Uuid, primary_key=True),
        sa.Column('chat_id', sa.Uuid, sa.ForeignKey('chats.id', ondelete='CASCADE'), nullable=False),
        sa.Column('sequence', sa.Integer, nullable=False, server_default='0'),
        sa.Column('role', sa.String(20), nullable=False),
        sa.Column('content', sa.Text, nullable=False),
        sa.Column('token_count', sa.Integer, nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime, nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
    )
    op.create_index('ix_chat_messages_chat_id', 'chat_messages', ['chat_id'])

    # Usage and billing
    op.create_table(
        'usage_records',
        sa.Column('id', sa.Uuid, primary_key=True),
        sa.Column('user_id', sa.Uuid, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('team_id', sa.Uuid, sa.ForeignKey('teams.id', ondelete='SET NULL')),
        sa.Column('kind', sa.String(30), nullable=False),
        sa.Column('resource_type', sa.String(30)),
        sa.Column('resource_id', sa.Uuid),
        sa.Column('request_size', sa.BigInteger, nullable=False, server_default='0'),
        sa.Column('response_size', sa.BigInteger, nullable=False, server_default='0'),
        sa.Column('total_tokens', sa.Integer, nullable=False, server_default='0'),
        sa.Column('compute_time_ms', sa.Integer, nullable=False, server_default='0'),
        sa.Column('storage_used', sa.BigInteger, nullable=False, server_default='0'),
        sa.Column('endpoint', sa.String(255)),
        sa.Column('status', sa.String(20), nullable=False, server_default='success'),
        sa.Column('ip', sa.String(64)),
        sa.Column('user_agent', sa.String(500)),
        sa.Column('timestamp', sa.DateTime, nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
    )
    op.create_index('ix_usage_records_user_id', 'usage_records', ['user_id'])
    op.create_index('ix_usage_records_kind', 'usage_records', ['kind'])
    op.create_index('ix_usage_records_timestamp', 'usage_records', ['timestamp'])

    op.create_table(
        'subscriptions',
        sa.Column('id', sa.Uuid, primary_key=True),
        sa.Column('user_id', sa.Uuid, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('plan', sa.String(20), nullable=False, server_default='free'),
        sa.Column('status', sa.String(20), nullable=False, server_default='active'),
        sa.Column('start_date', sa.DateTime, nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('end_date', sa.DateTime),
        sa.Column('renewal_date', sa.DateTime),
        sa.Column('payment_method', sa.String(20), nullable=False, server_default='none'),
        sa.Column('payment_method_details', sa.JSON),
        sa.Column('cancellation_reason', sa.Text),
        sa.Column('features', sa.JSON, nullable=False),
        sa.Column('invoices', sa.JSON, nullable=False),
        sa.Column('created_at', sa.DateTime, nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime, server_default=sa.text('CURRENT_TIMESTAMP')),
    )
    op.create_index('ix_subscriptions_user_id', 'subscriptions', ['user_id'])
    op.create_index(
        'uq_subscriptions_one_live_per_user',
        'subscriptions',
        ['user_id'],
        unique=True,
        postgresql_where=LIVE_PREDICATE,
        sqlite_where=LIVE_PREDICATE,
    )

    # Companies and their versioned chatbot context
    op.create_table(
        'companies',
        sa.Column('id', sa.Uuid, primary_key=True),
        sa.Column('company_id', sa.String(255), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('document_name', sa.String(255)),
        sa.Column('document_context', sa.Text),
        sa.Column('context_version', sa.Integer, nullable=False, server_default='0'),
        sa.Column('training_status', sa.String(20), nullable=False, server_default='completed'),
        sa.Column('chatbot_url', sa.String(500), nullable=False),
        sa.Column('logo_url', sa.String(500)),
        sa.Column('brand_color', sa.String(20), nullable=False, server_default='#4f46e5'),
        sa.Column('created_at', sa.DateTime, nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime, server_default=sa.text('CURRENT_TIMESTAMP')),
    )
    op.create_index('ix_companies_company_id', 'companies', ['company_id'], unique=True)

    op.create_table(
        'company_contexts',
        sa.Column('id', sa.Uuid, primary_key=True),
        sa.Column(
            'company_id',
            sa.String(255),
            sa.ForeignKey('companies.company_id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('context', sa.Text, nullable=False),
        sa.Column('version', sa.Integer, nullable=False),
        sa.Column('is_active', sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime, nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.UniqueConstraint('company_id', 'version', name='uq_company_contexts_company_version'),
    )
    op.create_index('ix_company_contexts_company_id', 'company_contexts', ['company_id'])
    op.create_index('ix_company_contexts_is_active', 'company_contexts', ['is_active'])


def downgrade() -> None:
    op.drop_table('company_contexts')
    op.drop_table('companies')
    op.drop_table('subscriptions')
    op.drop_table('usage_records')
    op.drop_table('chat_messages')
    op.drop_table('chats')
    op.drop_table('ai_model_documents')
    op.drop_table('ai_models')
    op.drop_table('documents')
    op.drop_table('team_members')
    op.drop_constraint('fk_users_team_id_teams', 'users', type_='foreignkey')
    op.drop_table('teams')
    op.drop_table('users')
