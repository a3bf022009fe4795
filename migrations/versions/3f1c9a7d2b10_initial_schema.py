"""initial schema

Revision ID: 3f1c9a7d2b10
Revises:
Create Date: 2026-10-19 10:12:44.508213

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
import sqlmodel


# revision identifiers, used by Alembic.
revision: str = '3f1c9a7d2b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Enum columns store member NAMES, as SQLModel declares them
userrole = sa.Enum('CLIENT', 'PARTNER', 'ADMIN', name='userrole')
partnerstatus = sa.Enum('PENDING', 'VERIFIED', 'REJECTED', name='partnerstatus')
inquirystatus = sa.Enum('NEW', 'RESPONDED', 'BOOKED', 'CLOSED', name='inquirystatus')
moderationstatus = sa.Enum('PENDING', 'APPROVED', 'REJECTED', name='moderationstatus')
auditaction = sa.Enum('CREATE', 'UPDATE', 'DELETE', name='auditaction')


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    ]


def upgrade():
    op.create_table(
        'user',
        *_timestamps(),
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('email', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('hashed_password', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('role', userrole, nullable=False),
        sa.Column('name', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('phone', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('refresh_token', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_user_email'), 'user', ['email'], unique=True)

    op.create_table(
        'otpcredential',
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('code_hash', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.Column('attempts', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['user.id']),
        sa.PrimaryKeyConstraint('user_id'),
    )

    op.create_table(
        'partner',
        *_timestamps(),
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('business_name', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('service_categories', sa.JSON(), nullable=True),
        sa.Column('city', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('state', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('national_id', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('document_metadata', sa.JSON(), nullable=True),
        sa.Column('sample_portfolio_urls', sa.JSON(), nullable=True),
        sa.Column('status', partnerstatus, nullable=False),
        sa.Column('verification_comment', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('verified_by', sa.Uuid(), nullable=True),
        sa.Column('verified_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['user.id']),
        sa.ForeignKeyConstraint(['verified_by'], ['user.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_partner_user_id'), 'partner', ['user_id'], unique=True)
    op.create_index(op.f('ix_partner_city'), 'partner', ['city'], unique=False)
    op.create_index(op.f('ix_partner_status'), 'partner', ['status'], unique=False)

    op.create_table(
        'inquiry',
        *_timestamps(),
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('client_id', sa.Uuid(), nullable=False),
        sa.Column('category', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('event_date', sa.Date(), nullable=False),
        sa.Column('budget', sa.Float(), nullable=False),
        sa.Column('city', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('reference_image_url', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('description', sqlmodel.sql.sqltypes.AutoString(length=1000), nullable=False),
        sa.Column('status', inquirystatus, nullable=False),
        sa.ForeignKeyConstraint(['client_id'], ['user.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_inquiry_client_id'), 'inquiry', ['client_id'], unique=False)
    op.create_index(op.f('ix_inquiry_status'), 'inquiry', ['status'], unique=False)

    op.create_table(
        'inquirypartnerlink',
        sa.Column('inquiry_id', sa.Uuid(), nullable=False),
        sa.Column('partner_id', sa.Uuid(), nullable=False),
        sa.ForeignKeyConstraint(['inquiry_id'], ['inquiry.id']),
        sa.ForeignKeyConstraint(['partner_id'], ['partner.id']),
        sa.PrimaryKeyConstraint('inquiry_id', 'partner_id'),
    )

    op.create_table(
        'review',
        *_timestamps(),
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('client_id', sa.Uuid(), nullable=False),
        sa.Column('partner_id', sa.Uuid(), nullable=False),
        sa.Column('inquiry_id', sa.Uuid(), nullable=True),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('comment', sqlmodel.sql.sqltypes.AutoString(length=1000), nullable=False),
        sa.Column('moderation_status', moderationstatus, nullable=False),
        sa.Column('moderated_by', sa.Uuid(), nullable=True),
        sa.Column('moderation_comment', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.ForeignKeyConstraint(['client_id'], ['user.id']),
        sa.ForeignKeyConstraint(['partner_id'], ['partner.id']),
        sa.ForeignKeyConstraint(['inquiry_id'], ['inquiry.id']),
        sa.ForeignKeyConstraint(['moderated_by'], ['user.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('client_id', 'partner_id', name='uq_review_client_partner'),
    )
    op.create_index(op.f('ix_review_client_id'), 'review', ['client_id'], unique=False)
    op.create_index(op.f('ix_review_partner_id'), 'review', ['partner_id'], unique=False)
    op.create_index(op.f('ix_review_moderation_status'), 'review', ['moderation_status'], unique=False)

    op.create_table(
        'portfolioitem',
        *_timestamps(),
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('partner_id', sa.Uuid(), nullable=False),
        sa.Column('image_url', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('title', sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False),
        sa.Column('description', sqlmodel.sql.sqltypes.AutoString(length=500), nullable=False),
        sa.Column('category', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('display_order', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['partner_id'], ['partner.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_portfolioitem_partner_id'), 'portfolioitem', ['partner_id'], unique=False)

    op.create_table(
        'category',
        *_timestamps(),
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('description', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_category_name'), 'category', ['name'], unique=True)

    op.create_table(
        'location',
        *_timestamps(),
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('city', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('state', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('city', 'state', name='uq_location_city_state'),
    )

    op.create_table(
        'systemauditlog',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('actor_user_id', sa.Uuid(), nullable=False),
        sa.Column('entity_type', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('entity_id', sa.Uuid(), nullable=False),
        sa.Column('action', auditaction, nullable=False),
        sa.Column('changes', sa.JSON(), nullable=True),
        sa.Column('ip_address', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('timestamp', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['actor_user_id'], ['user.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_systemauditlog_actor_user_id'), 'systemauditlog', ['actor_user_id'], unique=False)
    op.create_index(op.f('ix_systemauditlog_entity_id'), 'systemauditlog', ['entity_id'], unique=False)


def downgrade():
    op.drop_table('systemauditlog')
    op.drop_table('location')
    op.drop_table('category')
    op.drop_table('portfolioitem')
    op.drop_table('review')
    op.drop_table('inquirypartnerlink')
    op.drop_table('inquiry')
    op.drop_table('partner')
    op.drop_table('otpcredential')
    op.drop_table('user')

    bind = op.get_bind()
    if bind.dialect.name == 'postgresql':
        for enum in (auditaction, moderationstatus, inquirystatus, partnerstatus, userrole):
            enum.drop(bind, checkfirst=True)
