"""initial_schema

Revision ID: 3f1c9a7b2d10
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql
from sqlalchemy.dialects.postgresql import UUID


# revision identifiers, used by Alembic.
revision: str = '3f1c9a7b2d10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Types are created explicitly; club_application_status_enum is shared by two tables
club_application_status = postgresql.ENUM(
    'pending', 'approved', 'rejected',
    name='club_application_status_enum', create_type=False,
)
admin_action_type = postgresql.ENUM(
    'approve', 'reject', 'bulk_approve', 'bulk_reject', 'view', 'export',
    name='admin_action_type_enum', create_type=False,
)
admin_target_type = postgresql.ENUM(
    'club_application', 'report', 'audit_log',
    name='admin_target_type_enum', create_type=False,
)
opportunity_status = postgresql.ENUM(
    'active', 'filled', 'cancelled',
    name='opportunity_status_enum', create_type=False,
)
volunteer_application_status = postgresql.ENUM(
    'pending', 'accepted', 'rejected', 'withdrawn',
    name='volunteer_application_status_enum', create_type=False,
)
ENUMS = (
    club_application_status,
    admin_action_type,
    admin_target_type,
    opportunity_status,
    volunteer_application_status,
)


def upgrade() -> None:
    """Upgrade schema - clubs, audit trail, volunteers and messaging."""
    bind = op.get_bind()
    for enum_type in ENUMS:
        enum_type.create(bind, checkfirst=True)

    # Clubs service
    op.create_table(
        'clubs',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('location', sa.String(length=200), nullable=False),
        sa.Column('contact_email', sa.String(length=320), nullable=False),
        sa.Column('contact_phone', sa.String(length=32), nullable=True),
        sa.Column('logo_url', sa.String(length=500), nullable=True),
        sa.Column('website_url', sa.String(length=500), nullable=True),
        sa.Column('sport_types', sa.JSON(), nullable=True),
        sa.Column('verified', sa.Boolean(), nullable=True),
        sa.Column('application_status', club_application_status, nullable=False),
        sa.Column('admin_notes', sa.Text(), nullable=True),
        sa.Column('reviewed_by', sa.String(), nullable=True),
        sa.Column('reviewed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_clubs_location', 'clubs', ['location'])
    op.create_index('ix_clubs_contact_email', 'clubs', ['contact_email'], unique=True)
    op.create_index('ix_clubs_application_status', 'clubs', ['application_status'])
    op.create_index('ix_clubs_reviewed_by', 'clubs', ['reviewed_by'])

    op.create_table(
        'club_application_history',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('club_id', UUID(as_uuid=True), nullable=True),
        sa.Column('admin_id', sa.String(), nullable=True),
        sa.Column('action', club_application_status, nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['club_id'], ['clubs.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_club_application_history_club_id', 'club_application_history', ['club_id'])
    op.create_index('ix_club_application_history_admin_id', 'club_application_history', ['admin_id'])
    op.create_index('ix_club_application_history_action', 'club_application_history', ['action'])
    op.create_index('ix_club_application_history_created_at', 'club_application_history', ['created_at'])

    op.create_table(
        'admin_activity_logs',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('admin_id', sa.String(), nullable=False),
        sa.Column('admin_email', sa.String(length=320), nullable=True),
        sa.Column('action_type', admin_action_type, nullable=False),
        sa.Column('target_type', admin_target_type, nullable=False),
        sa.Column('target_id', sa.String(), nullable=True),
        sa.Column('target_name', sa.String(length=200), nullable=True),
        sa.Column('details', sa.Text(), nullable=True),
        sa.Column('ip_address', sa.String(length=45), nullable=True),
        sa.Column('user_agent', sa.String(length=500), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_admin_activity_logs_admin_id', 'admin_activity_logs', ['admin_id'])
    op.create_index('ix_admin_activity_logs_action_type', 'admin_activity_logs', ['action_type'])
    op.create_index('ix_admin_activity_logs_created_at', 'admin_activity_logs', ['created_at'])

    # Volunteer service
    op.create_table(
        'volunteer_profiles',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=320), nullable=False),
        sa.Column('phone', sa.String(length=32), nullable=True),
        sa.Column('location', sa.String(length=200), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('skills', sa.JSON(), nullable=True),
        sa.Column('availability', sa.JSON(), nullable=True),
        sa.Column('profile_image_url', sa.String(length=500), nullable=True),
        sa.Column('is_visible', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_volunteer_profiles_user_id', 'volunteer_profiles', ['user_id'], unique=True)
    op.create_index('ix_volunteer_profiles_is_visible', 'volunteer_profiles', ['is_visible'])

    op.create_table(
        'volunteer_opportunities',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('club_id', UUID(as_uuid=True), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('required_skills', sa.JSON(), nullable=True),
        sa.Column('time_commitment', sa.String(length=200), nullable=False),
        sa.Column('location', sa.String(length=200), nullable=True),
        sa.Column('start_date', sa.Date(), nullable=True),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('is_recurring', sa.Boolean(), nullable=True),
        sa.Column('status', opportunity_status, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_volunteer_opportunities_club_id', 'volunteer_opportunities', ['club_id'])
    op.create_index('ix_volunteer_opportunities_status', 'volunteer_opportunities', ['status'])

    op.create_table(
        'volunteer_applications',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('opportunity_id', UUID(as_uuid=True), nullable=True),
        sa.Column('volunteer_id', UUID(as_uuid=True), nullable=True),
        sa.Column('message', sa.Text(), nullable=True),
        sa.Column('status', volunteer_application_status, nullable=False),
        sa.Column('applied_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['opportunity_id'], ['volunteer_opportunities.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['volunteer_id'], ['volunteer_profiles.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('opportunity_id', 'volunteer_id', name='uq_application_per_volunteer')
    )
    op.create_index('ix_volunteer_applications_opportunity_id', 'volunteer_applications', ['opportunity_id'])
    op.create_index('ix_volunteer_applications_volunteer_id', 'volunteer_applications', ['volunteer_id'])
    op.create_index('ix_volunteer_applications_status', 'volunteer_applications', ['status'])

    # Messaging service
    op.create_table(
        'messages',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('sender_id', sa.String(), nullable=False),
        sa.Column('recipient_id', sa.String(), nullable=False),
        sa.Column('subject', sa.String(length=200), nullable=True),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('read', sa.Boolean(), nullable=True),
        sa.Column('read_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_messages_sender_id', 'messages', ['sender_id'])
    op.create_index('ix_messages_recipient_id', 'messages', ['recipient_id'])
    op.create_index('ix_messages_created_at', 'messages', ['created_at'])
    op.create_index('ix_messages_recipient_read', 'messages', ['recipient_id', 'read'])


def downgrade() -> None:
    """Downgrade schema - drop everything created above."""
    op.drop_table('messages')
    op.drop_table('volunteer_applications')
    op.drop_table('volunteer_opportunities')
    op.drop_table('volunteer_profiles')
    op.drop_table('admin_activity_logs')
    op.drop_table('club_application_history')
    op.drop_table('clubs')

    bind = op.get_bind()
    for enum_type in reversed(ENUMS):
        enum_type.drop(bind, checkfirst=True)
