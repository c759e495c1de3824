"""Initial schema migration

Revision ID: 001
Revises:
Create Date: 2026-10-17 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Staff users
    op.create_table(
        'users',
        sa.Column('id', sa.String(15), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False, unique=True, index=True),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('role', sa.Enum('National Admin', 'Provincial Admin', 'District Admin', 'Branch Admin', 'Member', name='staffrole'), nullable=False, default='Member'),
        sa.Column('jurisdiction', sa.String(200), nullable=True),
        sa.Column('level', sa.String(50), nullable=True),
        sa.Column('party_position', sa.String(200), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, default=True),
        sa.Column('created', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated', sa.DateTime(timezone=True), nullable=False),
    )

    # Members
    op.create_table(
        'members',
        sa.Column('id', sa.String(15), primary_key=True),
        sa.Column('membership_id', sa.String(32), nullable=False, unique=True, index=True),
        sa.Column('full_name', sa.String(200), nullable=False, index=True),
        sa.Column('nrc_number', sa.String(20), nullable=False, unique=True, index=True),
        sa.Column('date_of_birth', sa.Date(), nullable=False),
        sa.Column('gender', sa.Enum('Male', 'Female', 'Other', name='gender'), nullable=False, default='Male'),
        sa.Column('phone', sa.String(20), nullable=False),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('residential_address', sa.Text(), nullable=False),
        sa.Column('latitude', sa.Numeric(10, 8), nullable=True),
        sa.Column('longitude', sa.Numeric(11, 8), nullable=True),
        sa.Column('province', sa.String(100), nullable=False, index=True),
        sa.Column('district', sa.String(100), nullable=False, index=True),
        sa.Column('constituency', sa.String(100), nullable=False),
        sa.Column('ward', sa.String(100), nullable=False),
        sa.Column('branch', sa.String(100), nullable=False),
        sa.Column('section', sa.String(100), nullable=False),
        sa.Column('education', sa.String(200), nullable=True),
        sa.Column('occupation', sa.String(200), nullable=True),
        sa.Column('skills', sa.JSON(), nullable=True),
        sa.Column('membership_level', sa.String(50), nullable=False, default='General'),
        sa.Column('party_role', sa.String(200), nullable=True),
        sa.Column('party_commitment', sa.Text(), nullable=True),
        sa.Column('status', sa.Enum(
            'Pending Section Review', 'Pending Branch Review', 'Pending Ward Review',
            'Pending District Review', 'Pending Provincial Review',
            'Approved', 'Rejected', 'Suspended', 'Expelled',
            name='memberstatus'
        ), nullable=False, default='Pending Section Review', index=True),
        sa.Column('profile_image', sa.String(500), nullable=True),
        sa.Column('notification_preferences', sa.JSON(), nullable=True),
        sa.Column('registration_date', sa.DateTime(timezone=True), nullable=False, index=True),
        sa.Column('created', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated', sa.DateTime(timezone=True), nullable=False),
    )

    # Events
    op.create_table(
        'events',
        sa.Column('id', sa.String(15), primary_key=True),
        sa.Column('event_name', sa.String(200), nullable=False),
        sa.Column('event_type', sa.String(100), nullable=False, index=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('event_date', sa.Date(), nullable=False, index=True),
        sa.Column('event_time', sa.Time(), nullable=True),
        sa.Column('location', sa.String(300), nullable=False),
        sa.Column('latitude', sa.Numeric(10, 8), nullable=True),
        sa.Column('longitude', sa.Numeric(11, 8), nullable=True),
        sa.Column('province', sa.String(100), nullable=True, index=True),
        sa.Column('district', sa.String(100), nullable=True),
        sa.Column('organizer', sa.String(200), nullable=False),
        sa.Column('expected_attendees', sa.Integer(), nullable=False, default=0),
        sa.Column('actual_attendees', sa.Integer(), nullable=False, default=0),
        sa.Column('status', sa.Enum('Planned', 'Active', 'Completed', 'Cancelled', name='eventstatus'), nullable=False, default='Planned', index=True),
        sa.Column('created', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated', sa.DateTime(timezone=True), nullable=False),
    )

    # Event RSVPs - one per (event, member)
    op.create_table(
        'event_rsvps',
        sa.Column('id', sa.String(15), primary_key=True),
        sa.Column('event_id', sa.String(15), sa.ForeignKey('events.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('member_id', sa.String(15), sa.ForeignKey('members.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('response', sa.Enum('Attending', 'Not Attending', 'Maybe', name='rsvpresponse'), nullable=False, default='Maybe'),
        sa.Column('responded_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('checked_in', sa.Boolean(), nullable=False, default=False),
        sa.Column('checked_in_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated', sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint('event_id', 'member_id', name='uq_event_rsvps_event_member'),
    )

    # Disciplinary cases
    op.create_table(
        'disciplinary_cases',
        sa.Column('id', sa.String(15), primary_key=True),
        sa.Column('case_number', sa.String(32), nullable=False, unique=True, index=True),
        sa.Column('member_id', sa.String(15), sa.ForeignKey('members.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('violation_type', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('severity', sa.Enum('Low', 'Medium', 'High', 'Critical', name='caseseverity'), nullable=False, default='Medium'),
        sa.Column('status', sa.Enum('Active', 'Under Investigation', 'Resolved', 'Closed', 'Appealed', name='casestatus'), nullable=False, default='Active', index=True),
        sa.Column('date_reported', sa.Date(), nullable=False),
        sa.Column('date_incident', sa.Date(), nullable=True),
        sa.Column('reporting_officer', sa.String(200), nullable=False),
        sa.Column('assigned_officer', sa.String(200), nullable=True),
        sa.Column('created', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated', sa.DateTime(timezone=True), nullable=False),
    )

    # Membership cards - one per member
    op.create_table(
        'membership_cards',
        sa.Column('id', sa.String(15), primary_key=True),
        sa.Column('member_id', sa.String(15), sa.ForeignKey('members.id', ondelete='CASCADE'), nullable=False, unique=True, index=True),
        sa.Column('card_type', sa.Enum('Standard', 'Gold', 'Platinum', name='cardtype'), nullable=False, default='Standard'),
        sa.Column('issue_date', sa.Date(), nullable=False),
        sa.Column('expiry_date', sa.Date(), nullable=True, index=True),
        sa.Column('qr_code', sa.String(64), nullable=False, unique=True),
        sa.Column('status', sa.Enum('Active', 'Expired', 'Suspended', 'Revoked', name='cardstatus'), nullable=False, default='Active', index=True),
        sa.Column('renewal_reminder_sent', sa.Boolean(), nullable=False, default=False),
        sa.Column('renewal_reminder_sent_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('last_renewed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated', sa.DateTime(timezone=True), nullable=False),
    )

    # Communications
    op.create_table(
        'communications',
        sa.Column('id', sa.String(15), primary_key=True),
        sa.Column('type', sa.Enum('SMS', 'Email', 'Push Notification', 'Announcement', name='communicationtype'), nullable=False, index=True),
        sa.Column('subject', sa.String(300), nullable=True),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('recipient_filter', sa.JSON(), nullable=True),
        sa.Column('recipients_count', sa.Integer(), nullable=False, default=0),
        sa.Column('sent_count', sa.Integer(), nullable=False, default=0),
        sa.Column('failed_count', sa.Integer(), nullable=False, default=0),
        sa.Column('status', sa.Enum('Draft', 'Scheduled', 'Sending', 'Sent', 'Failed', name='communicationstatus'), nullable=False, default='Draft', index=True),
        sa.Column('sent_by', sa.String(200), nullable=True),
        sa.Column('sent_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated', sa.DateTime(timezone=True), nullable=False),
    )

    # Communication recipients - one per (communication, member)
    op.create_table(
        'communication_recipients',
        sa.Column('id', sa.String(15), primary_key=True),
        sa.Column('communication_id', sa.String(15), sa.ForeignKey('communications.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('member_id', sa.String(15), sa.ForeignKey('members.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('status', sa.Enum('Pending', 'Sent', 'Delivered', 'Failed', name='recipientstatus'), nullable=False, default='Pending'),
        sa.Column('sent_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('delivered_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('error_message', sa.String(500), nullable=True),
        sa.Column('created', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated', sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint('communication_id', 'member_id', name='uq_communication_recipients_comm_member'),
    )


def downgrade() -> None:
    # Drop tables in reverse order
    op.drop_table('communication_recipients')
    op.drop_table('communications')
    op.drop_table('membership_cards')
    op.drop_table('disciplinary_cases')
    op.drop_table('event_rsvps')
    op.drop_table('events')
    op.drop_table('members')
    op.drop_table('users')

    # Drop enums
    op.execute('DROP TYPE IF EXISTS recipientstatus')
    op.execute('DROP TYPE IF EXISTS communicationstatus')
    op.execute('DROP TYPE IF EXISTS communicationtype')
    op.execute('DROP TYPE IF EXISTS cardstatus')
    op.execute('DROP TYPE IF EXISTS cardtype')
    op.execute('DROP TYPE IF EXISTS casestatus')
    op.execute('DROP TYPE IF EXISTS caseseverity')
    op.execute('DROP TYPE IF EXISTS rsvpresponse')
    op.execute('DROP TYPE IF EXISTS eventstatus')
    op.execute('DROP TYPE IF EXISTS memberstatus')
    op.execute('DROP TYPE IF EXISTS gender')
    op.execute('DROP TYPE IF EXISTS staffrole')
