"""Initial marketplace schema

Revision ID: 001
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


JSON_TYPE = sa.JSON().with_variant(postgresql.JSONB(astext_type=sa.Text()), 'postgresql')

ENUM_TYPES = {
    'userrole': ('PetOwner', 'MVSProvider', 'Clinic', 'Admin'),
    'verificationstatus': ('NotSubmitted', 'Pending', 'Approved', 'Rejected'),
    'dorastatus': (
        'Not Verified', 'Verified - Valid', 'Verified - Expired',
        'Verified - Other Issue', 'Verification Pending',
    ),
    'pricetype': ('Flat', 'Hourly', 'Range', 'Contact'),
    'offeredlocation': ('InHome', 'InClinic', 'Both', 'Farm', 'Ranch', 'Stable'),
    'animaltype': (
        'Small Animal', 'Large Animal', 'Exotic', 'Avian', 'Equine', 'Farm Animal', 'Other',
    ),
    'appointmentstatus': ('Requested', 'Confirmed', 'Completed', 'Cancelled'),
    'moderationstatus': ('Pending', 'Approved', 'Rejected'),
    'verificationrequeststatus': ('Pending', 'Approved', 'Rejected'),
    'adminactiontype': (
        'VerifyUser', 'RejectVerification', 'BanUser', 'UnbanUser', 'IssueWarning',
        'ReviewContent', 'DeleteContent', 'ManualDoraCheck',
    ),
}


def enum(name: str) -> sa.Enum:
    return sa.Enum(*ENUM_TYPES[name], name=name)


def timestamps() -> list:
    return [
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    # Users
    op.create_table('users',
        *timestamps(),
        sa.Column('email', sa.String(length=255), nullable=False, comment='Login email, stored lower-cased'),
        sa.Column('password_hash', sa.String(length=255), nullable=False, comment='bcrypt hash of the account password'),
        sa.Column('name', sa.String(length=200), nullable=True, comment='Display name'),
        sa.Column('role', enum('userrole'), nullable=False, comment='Account role used by route authorization'),
        sa.Column('phone_number', sa.String(length=30), nullable=True, comment='Contact phone number'),
        sa.Column('profile_image', sa.String(length=500), nullable=False, comment='URL or path of the profile picture'),
        sa.Column('is_verified', sa.Boolean(), nullable=False, comment='Admin-verified account'),
        sa.Column('verification_status', enum('verificationstatus'), nullable=False, comment='State of the latest verification request'),
        sa.Column('is_banned', sa.Boolean(), nullable=False),
        sa.Column('ban_reason', sa.Text(), nullable=True),
        sa.Column('last_activity', sa.DateTime(timezone=True), nullable=True, comment='Time of the last authenticated request'),
        sa.Column('session_timeout_minutes', sa.Integer(), nullable=False, comment='Idle minutes before the session is considered expired'),
        sa.CheckConstraint('session_timeout_minutes > 0', name='check_session_timeout_positive'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_role', 'users', ['role'])
    op.create_index('ix_users_verification_status', 'users', ['verification_status'])
    op.create_index('ix_users_is_banned', 'users', ['is_banned'])
    op.create_index('idx_user_role_created', 'users', ['role', 'created_at'])

    # Visiting vet profiles
    op.create_table('visiting_vet_profiles',
        *timestamps(),
        sa.Column('user_id', sa.Uuid(), nullable=False, comment='Provider account owning this profile'),
        sa.Column('bio', sa.String(length=1000), nullable=False, comment='Professional biography'),
        sa.Column('credentials', JSON_TYPE, nullable=False, comment='Degrees and certifications'),
        sa.Column('years_experience', sa.Integer(), nullable=False, comment='Years of veterinary experience'),
        sa.Column('photo_url', sa.String(length=500), nullable=True),
        sa.Column('service_area_description', sa.String(length=500), nullable=True, comment='Free-text description of the area served'),
        sa.Column('service_area_radius_km', sa.Float(), nullable=True, comment='Travel radius in kilometres'),
        sa.Column('service_area_zip_codes', JSON_TYPE, nullable=False, comment='ZIP codes served'),
        sa.Column('license_info', sa.Text(), nullable=False, comment='Licence number and issuing board'),
        sa.Column('insurance_info', sa.Text(), nullable=False, comment='Liability insurance details'),
        sa.Column('clinic_affiliations', JSON_TYPE, nullable=False),
        sa.Column('use_external_scheduling', sa.Boolean(), nullable=False),
        sa.Column('external_scheduling_url', sa.String(length=500), nullable=True, comment='Booking link when scheduling is external'),
        sa.Column('contact_phone', sa.String(length=30), nullable=True),
        sa.Column('contact_email', sa.String(length=255), nullable=True),
        sa.Column('business_name', sa.String(length=200), nullable=True),
        sa.Column('business_address', sa.String(length=500), nullable=True),
        sa.Column('business_description', sa.String(length=1000), nullable=True),
        sa.Column('animal_types', JSON_TYPE, nullable=False, comment='Animal categories treated'),
        sa.Column('specialty_services', JSON_TYPE, nullable=False),
        sa.Column('average_rating', sa.Float(), nullable=False),
        sa.Column('number_of_reviews', sa.Integer(), nullable=False),
        sa.Column('dora_status', enum('dorastatus'), nullable=False),
        sa.Column('dora_last_checked', sa.DateTime(timezone=True), nullable=True),
        sa.Column('dora_verified_by_admin_id', sa.Uuid(), nullable=True, comment='Admin who recorded the last DORA check'),
        sa.Column('dora_source', sa.String(length=100), nullable=True),
        sa.CheckConstraint('years_experience >= 0', name='check_years_experience'),
        sa.CheckConstraint('service_area_radius_km IS NULL OR service_area_radius_km >= 0', name='check_service_area_radius'),
        sa.CheckConstraint('average_rating >= 0 AND average_rating <= 5', name='check_average_rating_range'),
        sa.CheckConstraint('number_of_reviews >= 0', name='check_number_of_reviews'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['dora_verified_by_admin_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_visiting_vet_profiles_user_id', 'visiting_vet_profiles', ['user_id'], unique=True)
    op.create_index('ix_visiting_vet_profiles_business_name', 'visiting_vet_profiles', ['business_name'])
    op.create_index('ix_visiting_vet_profiles_dora_status', 'visiting_vet_profiles', ['dora_status'])
    op.create_index('idx_profile_created', 'visiting_vet_profiles', ['created_at'])

    # Services
    op.create_table('services',
        *timestamps(),
        sa.Column('profile_id', sa.Uuid(), nullable=False, comment='Owning visiting vet profile'),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.String(length=1000), nullable=False),
        sa.Column('estimated_duration_minutes', sa.Integer(), nullable=False, comment='Expected length of the visit'),
        sa.Column('price', sa.Float(), nullable=True, comment='Flat price when a single price applies'),
        sa.Column('has_public_pricing', sa.Boolean(), nullable=False),
        sa.Column('b2b_price', sa.Float(), nullable=True, comment='Price charged to businesses'),
        sa.Column('b2c_price', sa.Float(), nullable=True, comment='Price charged to pet owners'),
        sa.Column('has_different_pricing', sa.Boolean(), nullable=False),
        sa.Column('price_type', enum('pricetype'), nullable=False),
        sa.Column('offered_location', enum('offeredlocation'), nullable=False),
        sa.Column('animal_type', enum('animaltype'), nullable=False),
        sa.Column('is_specialty_service', sa.Boolean(), nullable=False),
        sa.Column('specialty_type', sa.String(length=100), nullable=True),
        sa.Column('custom_fields', JSON_TYPE, nullable=False, comment='Provider-defined booking questions'),
        sa.CheckConstraint('estimated_duration_minutes >= 1', name='check_duration_positive'),
        sa.CheckConstraint('price IS NULL OR price >= 0', name='check_price_non_negative'),
        sa.CheckConstraint('b2b_price IS NULL OR b2b_price >= 0', name='check_b2b_price_non_negative'),
        sa.CheckConstraint('b2c_price IS NULL OR b2c_price >= 0', name='check_b2c_price_non_negative'),
        sa.CheckConstraint('price IS NULL OR (b2b_price IS NULL AND b2c_price IS NULL)', name='check_single_pricing_view'),
        sa.ForeignKeyConstraint(['profile_id'], ['visiting_vet_profiles.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_services_profile_id', 'services', ['profile_id'])
    op.create_index('idx_service_profile_created', 'services', ['profile_id', 'created_at'])

    # Availability
    op.create_table('availabilities',
        *timestamps(),
        sa.Column('profile_id', sa.Uuid(), nullable=False, comment='Profile this schedule belongs to'),
        sa.Column('weekly_schedule', JSON_TYPE, nullable=False, comment='Recurring hours per day of week'),
        sa.Column('special_dates', JSON_TYPE, nullable=False, comment='Date-specific overrides of the weekly schedule'),
        sa.ForeignKeyConstraint(['profile_id'], ['visiting_vet_profiles.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_availabilities_profile_id', 'availabilities', ['profile_id'], unique=True)

    # Appointments
    op.create_table('appointments',
        *timestamps(),
        sa.Column('pet_owner_id', sa.Uuid(), nullable=False),
        sa.Column('provider_profile_id', sa.Uuid(), nullable=False),
        sa.Column('service_id', sa.Uuid(), nullable=True),
        sa.Column('appointment_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('estimated_end_time', sa.DateTime(timezone=True), nullable=True, comment='Start plus the service duration'),
        sa.Column('notes', sa.String(length=500), nullable=True),
        sa.Column('status', enum('appointmentstatus'), nullable=False),
        sa.ForeignKeyConstraint(['pet_owner_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['provider_profile_id'], ['visiting_vet_profiles.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['service_id'], ['services.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_appointments_pet_owner_id', 'appointments', ['pet_owner_id'])
    op.create_index('ix_appointments_provider_profile_id', 'appointments', ['provider_profile_id'])
    op.create_index('ix_appointments_status', 'appointments', ['status'])
    op.create_index('idx_appointment_provider_time', 'appointments', ['provider_profile_id', 'appointment_time'])

    # Reviews
    op.create_table('reviews',
        *timestamps(),
        sa.Column('rating', sa.Integer(), nullable=False, comment='Stars from 1 to 5'),
        sa.Column('comment', sa.String(length=1000), nullable=False),
        sa.Column('reviewer_id', sa.Uuid(), nullable=False),
        sa.Column('provider_profile_id', sa.Uuid(), nullable=False),
        sa.Column('appointment_id', sa.Uuid(), nullable=False, comment='One review per appointment'),
        sa.Column('moderation_status', enum('moderationstatus'), nullable=False),
        sa.Column('moderator_notes', sa.String(length=500), nullable=True),
        sa.Column('provider_response_comment', sa.String(length=1000), nullable=True),
        sa.Column('provider_response_date', sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint('rating >= 1 AND rating <= 5', name='check_rating_range'),
        sa.ForeignKeyConstraint(['reviewer_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['provider_profile_id'], ['visiting_vet_profiles.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['appointment_id'], ['appointments.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('appointment_id'),
    )
    op.create_index('ix_reviews_reviewer_id', 'reviews', ['reviewer_id'])
    op.create_index('ix_reviews_provider_profile_id', 'reviews', ['provider_profile_id'])
    op.create_index('ix_reviews_moderation_status', 'reviews', ['moderation_status'])
    op.create_index('idx_review_provider_status', 'reviews', ['provider_profile_id', 'moderation_status'])

    # Verification requests
    op.create_table('verification_requests',
        *timestamps(),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('status', enum('verificationrequeststatus'), nullable=False),
        sa.Column('documents', JSON_TYPE, nullable=False, comment='Submitted documents as {name, url} objects'),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('reviewed_by_id', sa.Uuid(), nullable=True),
        sa.Column('reviewed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['reviewed_by_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_verification_requests_user_id', 'verification_requests', ['user_id'])
    op.create_index('ix_verification_requests_status', 'verification_requests', ['status'])
    op.create_index('idx_verification_status_created', 'verification_requests', ['status', 'created_at'])

    # Admin action logs
    op.create_table('admin_action_logs',
        *timestamps(),
        sa.Column('admin_id', sa.Uuid(), nullable=False),
        sa.Column('action_type', enum('adminactiontype'), nullable=False),
        sa.Column('target_user_id', sa.Uuid(), nullable=True),
        sa.Column('details', JSON_TYPE, nullable=True),
        sa.Column('reason', sa.String(length=500), nullable=True),
        sa.ForeignKeyConstraint(['admin_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['target_user_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_admin_action_logs_admin_id', 'admin_action_logs', ['admin_id'])
    op.create_index('ix_admin_action_logs_action_type', 'admin_action_logs', ['action_type'])
    op.create_index('ix_admin_action_logs_target_user_id', 'admin_action_logs', ['target_user_id'])
    op.create_index('idx_admin_action_created', 'admin_action_logs', ['created_at'])

    # Document templates
    op.create_table('document_templates',
        *timestamps(),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('layout_configuration', JSON_TYPE, nullable=False, comment='Title, orientation and ordered field list'),
        sa.Column('branding_options', JSON_TYPE, nullable=False, comment='logoUrl, primaryColor and secondaryColor'),
        sa.Column('required_fields', JSON_TYPE, nullable=False),
        sa.Column('is_default', sa.Boolean(), nullable=False),
        sa.Column('created_by_id', sa.Uuid(), nullable=True),
        sa.ForeignKeyConstraint(['created_by_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_document_templates_name', 'document_templates', ['name'], unique=True)
    op.create_index('ix_document_templates_is_default', 'document_templates', ['is_default'])


def downgrade() -> None:
    op.drop_table('document_templates')
    op.drop_table('admin_action_logs')
    op.drop_table('verification_requests')
    op.drop_table('reviews')
    op.drop_table('appointments')
    op.drop_table('availabilities')
    op.drop_table('services')
    op.drop_table('visiting_vet_profiles')
    op.drop_table('users')

    if op.get_bind().dialect.name == 'postgresql':
        for name in ENUM_TYPES:
            op.execute(f'DROP TYPE IF EXISTS {name}')
