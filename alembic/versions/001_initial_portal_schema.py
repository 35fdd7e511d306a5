"""Initial portal schema

Revision ID: 001_initial_portal_schema
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001_initial_portal_schema'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    ]


def _status(name='status', default='PENDING'):
    # Enums are stored by value in VARCHAR columns (native_enum=False)
    return sa.Column(name, sa.String(32), nullable=False, server_default=default)


def _submittable_columns():
    return [
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        _status(),
        sa.Column('owner_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('upazila_id', sa.Integer(), sa.ForeignKey('upazilas.id', ondelete='SET NULL'), nullable=True),
        sa.Column('reviewed_by_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('reviewed_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    ]


def _submittable_indexes(table):
    op.create_index(f'idx_{table}_status', table, ['status'])
    op.create_index(f'idx_{table}_upazila_id', table, ['upazila_id'])


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('email', sa.String(255), unique=True, nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('full_name', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(32), nullable=True),
        sa.Column('user_types', sa.JSON(), nullable=False),
        sa.Column('roles', sa.JSON(), nullable=False),
        _status('approval_status'),
        sa.Column('last_login_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('length(trim(email)) > 0', name='chk_user_email_not_empty'),
    )
    op.create_index('idx_users_approval_status', 'users', ['approval_status'])

    op.create_table(
        'upazilas',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(120), nullable=False),
        sa.Column('name_bn', sa.String(120), nullable=True),
        sa.Column('slug', sa.String(120), unique=True, nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('description_bn', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('display_order', sa.Integer(), nullable=False, server_default='0'),
        *_timestamps(),
        sa.CheckConstraint('length(trim(slug)) > 0', name='chk_upazila_slug_not_empty'),
    )

    op.create_table(
        'hospitals',
        *_submittable_columns(),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('name_bn', sa.String(255)),
        sa.Column('type', sa.String(32), nullable=True),
        sa.Column('address', sa.Text(), nullable=False),
        sa.Column('address_bn', sa.Text()),
        sa.Column('phone', sa.String(64), nullable=False),
        sa.Column('email', sa.String(255)),
        sa.Column('services', sa.Text()),
        sa.Column('services_bn', sa.Text()),
        sa.Column('website', sa.String(500)),
    )
    _submittable_indexes('hospitals')

    op.create_table(
        'home_tutors',
        *_submittable_columns(),
        sa.Column('tutor_name', sa.String(255), nullable=False),
        sa.Column('tutor_name_bn', sa.String(255)),
        sa.Column('phone', sa.String(64), nullable=False),
        sa.Column('email', sa.String(255)),
        sa.Column('subjects', sa.Text(), nullable=False),
        sa.Column('subjects_bn', sa.Text()),
        sa.Column('classes', sa.String(255), nullable=False),
        sa.Column('experience_years', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('qualification', sa.String(255)),
        sa.Column('qualification_bn', sa.String(255)),
        sa.Column('preferred_area', sa.String(255)),
        sa.Column('expected_fee', sa.String(120)),
        sa.Column('additional_info', sa.Text()),
    )
    _submittable_indexes('home_tutors')

    op.create_table(
        'to_lets',
        *_submittable_columns(),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('title_bn', sa.String(255)),
        sa.Column('property_type', sa.String(32), nullable=False, server_default='APARTMENT'),
        sa.Column('rent', sa.Float(), nullable=False),
        sa.Column('address', sa.Text(), nullable=False),
        sa.Column('address_bn', sa.Text()),
        sa.Column('area', sa.Float()),
        sa.Column('bedrooms', sa.Integer()),
        sa.Column('bathrooms', sa.Integer()),
        sa.Column('facilities', sa.Text()),
        sa.Column('facilities_bn', sa.Text()),
        sa.Column('description', sa.Text()),
        sa.Column('contact_name', sa.String(255)),
        sa.Column('contact_phone', sa.String(64), nullable=False),
        sa.Column('contact_email', sa.String(255)),
        sa.Column('latitude', sa.Float()),
        sa.Column('longitude', sa.Float()),
    )
    _submittable_indexes('to_lets')

    op.create_table(
        'businesses',
        *_submittable_columns(),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('name_bn', sa.String(255)),
        sa.Column('business_type', sa.String(32), nullable=False),
        sa.Column('address', sa.Text()),
        sa.Column('address_bn', sa.Text()),
        sa.Column('phone', sa.String(64), nullable=False),
        sa.Column('email', sa.String(255)),
        sa.Column('website', sa.String(500)),
        sa.Column('description', sa.Text()),
        sa.Column('description_bn', sa.Text()),
        sa.Column('opening_hours', sa.String(255)),
        sa.Column('specialties', sa.Text()),
        sa.Column('latitude', sa.Float()),
        sa.Column('longitude', sa.Float()),
    )
    _submittable_indexes('businesses')

    op.create_table(
        'tourist_places',
        *_submittable_columns(),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('name_bn', sa.String(255)),
        sa.Column('place_type', sa.String(32), nullable=False, server_default='HISTORICAL'),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('description_bn', sa.Text()),
        sa.Column('address', sa.Text()),
        sa.Column('address_bn', sa.Text()),
        sa.Column('phone', sa.String(64)),
        sa.Column('email', sa.String(255)),
        sa.Column('website', sa.String(500)),
        sa.Column('features', sa.Text()),
        sa.Column('features_bn', sa.Text()),
        sa.Column('entry_fee', sa.String(120)),
        sa.Column('opening_hours', sa.String(255)),
        sa.Column('best_time_to_visit', sa.String(255)),
        sa.Column('image_url', sa.String(1000)),
        sa.Column('latitude', sa.Float()),
        sa.Column('longitude', sa.Float()),
    )
    _submittable_indexes('tourist_places')

    op.create_table(
        'blogs',
        *_submittable_columns(),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('title_bn', sa.String(255)),
        sa.Column('slug', sa.String(160), unique=True, nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('content_bn', sa.Text()),
        sa.Column('excerpt', sa.Text()),
        sa.Column('featured_image', sa.String(1000)),
        sa.Column('tags', sa.JSON(), nullable=False),
        sa.Column('published_at', sa.DateTime(timezone=True), nullable=True),
    )
    _submittable_indexes('blogs')

    op.create_table(
        'access_requests',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('requested_user_types', sa.JSON(), nullable=False),
        sa.Column('note', sa.Text()),
        _status(),
        sa.Column('admin_note', sa.Text()),
        sa.Column('reviewed_by_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('reviewed_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index('idx_access_requests_user_id', 'access_requests', ['user_id'])
    op.create_index('idx_access_requests_status', 'access_requests', ['status'])

    op.create_table(
        'sliders',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('title_bn', sa.String(255)),
        sa.Column('description', sa.Text()),
        sa.Column('description_bn', sa.Text()),
        sa.Column('image_url', sa.String(1000), nullable=False),
        sa.Column('link_url', sa.String(1000)),
        sa.Column('button_text', sa.String(120)),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('display_order', sa.Integer(), nullable=False, server_default='0'),
        *_timestamps(),
    )

    op.create_table(
        'site_settings',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('key', sa.String(120), unique=True, nullable=False),
        sa.Column('value', sa.Text(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        'audit_events',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('event_type', sa.String(64), nullable=False),
        sa.Column('entity_type', sa.String(64), nullable=False),
        sa.Column('entity_id', sa.Integer(), nullable=False),
        sa.Column('actor_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('from_status', sa.String(32), nullable=True),
        sa.Column('to_status', sa.String(32), nullable=True),
        sa.Column('payload', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('idx_audit_events_entity', 'audit_events', ['entity_type', 'entity_id'])


def downgrade() -> None:
    for table in (
        'audit_events',
        'site_settings',
        'sliders',
        'access_requests',
        'blogs',
        'tourist_places',
        'businesses',
        'to_lets',
        'home_tutors',
        'hospitals',
        'upazilas',
        'users',
    ):
        op.drop_table(table)
