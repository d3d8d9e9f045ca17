"""Initial CRM schema

Revision ID: 4b7e21c9d0a1
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '4b7e21c9d0a1'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


ENUM_NAMES = (
    'userrole', 'authprovider', 'propertytype', 'listingstate', 'propertystatus',
    'customerstatus', 'customerpriority', 'leadsource', 'agentavailability',
    'taskstatus', 'taskpriority', 'taskcategory',
    'notificationtype', 'notificationpriority', 'entitytype',
)


def _jsonb():
    return postgresql.JSONB(astext_type=sa.Text())


def upgrade() -> None:
    op.create_table('users',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('hashed_password', sa.String(length=255), nullable=True),
        sa.Column('role', sa.Enum('SUPER_ADMIN', 'ADMIN', 'AGENT', 'USER', name='userrole'), nullable=False),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('address', sa.String(length=500), nullable=True),
        sa.Column('firebase_uid', sa.String(length=128), nullable=True),
        sa.Column('photo_url', sa.String(length=1000), nullable=True),
        sa.Column('auth_provider', sa.Enum('GOOGLE', 'EMAIL', 'JWT', name='authprovider'), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('last_login', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('firebase_uid')
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    op.create_index(op.f('ix_users_role'), 'users', ['role'], unique=False)

    op.create_table('properties',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('name', sa.String(length=500), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('property_type', sa.Enum(
            'LAND', 'BUILDING', 'HOUSE', 'APARTMENT', 'COMMERCIAL', 'VILLA', 'PENTHOUSE', 'CONDO', 'TOWNHOUSE',
            name='propertytype'), nullable=False),
        sa.Column('state', sa.Enum('SOLD', 'PREMIUM', 'SELL', 'RENT', name='listingstate'), nullable=False),
        sa.Column('status', sa.Enum('AVAILABLE', 'UNDER_CONTRACT', 'SOLD', 'RENTED', name='propertystatus'), nullable=False),
        sa.Column('price', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column('location', sa.String(length=500), nullable=False),
        sa.Column('address', sa.String(length=500), nullable=True),
        sa.Column('city', sa.String(length=255), nullable=True),
        sa.Column('square_feet', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('bedrooms', sa.Integer(), nullable=False),
        sa.Column('bathrooms', sa.Integer(), nullable=False),
        sa.Column('parking_spaces', sa.Integer(), nullable=False),
        sa.Column('year_built', sa.Integer(), nullable=True),
        sa.Column('images', _jsonb(), nullable=False),
        sa.Column('features', _jsonb(), nullable=False),
        sa.Column('amenities', _jsonb(), nullable=False),
        sa.Column('uploaded_by_id', sa.UUID(), nullable=False),
        sa.Column('assigned_agent_id', sa.UUID(), nullable=True),
        sa.Column('published_to_frontend', sa.Boolean(), nullable=False),
        sa.Column('view_count', sa.Integer(), nullable=False),
        sa.Column('inquiry_count', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['uploaded_by_id'], ['users.id'], ),
        sa.ForeignKeyConstraint(['assigned_agent_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_property_type_state_status', 'properties', ['property_type', 'state', 'status'], unique=False)
    op.create_index(op.f('ix_properties_property_type'), 'properties', ['property_type'], unique=False)
    op.create_index(op.f('ix_properties_status'), 'properties', ['status'], unique=False)
    op.create_index(op.f('ix_properties_price'), 'properties', ['price'], unique=False)
    op.create_index(op.f('ix_properties_city'), 'properties', ['city'], unique=False)
    op.create_index(op.f('ix_properties_uploaded_by_id'), 'properties', ['uploaded_by_id'], unique=False)
    op.create_index(op.f('ix_properties_assigned_agent_id'), 'properties', ['assigned_agent_id'], unique=False)
    op.create_index(op.f('ix_properties_published_to_frontend'), 'properties', ['published_to_frontend'], unique=False)
    op.create_index(op.f('ix_properties_created_at'), 'properties', ['created_at'], unique=False)

    op.create_table('customers',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('phone', sa.String(length=50), nullable=False),
        sa.Column('address', sa.String(length=500), nullable=True),
        sa.Column('budget_min', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column('budget_max', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column('preferred_locations', _jsonb(), nullable=False),
        sa.Column('property_types', _jsonb(), nullable=False),
        sa.Column('assigned_agent_id', sa.UUID(), nullable=True),
        sa.Column('added_by_id', sa.UUID(), nullable=False),
        sa.Column('status', sa.Enum(
            'NEW', 'CONTACTED', 'INTERESTED', 'NEGOTIATING', 'CLOSED', 'LOST', 'NEED_FLAT',
            name='customerstatus'), nullable=False),
        sa.Column('priority', sa.Enum('LOW', 'MEDIUM', 'HIGH', name='customerpriority'), nullable=False),
        sa.Column('source', sa.Enum(
            'WEBSITE', 'REFERRAL', 'SOCIAL_MEDIA', 'WALK_IN', 'CALL', 'OTHER',
            name='leadsource'), nullable=False),
        sa.Column('last_contact_date', sa.DateTime(), nullable=True),
        sa.Column('next_follow_up_date', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['assigned_agent_id'], ['users.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['added_by_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_customer_status_priority', 'customers', ['status', 'priority'], unique=False)
    op.create_index(op.f('ix_customers_assigned_agent_id'), 'customers', ['assigned_agent_id'], unique=False)
    op.create_index(op.f('ix_customers_added_by_id'), 'customers', ['added_by_id'], unique=False)
    op.create_index(op.f('ix_customers_created_at'), 'customers', ['created_at'], unique=False)

    op.create_table('customer_notes',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('customer_id', sa.UUID(), nullable=False),
        sa.Column('note', sa.Text(), nullable=False),
        sa.Column('added_by_id', sa.UUID(), nullable=True),
        sa.Column('added_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['customer_id'], ['customers.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['added_by_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_customer_notes_customer_id'), 'customer_notes', ['customer_id'], unique=False)

    op.create_table('customer_interested_properties',
        sa.Column('customer_id', sa.UUID(), nullable=False),
        sa.Column('property_id', sa.UUID(), nullable=False),
        sa.ForeignKeyConstraint(['customer_id'], ['customers.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['property_id'], ['properties.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('customer_id', 'property_id')
    )

    op.create_table('agents',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('user_id', sa.UUID(), nullable=False),
        sa.Column('license_number', sa.String(length=100), nullable=True),
        sa.Column('specialization', _jsonb(), nullable=False),
        sa.Column('experience', sa.Integer(), nullable=False),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('managed_by_id', sa.UUID(), nullable=True),
        sa.Column('total_sales', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column('total_commission', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column('closed_deals', sa.Integer(), nullable=False),
        sa.Column('active_deals', sa.Integer(), nullable=False),
        sa.Column('customer_satisfaction_rating', sa.Numeric(precision=3, scale=2), nullable=False),
        sa.Column('availability', sa.Enum('AVAILABLE', 'BUSY', 'UNAVAILABLE', name='agentavailability'), nullable=False),
        sa.Column('working_hours', _jsonb(), nullable=True),
        sa.Column('commission_rate', sa.Numeric(precision=5, scale=2), nullable=False),
        sa.Column('social_media', _jsonb(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['managed_by_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_agents_user_id'), 'agents', ['user_id'], unique=True)
    op.create_index(op.f('ix_agents_managed_by_id'), 'agents', ['managed_by_id'], unique=False)
    op.create_index(op.f('ix_agents_availability'), 'agents', ['availability'], unique=False)

    op.create_table('agent_properties',
        sa.Column('agent_id', sa.UUID(), nullable=False),
        sa.Column('property_id', sa.UUID(), nullable=False),
        sa.Column('assigned_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['agent_id'], ['agents.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['property_id'], ['properties.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('agent_id', 'property_id')
    )

    op.create_table('agent_customers',
        sa.Column('agent_id', sa.UUID(), nullable=False),
        sa.Column('customer_id', sa.UUID(), nullable=False),
        sa.Column('assigned_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['agent_id'], ['agents.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['customer_id'], ['customers.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('agent_id', 'customer_id')
    )

    op.create_table('tasks',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('title', sa.String(length=500), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', sa.Enum('PENDING', 'IN_PROGRESS', 'COMPLETED', 'CANCELLED', name='taskstatus'), nullable=False),
        sa.Column('priority', sa.Enum('LOW', 'MEDIUM', 'HIGH', 'URGENT', name='taskpriority'), nullable=False),
        sa.Column('category', sa.Enum(
            'FOLLOW_UP', 'MEETING', 'DOCUMENTATION', 'PROPERTY_SHOWING', 'NEGOTIATION', 'OTHER',
            name='taskcategory'), nullable=False),
        sa.Column('created_by_id', sa.UUID(), nullable=False),
        sa.Column('assigned_to_id', sa.UUID(), nullable=False),
        sa.Column('due_date', sa.DateTime(), nullable=True),
        sa.Column('completed_date', sa.DateTime(), nullable=True),
        sa.Column('reminder', sa.DateTime(), nullable=True),
        sa.Column('reminder_sent', sa.Boolean(), nullable=False),
        sa.Column('related_property_id', sa.UUID(), nullable=True),
        sa.Column('related_customer_id', sa.UUID(), nullable=True),
        sa.Column('tags', _jsonb(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['created_by_id'], ['users.id'], ),
        sa.ForeignKeyConstraint(['assigned_to_id'], ['users.id'], ),
        sa.ForeignKeyConstraint(['related_property_id'], ['properties.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['related_customer_id'], ['customers.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_task_assignee_status', 'tasks', ['assigned_to_id', 'status'], unique=False)
    op.create_index('idx_task_status_priority', 'tasks', ['status', 'priority'], unique=False)
    op.create_index(op.f('ix_tasks_created_by_id'), 'tasks', ['created_by_id'], unique=False)
    op.create_index(op.f('ix_tasks_due_date'), 'tasks', ['due_date'], unique=False)
    op.create_index(op.f('ix_tasks_created_at'), 'tasks', ['created_at'], unique=False)

    op.create_table('subtasks',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('task_id', sa.UUID(), nullable=False),
        sa.Column('title', sa.String(length=500), nullable=False),
        sa.Column('completed', sa.Boolean(), nullable=False),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['task_id'], ['tasks.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_subtasks_task_id'), 'subtasks', ['task_id'], unique=False)

    op.create_table('task_comments',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('task_id', sa.UUID(), nullable=False),
        sa.Column('text', sa.Text(), nullable=False),
        sa.Column('added_by_id', sa.UUID(), nullable=True),
        sa.Column('added_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['task_id'], ['tasks.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['added_by_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_task_comments_task_id'), 'task_comments', ['task_id'], unique=False)

    op.create_table('notifications',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('recipient_id', sa.UUID(), nullable=False),
        sa.Column('type', sa.Enum(
            'TASK_ASSIGNED', 'TASK_COMPLETED', 'TASK_OVERDUE', 'PROPERTY_ADDED', 'PROPERTY_ASSIGNED',
            'PROPERTY_SOLD', 'CUSTOMER_ASSIGNED', 'CUSTOMER_ADDED', 'CUSTOMER_MESSAGE', 'AGENT_ADDED',
            'HIGH_VALUE_LEAD', 'DEAL_CLOSED', 'URGENT_TASK',
            name='notificationtype'), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('priority', sa.Enum('LOW', 'MEDIUM', 'HIGH', 'URGENT', name='notificationpriority'), nullable=False),
        sa.Column('is_read', sa.Boolean(), nullable=False),
        sa.Column('entity_type', sa.Enum('TASK', 'PROPERTY', 'CUSTOMER', 'USER', 'AGENT', name='entitytype'), nullable=True),
        sa.Column('entity_id', sa.UUID(), nullable=True),
        sa.Column('action_url', sa.String(length=500), nullable=True),
        sa.Column('metadata', _jsonb(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['recipient_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_notification_recipient_read', 'notifications', ['recipient_id', 'is_read', 'created_at'], unique=False)
    op.create_index(op.f('ix_notifications_recipient_id'), 'notifications', ['recipient_id'], unique=False)
    op.create_index(op.f('ix_notifications_created_at'), 'notifications', ['created_at'], unique=False)


def downgrade() -> None:
    for table in (
        'notifications', 'task_comments', 'subtasks', 'tasks',
        'agent_customers', 'agent_properties', 'agents',
        'customer_interested_properties', 'customer_notes', 'customers',
        'properties', 'users',
    ):
        op.drop_table(table)

    bind = op.get_bind()
    for name in ENUM_NAMES:
        postgresql.ENUM(name=name).drop(bind, checkfirst=True)
