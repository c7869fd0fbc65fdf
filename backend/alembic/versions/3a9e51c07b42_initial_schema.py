"""initial schema

Revision ID: 3a9e51c07b42
Revises:
Create Date: 2026-10-19

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3a9e51c07b42'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('kana', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password', sa.String(length=255), nullable=False),
        sa.Column('postal_code', sa.String(length=7), nullable=False),
        sa.Column('address', sa.String(length=255), nullable=False),
        sa.Column('phone_number', sa.String(length=11), nullable=False),
        sa.Column('birthday', sa.Date(), nullable=True),
        sa.Column('occupation', sa.String(length=255), nullable=True),
        sa.Column('stripe_id', sa.String(length=255), nullable=True),
        sa.Column('pm_type', sa.String(length=32), nullable=True),
        sa.Column('pm_last_four', sa.String(length=4), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    op.create_index(op.f('ix_users_stripe_id'), 'users', ['stripe_id'], unique=False)

    op.create_table(
        'admins',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_admins_email'), 'admins', ['email'], unique=True)

    op.create_table(
        'auth_sessions',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('realm', sa.String(length=16), nullable=False),
        sa.Column('subject_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('revoked_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_auth_sessions_subject_id'), 'auth_sessions', ['subject_id'], unique=False)

    op.create_table(
        'categories',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'regular_holidays',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('day', sa.String(length=32), nullable=False),
        sa.Column('day_index', sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'restaurants',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('image', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('lowest_price', sa.Integer(), nullable=False),
        sa.Column('highest_price', sa.Integer(), nullable=False),
        sa.Column('postal_code', sa.String(length=7), nullable=False),
        sa.Column('address', sa.String(length=255), nullable=False),
        sa.Column('opening_time', sa.Time(), nullable=False),
        sa.Column('closing_time', sa.Time(), nullable=False),
        sa.Column('seating_capacity', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'category_restaurant',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('restaurant_id', sa.Integer(), nullable=False),
        sa.Column('category_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['restaurant_id'], ['restaurants.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['category_id'], ['categories.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('restaurant_id', 'category_id', name='uq_category_restaurant'),
    )
    op.create_index(op.f('ix_category_restaurant_restaurant_id'), 'category_restaurant', ['restaurant_id'], unique=False)
    op.create_index(op.f('ix_category_restaurant_category_id'), 'category_restaurant', ['category_id'], unique=False)

    op.create_table(
        'regular_holiday_restaurant',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('restaurant_id', sa.Integer(), nullable=False),
        sa.Column('regular_holiday_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['restaurant_id'], ['restaurants.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['regular_holiday_id'], ['regular_holidays.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('restaurant_id', 'regular_holiday_id', name='uq_regular_holiday_restaurant'),
    )
    op.create_index(op.f('ix_regular_holiday_restaurant_restaurant_id'), 'regular_holiday_restaurant', ['restaurant_id'], unique=False)
    op.create_index(op.f('ix_regular_holiday_restaurant_regular_holiday_id'), 'regular_holiday_restaurant', ['regular_holiday_id'], unique=False)

    op.create_table(
        'restaurant_user',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('restaurant_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['restaurant_id'], ['restaurants.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('restaurant_id', 'user_id', name='uq_restaurant_user'),
    )
    op.create_index(op.f('ix_restaurant_user_restaurant_id'), 'restaurant_user', ['restaurant_id'], unique=False)
    op.create_index(op.f('ix_restaurant_user_user_id'), 'restaurant_user', ['user_id'], unique=False)

    op.create_table(
        'reservations',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('reserved_datetime', sa.DateTime(), nullable=False),
        sa.Column('number_of_people', sa.Integer(), nullable=False),
        sa.Column('restaurant_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['restaurant_id'], ['restaurants.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_reservations_reserved_datetime'), 'reservations', ['reserved_datetime'], unique=False)
    op.create_index(op.f('ix_reservations_restaurant_id'), 'reservations', ['restaurant_id'], unique=False)
    op.create_index(op.f('ix_reservations_user_id'), 'reservations', ['user_id'], unique=False)

    op.create_table(
        'reviews',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('score', sa.Float(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('restaurant_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['restaurant_id'], ['restaurants.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_reviews_restaurant_id'), 'reviews', ['restaurant_id'], unique=False)
    op.create_index(op.f('ix_reviews_user_id'), 'reviews', ['user_id'], unique=False)

    op.create_table(
        'subscriptions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('type', sa.String(length=64), nullable=False),
        sa.Column('stripe_id', sa.String(length=255), nullable=False),
        sa.Column('stripe_status', sa.String(length=32), nullable=False),
        sa.Column('stripe_price', sa.String(length=255), nullable=True),
        sa.Column('quantity', sa.Integer(), nullable=True),
        sa.Column('ends_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('stripe_id'),
    )
    op.create_index(op.f('ix_subscriptions_user_id'), 'subscriptions', ['user_id'], unique=False)

    op.create_table(
        'companies',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('postal_code', sa.String(length=7), nullable=False),
        sa.Column('address', sa.String(length=255), nullable=False),
        sa.Column('representative', sa.String(length=255), nullable=False),
        sa.Column('establishment_date', sa.String(length=255), nullable=False),
        sa.Column('capital', sa.String(length=255), nullable=False),
        sa.Column('business', sa.String(length=255), nullable=False),
        sa.Column('number_of_employees', sa.String(length=255), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'terms',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )


def downgrade() -> None:
    op.drop_table('terms')
    op.drop_table('companies')
    op.drop_index(op.f('ix_subscriptions_user_id'), table_name='subscriptions')
    op.drop_table('subscriptions')
    op.drop_index(op.f('ix_reviews_user_id'), table_name='reviews')
    op.drop_index(op.f('ix_reviews_restaurant_id'), table_name='reviews')
    op.drop_table('reviews')
    op.drop_index(op.f('ix_reservations_user_id'), table_name='reservations')
    op.drop_index(op.f('ix_reservations_restaurant_id'), table_name='reservations')
    op.drop_index(op.f('ix_reservations_reserved_datetime'), table_name='reservations')
    op.drop_table('reservations')
    op.drop_index(op.f('ix_restaurant_user_user_id'), table_name='restaurant_user')
    op.drop_index(op.f('ix_restaurant_user_restaurant_id'), table_name='restaurant_user')
    op.drop_table('restaurant_user')
    op.drop_index(op.f('ix_regular_holiday_restaurant_regular_holiday_id'), table_name='regular_holiday_restaurant')
    op.drop_index(op.f('ix_regular_holiday_restaurant_restaurant_id'), table_name='regular_holiday_restaurant')
    op.drop_table('regular_holiday_restaurant')
    op.drop_index(op.f('ix_category_restaurant_category_id'), table_name='category_restaurant')
    op.drop_index(op.f('ix_category_restaurant_restaurant_id'), table_name='category_restaurant')
    op.drop_table('category_restaurant')
    op.drop_table('restaurants')
    op.drop_table('regular_holidays')
    op.drop_table('categories')
    op.drop_index(op.f('ix_auth_sessions_subject_id'), table_name='auth_sessions')
    op.drop_table('auth_sessions')
    op.drop_index(op.f('ix_admins_email'), table_name='admins')
    op.drop_table('admins')
    op.drop_index(op.f('ix_users_stripe_id'), table_name='users')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_table('users')
