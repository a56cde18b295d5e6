"""users, exercise catalog, workout logs/exercises/sets

Revision ID: 5b1f0c2a7d3e
Revises:
Create Date: 2026-10-19 10:12:04.118392

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '5b1f0c2a7d3e'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('first_name', sa.String(length=40), nullable=True),
        sa.Column('last_name', sa.String(length=40), nullable=True),
        sa.Column('password_hash', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    # per-user catalog, one row per normalized name
    op.create_table(
        'exercises',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('normalized_name', sa.String(length=120), nullable=False),
        sa.Column('last_performed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.UniqueConstraint('user_id', 'normalized_name', name='uq_exercise_user_name'),
    )
    op.create_index('ix_exercises_user_id', 'exercises', ['user_id'])

    op.create_table(
        'workout_logs',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.String(length=120), nullable=False),
        sa.Column('performed_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('total_weight_lb', sa.Numeric(12, 2), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
    )
    op.create_index('ix_workout_logs_user_id', 'workout_logs', ['user_id'])
    op.create_index('ix_workout_logs_performed_at', 'workout_logs', ['performed_at'])

    op.create_table(
        'workout_exercises',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('workout_log_id', sa.Integer(), sa.ForeignKey('workout_logs.id', ondelete='CASCADE'), nullable=False),
        sa.Column('exercise_id', sa.Integer(), sa.ForeignKey('exercises.id', ondelete='SET NULL'), nullable=True),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('normalized_name', sa.String(length=120), nullable=False),
        sa.Column('order', sa.Integer(), nullable=False),
        sa.UniqueConstraint('workout_log_id', 'order', name='uq_workout_exercise_order'),
    )
    op.create_index('ix_workout_exercises_workout_log_id', 'workout_exercises', ['workout_log_id'])
    op.create_index('ix_workout_exercises_normalized_name', 'workout_exercises', ['normalized_name'])

    op.create_table(
        'workout_sets',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('workout_exercise_id', sa.Integer(), sa.ForeignKey('workout_exercises.id', ondelete='CASCADE'), nullable=False),
        sa.Column('order', sa.Integer(), nullable=False),
        sa.Column('reps', sa.Integer(), nullable=False),
        sa.Column('weight_lb', sa.Numeric(10, 2), nullable=True),
        sa.UniqueConstraint('workout_exercise_id', 'order', name='uq_workout_set_order'),
    )
    op.create_index('ix_workout_sets_workout_exercise_id', 'workout_sets', ['workout_exercise_id'])


def downgrade() -> None:
    op.drop_index('ix_workout_sets_workout_exercise_id', table_name='workout_sets')
    op.drop_table('workout_sets')
    op.drop_index('ix_workout_exercises_normalized_name', table_name='workout_exercises')
    op.drop_index('ix_workout_exercises_workout_log_id', table_name='workout_exercises')
    op.drop_table('workout_exercises')
    op.drop_index('ix_workout_logs_performed_at', table_name='workout_logs')
    op.drop_index('ix_workout_logs_user_id', table_name='workout_logs')
    op.drop_table('workout_logs')
    op.drop_index('ix_exercises_user_id', table_name='exercises')
    op.drop_table('exercises')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_index('ix_users_id', table_name='users')
    op.drop_table('users')
